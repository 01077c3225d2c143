from typing import Any
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
import logging
from casedesk.api.deps import get_auth_provider, oauth2_scheme
from casedesk.core.auth import AuthProvider
from casedesk.schemas.user import SignupRequest, SignupResult, Token

logger = logging.getLogger(__name__)
router = APIRouter()

def _token(session) -> Token:
    return Token(access_token=session.access_token, refresh_token=session.refresh_token)

@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth: AuthProvider = Depends(get_auth_provider)
) -> Any:
    """
    Login using Supabase Auth.
    """
    session = await auth.sign_in(form_data.username, form_data.password)
    return _token(session)

@router.post("/register", response_model=SignupResult, status_code=status.HTTP_201_CREATED)
async def register(
    *,
    user_in: SignupRequest,
    auth: AuthProvider = Depends(get_auth_provider)
) -> Any:
    """
    Register a new user, then sign them in when the project allows it.
    """
    logger.info(f"Registration requested for {user_in.email} as {user_in.role.value}")
    session, message = await auth.sign_up_and_sign_in(
        user_in.email, user_in.password, name=user_in.name, role=user_in.role
    )
    if session is None:
        return SignupResult(signed_in=False, message=message)
    return SignupResult(signed_in=True, token=_token(session))

@router.post("/logout")
async def logout(
    token: str = Depends(oauth2_scheme),
    auth: AuthProvider = Depends(get_auth_provider)
):
    """
    Revoke the caller's session.
    """
    await auth.revoke(token)
    return {"message": "Successfully logged out"}
