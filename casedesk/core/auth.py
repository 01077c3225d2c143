from typing import Awaitable, Callable, Optional, Set
from urllib.parse import quote
import asyncio
import logging

import httpx
from supabase import AsyncClient, AuthError as SupabaseAuthError

from casedesk.core.errors import (
    AlreadyRegistered,
    AuthError,
    EmailNotConfirmed,
    InvalidCredentials,
    StoreError,
    ValidationError,
)
from casedesk.schemas.user import Role

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[object]], Awaitable[None]]

SIGNUP_NEEDS_CONFIRMATION = "Account created, but the email address must be confirmed before signing in."
SIGNUP_NEEDS_LOGIN = "Account created. Please sign in."


def default_avatar_url(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=0f1f3a&color=fff"


def translate_auth_error(error: Exception) -> AuthError:
    """
    Map a Supabase auth failure to the error shown to the user.
    """
    message = getattr(error, "message", None) or str(error)
    code = getattr(error, "code", None)

    if code == "email_not_confirmed" or "Email not confirmed" in message:
        return EmailNotConfirmed(detail=message)
    if code == "invalid_credentials" or "Invalid login credentials" in message:
        return InvalidCredentials(detail=message)
    if code in ("user_already_exists", "email_exists") or "already registered" in message:
        return AlreadyRegistered(detail=message)
    return AuthError(message, detail=message)


class AuthProvider:
    """
    Thin wrapper over ``client.auth``.

    Supabase calls session listeners synchronously; ``subscribe`` turns each
    notification into an asyncio task so listeners can reload data. ``settle``
    waits for those tasks.
    """

    def __init__(self, client: AsyncClient):
        self.client = client
        self._pending: Set[asyncio.Future] = set()

    async def sign_in(self, email: str, password: str):
        try:
            response = await self.client.auth.sign_in_with_password({
                "email": email,
                "password": password
            })
        except SupabaseAuthError as e:
            logger.warning(f"Sign-in failed for {email}: {e}")
            raise translate_auth_error(e) from e
        except httpx.HTTPError as e:
            logger.error(f"Auth service unreachable: {e}")
            raise StoreError(detail=str(e)) from e

        if response.session is None:
            raise AuthError(detail="Sign-in returned no session")
        logger.info(f"User signed in: {response.user.id if response.user else email}")
        return response.session

    async def sign_up(self, email: str, password: str, *, name: str, role: Role):
        """
        Register a user. The profile row is created from the metadata by the
        database trigger. Returns the new session, or None when the project
        requires email confirmation first.
        """
        if not name or not name.strip():
            raise ValidationError("Name is required.")
        if not email or not password:
            raise ValidationError("Email and password are required.")

        try:
            response = await self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "data": {
                        "name": name.strip(),
                        "role": Role(role).value,
                        "avatar": default_avatar_url(name.strip()),
                    }
                }
            })
        except SupabaseAuthError as e:
            logger.warning(f"Sign-up failed for {email}: {e}")
            raise translate_auth_error(e) from e
        except httpx.HTTPError as e:
            logger.error(f"Auth service unreachable: {e}")
            raise StoreError(detail=str(e)) from e

        # With confirmation enabled Supabase answers a duplicate sign-up with an
        # obfuscated user that has no identities instead of an error
        user = response.user
        if user is not None and getattr(user, "identities", None) == []:
            raise AlreadyRegistered()

        logger.info(f"User registered: {email} ({Role(role).value})")
        return response.session

    async def sign_up_and_sign_in(self, email: str, password: str, *, name: str, role: Role):
        """
        Register, then try to sign straight in.

        Returns ``(session, message)``. When the automatic sign-in fails the
        session is None and the message tells the user to sign in manually.
        """
        await self.sign_up(email, password, name=name, role=role)
        try:
            return await self.sign_in(email, password), None
        except EmailNotConfirmed:
            return None, SIGNUP_NEEDS_CONFIRMATION
        except AuthError as e:
            logger.info(f"Automatic sign-in after registration failed: {e.user_message}")
            return None, SIGNUP_NEEDS_LOGIN

    async def sign_out(self):
        try:
            await self.client.auth.sign_out()
        except SupabaseAuthError as e:
            raise translate_auth_error(e) from e

    async def revoke(self, access_token: str):
        """Sign out the session behind ``access_token`` (server side)."""
        try:
            await self.client.auth.admin.sign_out(access_token)
        except SupabaseAuthError as e:
            raise translate_auth_error(e) from e

    async def get_session(self):
        return await self.client.auth.get_session()

    async def get_user_id(self, access_token: str) -> str:
        credentials_error = AuthError("Could not validate credentials")
        try:
            response = await self.client.auth.get_user(access_token)
        except SupabaseAuthError as e:
            logger.error(f"Supabase authentication error: {e}")
            raise credentials_error from e
        except httpx.TimeoutException as e:
            raise StoreError("Authentication service timeout. Please try again.") from e
        if not response or not response.user:
            raise credentials_error
        return response.user.id

    def subscribe(self, listener: SessionListener):
        """
        Call ``listener(session)`` on every auth event (sign in, sign out,
        token refresh). Returns the Supabase subscription; call
        ``unsubscribe()`` on it to stop.
        """
        def on_change(event, session):
            logger.debug(f"Auth event: {event}")
            future = asyncio.ensure_future(listener(session))
            self._pending.add(future)
            future.add_done_callback(self._pending.discard)

        return self.client.auth.on_auth_state_change(on_change)

    async def settle(self):
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
