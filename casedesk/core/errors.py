"""
Error taxonomy shared by the repositories, services and API.

Every error carries a human-readable ``user_message`` for the presentation
layer and the HTTP status the API answers with.
"""

from typing import Optional


class CaseDeskError(Exception):
    status_code: int = 500
    default_message: str = "Unexpected error."

    def __init__(self, user_message: Optional[str] = None, *, detail: Optional[str] = None):
        self.user_message = user_message or self.default_message
        self.detail = detail
        super().__init__(detail or self.user_message)


class AuthError(CaseDeskError):
    status_code = 401
    default_message = "Authentication failed."


class InvalidCredentials(AuthError):
    default_message = "Incorrect email or password."


class EmailNotConfirmed(AuthError):
    default_message = "Email not confirmed. Check your inbox for the confirmation link."


class AlreadyRegistered(AuthError):
    status_code = 409
    default_message = "This email is already registered."


class ValidationError(CaseDeskError):
    status_code = 422
    default_message = "Required information is missing or invalid."


class EmptyContent(ValidationError):
    default_message = "Message cannot be empty."


class PolicyDenied(CaseDeskError):
    status_code = 403
    default_message = "You do not have permission to perform this action."


class NotFound(CaseDeskError):
    status_code = 404
    default_message = "The requested record no longer exists."


class StoreError(CaseDeskError):
    status_code = 502
    default_message = "Could not reach the database. Check your connection."


class UploadError(StoreError):
    default_message = "Could not upload the file."
