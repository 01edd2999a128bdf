"""
Error kinds raised by the identity core.

Every kind carries a stable ``code`` and the HTTP ``status_code`` the boundary
layer renders it with. Kinds are never conflated: ``InvalidCredentials`` is the
same for an unknown email and a wrong password, while ``SocialOnlyAccount``
is deliberately distinct so the user is pointed at the right login method.
"""
from __future__ import annotations


class AuthError(Exception):
    """Base class for identity/auth failures."""

    code = "AUTH_ERROR"
    status_code = 400
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidCredentials(AuthError):
    code = "INVALID_CREDENTIALS"
    status_code = 401
    default_message = "Invalid credentials"


class SocialOnlyAccount(AuthError):
    code = "SOCIAL_ONLY_ACCOUNT"
    status_code = 401
    default_message = "This account uses social login. Please sign in with Google or GitHub."


class EmailTaken(AuthError):
    code = "EMAIL_TAKEN"
    status_code = 409
    default_message = "Email already exists"


class PasswordRequired(AuthError):
    code = "PASSWORD_REQUIRED"
    status_code = 400
    default_message = "Password is required for email signup"


class InvalidToken(AuthError):
    code = "INVALID_TOKEN"
    status_code = 401
    default_message = "Invalid provider token"


class NoVerifiedEmail(AuthError):
    code = "NO_VERIFIED_EMAIL"
    status_code = 401
    default_message = "No verified email found in GitHub account"


class ProviderIdentityConflict(AuthError):
    code = "PROVIDER_IDENTITY_CONFLICT"
    status_code = 409
    default_message = "This provider account is already linked to another account"


class AlreadyLinked(AuthError):
    code = "ALREADY_LINKED"
    status_code = 409
    default_message = "Provider is already linked to this organizer"


class ProviderTaken(AuthError):
    code = "PROVIDER_TAKEN"
    status_code = 409
    default_message = "This provider account is already linked to another organizer"


class NotLinked(AuthError):
    code = "NOT_LINKED"
    status_code = 400
    default_message = "Provider is not linked to this account"


class LastMethodRemaining(AuthError):
    code = "LAST_METHOD_REMAINING"
    status_code = 400
    default_message = (
        "Cannot unlink the last authentication method. "
        "You must have at least one way to access your account."
    )


class SessionExpired(AuthError):
    code = "SESSION_EXPIRED"
    status_code = 401
    default_message = "Session expired. Please log in again."


class SessionInvalid(AuthError):
    code = "SESSION_INVALID"
    status_code = 401
    default_message = "Invalid session token"


class NotFound(AuthError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Organizer not found"


class Conflict(AuthError):
    """Raw store uniqueness violation.

    ``field`` names the violated constraint when it could be recognized:
    ``"email"``, ``"provider_identity"`` or ``"organizer_provider"``.
    """

    code = "CONFLICT"
    status_code = 409
    default_message = "Uniqueness constraint violated"

    def __init__(self, message: str | None = None, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class UnsupportedProvider(AuthError):
    code = "UNSUPPORTED_PROVIDER"
    status_code = 400
    default_message = "Unsupported provider"


class OAuthStateInvalid(AuthError):
    code = "OAUTH_STATE_INVALID"
    status_code = 400
    default_message = "Invalid or expired OAuth state"
