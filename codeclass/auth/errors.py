"""Error kinds raised by the authentication layer.

Each operation raises exactly one of these; the HTTP layer maps the kind to a
status code with ``codeclass.auth.dependencies.to_http_exception``.
"""


class AuthError(Exception):
    """Base class for every authentication outcome other than success."""

    default_message = "Authentication error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    default_message = "Invalid request."


class DuplicateEmail(AuthError):
    default_message = "Email is already registered."


class InvalidCredentials(AuthError):
    default_message = "Invalid email or password."


class Unauthorized(AuthError):
    default_message = "Not authenticated."


class InvalidSignature(Unauthorized):
    default_message = "Invalid token."


class TokenExpired(Unauthorized):
    default_message = "Token has expired."


class Forbidden(AuthError):
    default_message = "You do not have permission to perform this action."


class InternalError(AuthError):
    default_message = "Internal server error."
