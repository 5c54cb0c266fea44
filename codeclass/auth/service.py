"""Registration and login.

The service holds no per-request state: every call receives its inputs,
consults the credential store, and either returns a result or raises one of
the error kinds from ``codeclass.auth.errors``.
"""

import logging
import re
from datetime import timedelta

from codeclass.auth.errors import InvalidCredentials, ValidationError
from codeclass.auth.jwt_handler import DEFAULT_TOKEN_TTL, TokenIssuer
from codeclass.auth.password import MAX_PASSWORD_BYTES, PasswordHasher
from codeclass.auth.store import CredentialStore, normalize_email
from codeclass.models.user import Role, User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required.")
    return value


def _require_utf8(value: str, field: str) -> bytes:
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValidationError(f"{field} must be valid UTF-8.") from exc


def parse_role(value: str | Role | None) -> Role:
    if isinstance(value, Role):
        return value
    normalized = _require(value, "role").strip().lower()
    try:
        return Role(normalized)
    except ValueError as exc:
        allowed = ", ".join(role.value for role in Role)
        raise ValidationError(f"role must be one of: {allowed}.") from exc


class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
    ):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.token_ttl = token_ttl

    def prepare_user(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        role: str | Role | None,
    ) -> User:
        """Validate and normalize the registration fields and hash the password.

        Returns an unsaved ``User``; the plaintext password goes no further.
        """
        name = _require(name, "name").strip()
        email = normalize_email(_require(email, "email"))
        password = _require(password, "password")
        parsed_role = parse_role(role)

        _require_utf8(name, "name")
        _require_utf8(email, "email")
        password_bytes = _require_utf8(password, "password")

        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"name must be {MAX_NAME_LENGTH} characters or fewer.")
        if len(email) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(email):
            raise ValidationError("email must be a valid email address.")
        if len(password_bytes) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"password must be {MAX_PASSWORD_BYTES} bytes or fewer.")

        return User(
            name=name,
            email=email,
            hashed_password=self.hasher.hash(password),
            role=parsed_role,
        )

    def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        role: str | Role | None,
    ) -> User:
        user = self.store.create(self.prepare_user(name, email, password, role))
        logger.info("Registered %s as %s (id=%s).", user.email, user.role.value, user.id)
        return user

    def login(self, email: str | None, password: str | None) -> str:
        email = _require(email, "email")
        password = _require(password, "password")
        # Checked before the lookup so the outcome does not depend on the email.
        _require_utf8(email, "email")
        _require_utf8(password, "password")

        user = self.store.find_by_email(email)
        if user is None:
            self.hasher.dummy_verify(password)
            verified = False
        else:
            verified = self.hasher.verify(password, user.hashed_password)

        if not verified:
            logger.info("Rejected login for %s.", normalize_email(email))
            raise InvalidCredentials()

        token = self.issuer.create_access_token(user.id, user.role, ttl=self.token_ttl)
        logger.info("Login: %s (id=%s).", user.email, user.id)
        return token
