from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from codeclass.auth.errors import InvalidSignature, TokenExpired
from codeclass.models.user import Role

DEFAULT_TOKEN_TTL = timedelta(hours=1)
REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """Signs and verifies session tokens with a secret supplied by the caller."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        default_ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] | None = None,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty.")
        self._secret = secret
        self.algorithm = algorithm
        self.default_ttl = default_ttl
        self._clock = clock or _utc_now

    def build_claims(self, user_id: int, role: Role, ttl: timedelta | None = None) -> TokenClaims:
        # JWT NumericDate has whole-second resolution.
        issued_at = self._clock().replace(microsecond=0)
        return TokenClaims(
            user_id=user_id,
            role=Role(role),
            issued_at=issued_at,
            expires_at=issued_at + (ttl or self.default_ttl),
        )

    def issue(self, claims: TokenClaims) -> str:
        payload = {
            "sub": str(claims.user_id),
            "role": claims.role.value,
            "iat": int(claims.issued_at.timestamp()),
            "exp": int(claims.expires_at.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def create_access_token(self, user_id: int, role: Role, ttl: timedelta | None = None) -> str:
        return self.issue(self.build_claims(user_id, role, ttl))

    def verify(self, token: str) -> TokenClaims:
        # Signature and claim presence are checked by PyJWT; expiry is checked
        # afterwards against our own clock.
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": REQUIRED_CLAIMS},
            )
            claims = TokenClaims(
                user_id=int(payload["sub"]),
                role=Role(payload["role"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (jwt.InvalidTokenError, ValueError, TypeError) as exc:
            raise InvalidSignature() from exc

        if self._clock() >= claims.expires_at:
            raise TokenExpired()
        return claims
