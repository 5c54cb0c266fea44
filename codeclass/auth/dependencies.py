import logging
from datetime import timedelta
from functools import lru_cache
from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from codeclass.auth.errors import (
    AuthError,
    DuplicateEmail,
    Forbidden,
    InternalError,
    InvalidCredentials,
    Unauthorized,
    ValidationError,
)
from codeclass.auth.jwt_handler import TokenClaims, TokenIssuer
from codeclass.auth.password import PasswordHasher
from codeclass.auth.service import AuthService
from codeclass.auth.store import CredentialStore
from codeclass.core import config
from codeclass.database import get_db
from codeclass.models.user import Role

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Checked in order, so subclasses resolve to their own entry first.
ERROR_STATUS_CODES: list[tuple[type[AuthError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateEmail, status.HTTP_409_CONFLICT),
    (InvalidCredentials, status.HTTP_401_UNAUTHORIZED),
    (Unauthorized, status.HTTP_401_UNAUTHORIZED),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def to_http_exception(exc: AuthError) -> HTTPException:
    for error_kind, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_kind):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        return HTTPException(status_code=status_code, detail=InternalError.default_message)
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return HTTPException(status_code=status_code, detail=exc.message, headers={"WWW-Authenticate": "Bearer"})
    return HTTPException(status_code=status_code, detail=exc.message)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
        default_ttl=timedelta(minutes=config.JWT_EXPIRES_MINUTES),
    )


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=config.BCRYPT_ROUNDS)


def get_auth_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(
        CredentialStore(db),
        hasher,
        issuer,
        token_ttl=timedelta(minutes=config.JWT_EXPIRES_MINUTES),
    )


def get_current_claims(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise to_http_exception(Unauthorized())

    try:
        claims = issuer.verify(credentials.credentials)
    except Unauthorized as exc:
        logger.info("Rejected bearer token: %s", exc.message)
        raise to_http_exception(Unauthorized("Invalid or expired token.")) from exc

    request.state.claims = claims
    return claims


def require_role(*roles: Role) -> Callable[..., TokenClaims]:
    allowed = frozenset(roles)

    def dependency(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if claims.role not in allowed:
            raise to_http_exception(Forbidden())
        return claims

    return dependency
