from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from codeclass.auth.dependencies import get_auth_service, get_current_claims, to_http_exception
from codeclass.auth.errors import AuthError, Unauthorized
from codeclass.auth.jwt_handler import TokenClaims
from codeclass.auth.service import AuthService

router = APIRouter(tags=['auth'])


# Fields are optional here so that missing values are reported by the
# service as ValidationError (400) rather than by FastAPI as 422.
class RegisterRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class RegisterResponse(BaseModel):
    message: str
    id: int


class TokenResponse(BaseModel):
    token: str
    token_type: str = 'bearer'


class CurrentUserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str


# Plain ``def`` handlers run in the worker thread pool, which keeps bcrypt
# off the event loop.
@router.post('/register', response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    try:
        user = service.register(
            name=data.name,
            email=data.email,
            password=data.password,
            role=data.role,
        )
    except AuthError as exc:
        raise to_http_exception(exc) from exc

    return RegisterResponse(message='User registered successfully.', id=user.id)


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    try:
        token = service.login(email=data.email, password=data.password)
    except AuthError as exc:
        raise to_http_exception(exc) from exc

    return TokenResponse(token=token)


@router.get('/me', response_model=CurrentUserResponse)
def me(
    claims: TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    try:
        user = service.store.find_by_id(claims.user_id)
        if user is None:
            raise Unauthorized('User no longer exists.')
    except AuthError as exc:
        raise to_http_exception(exc) from exc

    return CurrentUserResponse(id=user.id, name=user.name, email=user.email, role=user.role.value)
