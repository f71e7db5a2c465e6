from fastapi import APIRouter, Depends, Header

from uniforms.backend import BackendClient, get_backend
from uniforms.models.auth import AuthUser, SessionResponse, SignInRequest, SignOutResponse, SignUpRequest
from uniforms.services import session as session_service


def current_user(
    authorization: str | None = Header(default=None),
    backend: BackendClient = Depends(get_backend),
) -> AuthUser:
    """Resolve the signed-in user from the ``Authorization: Bearer`` header."""
    return session_service.verify_token(backend, authorization)


# --- Auth router ---

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up")
def sign_up(request: SignUpRequest, backend: BackendClient = Depends(get_backend)) -> SessionResponse:
    """Create an account and open a session. Mismatched confirmation never reaches the provider."""
    session = session_service.sign_up(backend, request.email, request.password, request.confirm_password)
    return SessionResponse(**session.model_dump())


@router.post("/sign-in")
def sign_in(request: SignInRequest, backend: BackendClient = Depends(get_backend)) -> SessionResponse:
    session = session_service.sign_in(backend, request.email, request.password)
    return SessionResponse(**session.model_dump())


@router.post("/sign-out")
def sign_out(
    authorization: str | None = Header(default=None),
    backend: BackendClient = Depends(get_backend),
) -> SignOutResponse:
    session_service.sign_out(backend, session_service.bearer_token(authorization))
    return SignOutResponse(signed_out=True)


@router.get("/me")
def me(user: AuthUser = Depends(current_user)) -> AuthUser:
    return user
