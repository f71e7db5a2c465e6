from pydantic import BaseModel


class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignUpRequest(BaseModel):
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class AuthUser(BaseModel):
    user_id: str
    email: str | None = None


class AuthSession(BaseModel):
    user_id: str
    email: str | None = None
    id_token: str
    refresh_token: str | None = None
    expires_in: int | None = None


class SessionResponse(AuthSession):
    redirect_to: str = "/forms"


class SignOutResponse(BaseModel):
    signed_out: bool
    redirect_to: str = "/"
