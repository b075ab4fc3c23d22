from pydantic import BaseModel, EmailStr, Field

from .userschemas import UserOut


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)


class TokenSuccessResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthenticationResponse(TokenSuccessResponse):
    user: UserOut
