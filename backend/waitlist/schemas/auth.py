# waitlist/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field


class SignupIn(BaseModel):
    email: EmailStr
    # Empty passwords reach the service layer so they fail as PASSWORD_REQUIRED.
    password: str = Field(default="", max_length=128)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(max_length=128)


class SocialTokenIn(BaseModel):
    token: str = Field(min_length=1, max_length=4096)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MessageOut(BaseModel):
    message: str
