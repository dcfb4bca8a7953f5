"""Authentication request schemas"""

from typing import Optional

from pydantic import EmailStr, Field

from ..models import Region
from .base import RequestSchema


class LoginSchema(RequestSchema):
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class RegisterSchema(RequestSchema):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    region: Optional[Region] = None


class RegisterWithTokenSchema(RequestSchema):
    invite_token: str = Field(..., min_length=1)
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)


class RefreshSchema(RequestSchema):
    refresh_token: str = Field(..., min_length=1)


class ForgotPasswordSchema(RequestSchema):
    email: EmailStr


class ResetPasswordSchema(RequestSchema):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6, max_length=128)
