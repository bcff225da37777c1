from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from .base import CamelModel, UserRole


class RegisterIn(CamelModel):
    username: str = Field(..., min_length=3, max_length=20)
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str
    image: Optional[str] = None
    captcha_token: str = Field(..., min_length=1)


class LoginIn(CamelModel):
    username: str = Field(..., min_length=3, max_length=20)
    password: str = Field(..., min_length=6)


class CreateAdminIn(CamelModel):
    username: str = Field(..., min_length=3, max_length=20)
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str


class CreateUserIn(CreateAdminIn):
    role: UserRole


class UpdateUserIn(CamelModel):
    id: int
    username: Optional[str] = Field(None, min_length=3, max_length=20)
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None


class UserIdIn(CamelModel):
    user_id: int


class UserPageIn(CamelModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


class UserOut(CamelModel):
    id: int
    username: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: UserRole
    joined: datetime
