from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, EmailStr, Field, field_validator

from .base import CamelModel


class SocialFields(CamelModel):
    website: Optional[AnyHttpUrl] = None
    twitter: Optional[AnyHttpUrl] = None
    github: Optional[AnyHttpUrl] = None
    linkedin: Optional[AnyHttpUrl] = None
    facebook: Optional[AnyHttpUrl] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        return v or None


class ProfileFields(CamelModel):
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    current_learning: Optional[str] = Field(None, max_length=200)
    available_for: Optional[str] = Field(None, max_length=200)
    skills: Optional[str] = Field(None, max_length=200)
    current_project: Optional[str] = Field(None, max_length=200)
    pronouns: Optional[bool] = None
    work: Optional[str] = Field(None, max_length=200)
    education: Optional[str] = Field(None, max_length=200)


class UserFields(CamelModel):
    username: Optional[str] = Field(None, min_length=3, max_length=20)
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=2)


class UpdateProfileIn(CamelModel):
    user: UserFields = Field(default_factory=UserFields)
    profile: ProfileFields = Field(default_factory=ProfileFields)
    social: SocialFields = Field(default_factory=SocialFields)


class ProfileIdIn(CamelModel):
    user_id: int


class ProfileOut(ProfileFields):
    pass


class SocialOut(CamelModel):
    website: Optional[str] = None
    twitter: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    facebook: Optional[str] = None


class UserProfileOut(CamelModel):
    id: int
    username: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    joined: datetime
    profile: Optional[ProfileOut] = None
    social: Optional[SocialOut] = None
