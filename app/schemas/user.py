"""Schemas for users and profiles"""
from typing import Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["student", "mentor", "admin"]

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    email: str = Field(..., pattern=_EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=2, max_length=200)
    role: Role = "student"


class RoleUpdate(BaseModel):
    role: Role


class StatusUpdate(BaseModel):
    is_active: bool


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    bio: Optional[str] = None
    avatar_url: Optional[str] = Field(None, max_length=500)


class ProfileSync(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    avatar_url: Optional[str] = Field(None, max_length=500)
    github_id: Optional[str] = Field(None, max_length=100)
