"""Schemas for teams"""
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas import EntityId


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    mentor_id: Optional[EntityId] = None
    member_ids: List[EntityId] = Field(default_factory=list)


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    mentor_id: Optional[EntityId] = None


class TeamMemberAdd(BaseModel):
    user_id: EntityId
