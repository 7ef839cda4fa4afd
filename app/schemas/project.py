"""Schemas for projects and project members"""
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas import EntityId

ProjectStatus = Literal["planning", "active", "completed", "archived"]


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = None
    status: ProjectStatus = "planning"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    github_repo_url: Optional[str] = Field(None, max_length=500)
    team_id: Optional[EntityId] = None


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    github_repo_url: Optional[str] = Field(None, max_length=500)
    team_id: Optional[EntityId] = None


class ProjectMemberAdd(BaseModel):
    user_id: EntityId
    role: Literal["owner", "member"] = "member"
