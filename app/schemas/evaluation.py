"""Schemas for mentor evaluations"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from app.schemas import EntityId


class EvaluationCreate(BaseModel):
    student_id: EntityId
    project_id: Optional[EntityId] = None
    score: int = Field(..., ge=0, le=100)
    criteria: Dict[str, Any] = Field(default_factory=dict)
    comments: Optional[str] = None
