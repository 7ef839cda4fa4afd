"""Schemas for milestones, tasks and comments"""
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas import EntityId

TaskStatus = Literal["todo", "in_progress", "in_review", "completed"]
TaskPriority = Literal["low", "medium", "high", "critical"]
MilestoneStatus = Literal["pending", "in_progress", "completed"]


class MilestoneCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = None
    due_date: date
    status: MilestoneStatus = "pending"


class MilestoneUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[MilestoneStatus] = None


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = None
    milestone_id: Optional[EntityId] = None
    priority: TaskPriority = "medium"
    status: TaskStatus = "todo"
    assignee_id: Optional[EntityId] = None
    due_date: Optional[date] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    milestone_id: Optional[EntityId] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assignee_id: Optional[EntityId] = None
    due_date: Optional[date] = None


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1)
