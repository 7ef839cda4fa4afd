"""
Student Project Tracker
Work-tracking models that hang off a Project.

Models:
    - Milestone: dated checkpoint inside a project.
    - Task: unit of work, optionally attached to a milestone and an assignee.
    - Comment: discussion entry on a task, owned by its author.

Status columns accept any listed value; there is no transition graph.
"""

import uuid
from datetime import datetime, timezone

from app.models import db

MILESTONE_STATUSES = ("pending", "in_progress", "completed")
TASK_STATUSES = ("todo", "in_progress", "in_review", "completed")
TASK_PRIORITIES = ("low", "medium", "high", "critical")


def _uuid() -> str:
    return str(uuid.uuid4())


def _now():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class Milestone(db.Model):
    __tablename__ = "milestones"
    __table_args__ = (
        db.Index("idx_milestones_project", "project_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    project_id = db.Column(
        db.String(36),
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    due_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending")
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "title": self.title,
            "description": self.description,
            "due_date": _iso(self.due_date),
            "status": self.status,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Milestone {self.id}: {self.title}>"


class Task(db.Model):
    __tablename__ = "tasks"
    __table_args__ = (
        db.Index("idx_tasks_project", "project_id"),
        db.Index("idx_tasks_assignee", "assignee_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    project_id = db.Column(
        db.String(36),
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    milestone_id = db.Column(
        db.String(36),
        db.ForeignKey("milestones.id", ondelete="SET NULL"),
        nullable=True,
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    priority = db.Column(db.String(20), nullable=False, default="medium")
    status = db.Column(db.String(20), nullable=False, default="todo")
    assignee_id = db.Column(
        db.String(36),
        db.ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    due_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    assignee = db.relationship("Profile", foreign_keys=[assignee_id])
    milestone = db.relationship("Milestone", foreign_keys=[milestone_id])
    comments = db.relationship(
        "Comment", backref="task",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "milestone_id": self.milestone_id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "status": self.status,
            "assignee_id": self.assignee_id,
            "due_date": _iso(self.due_date),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "assignee": self.assignee.to_summary() if self.assignee else None,
            "milestone": (
                {"id": self.milestone.id, "title": self.milestone.title}
                if self.milestone else None
            ),
        }

    def __repr__(self):
        return f"<Task {self.id}: {self.title} [{self.status}]>"


class Comment(db.Model):
    __tablename__ = "comments"
    __table_args__ = (
        db.Index("idx_comments_task", "task_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    task_id = db.Column(
        db.String(36),
        db.ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = db.Column(
        db.String(36),
        db.ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    author = db.relationship("Profile", foreign_keys=[user_id])

    def to_dict(self):
        return {
            "id": self.id,
            "task_id": self.task_id,
            "user_id": self.user_id,
            "content": self.content,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "user": self.author.to_summary() if self.author else None,
        }
