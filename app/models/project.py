"""
Student Project Tracker
Project domain model.

Models:
    - Project: a student project, optionally assigned to a mentored team.
    - ProjectMember: (project_id, user_id) membership with an owner/member role.
"""

import uuid
from datetime import datetime, timezone

from app.models import db

PROJECT_STATUSES = ("planning", "active", "completed", "archived")
PROJECT_MEMBER_ROLES = ("owner", "member")


def _uuid() -> str:
    return str(uuid.uuid4())


class Project(db.Model):
    """Unit of tracked work. Visibility is decided by app.services.access_scope."""

    __tablename__ = "projects"
    __table_args__ = (
        db.Index("idx_projects_created_by", "created_by"),
        db.Index("idx_projects_team", "team_id"),
        db.Index("idx_projects_repo_url", "github_repo_url"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(
        db.String(20), nullable=False, default="planning",
        comment="planning | active | completed | archived",
    )
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    github_repo_url = db.Column(db.String(500), nullable=True)

    created_by = db.Column(
        db.String(36),
        db.ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    team_id = db.Column(
        db.String(36),
        db.ForeignKey("teams.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    creator = db.relationship("Profile", foreign_keys=[created_by])
    team = db.relationship("Team", back_populates="projects")
    members = db.relationship(
        "ProjectMember", back_populates="project",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    milestones = db.relationship(
        "Milestone", backref="project",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    tasks = db.relationship(
        "Task", backref="project",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def member_ids(self) -> set[str]:
        return {m.user_id for m in self.members}

    def to_dict(self, include_children: bool = False) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "github_repo_url": self.github_repo_url,
            "created_by": self.created_by,
            "team_id": self.team_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "created_by_profile": self.creator.to_summary() if self.creator else None,
            "project_members": [m.to_dict() for m in self.members],
            "teams": (
                {"id": self.team.id, "name": self.team.name, "mentor_id": self.team.mentor_id}
                if self.team else None
            ),
        }
        if include_children:
            data["milestones"] = [
                {
                    "id": m.id,
                    "title": m.title,
                    "status": m.status,
                    "due_date": m.due_date.isoformat() if m.due_date else None,
                }
                for m in self.milestones
            ]
            data["tasks"] = [
                {"id": t.id, "title": t.title, "status": t.status, "priority": t.priority}
                for t in self.tasks
            ]
        return data

    def __repr__(self):
        return f"<Project {self.id}: {self.title}>"


class ProjectMember(db.Model):
    __tablename__ = "project_members"
    __table_args__ = (
        db.UniqueConstraint("project_id", "user_id", name="uq_project_member"),
        db.Index("ix_project_members_user", "user_id"),
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.String(36),
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = db.Column(
        db.String(36),
        db.ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    role = db.Column(db.String(20), nullable=False, default="member")  # owner | member
    joined_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    project = db.relationship("Project", back_populates="members")
    user = db.relationship("Profile")

    def to_dict(self):
        return {
            "project_id": self.project_id,
            "user_id": self.user_id,
            "role": self.role,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
            "user": self.user.to_summary() if self.user else None,
        }
