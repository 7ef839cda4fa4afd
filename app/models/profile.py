"""
Student Project Tracker
Profile domain model.

A profile mirrors one identity-provider account and carries the role the
access model is built on.  Profiles are never created by self-service role
escalation: role changes go through the admin-only user endpoints.
"""

from datetime import datetime, timezone

from app.models import db

ROLES = ("student", "mentor", "admin")


class Profile(db.Model):
    """Application-side user record keyed by the identity-provider user id."""

    __tablename__ = "profiles"
    __table_args__ = (
        db.Index("idx_profiles_role", "role"),
    )

    id = db.Column(db.String(36), primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    name = db.Column(db.String(200), nullable=False)
    role = db.Column(
        db.String(20), nullable=False, default="student",
        comment="student | mentor | admin",
    )
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    avatar_url = db.Column(db.String(500), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    github_id = db.Column(db.String(100), nullable=True)

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

    def to_summary(self) -> dict:
        """Compact form embedded in project, team and comment payloads."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar_url": self.avatar_url,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "is_active": bool(self.is_active),
            "avatar_url": self.avatar_url,
            "bio": self.bio,
            "github_id": self.github_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Profile {self.id}: {self.email} ({self.role})>"
