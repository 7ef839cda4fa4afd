"""
Student Project Tracker
Team domain model.

A team has exactly one mentor (``mentor_id``) and any number of student
members.  Projects may be assigned to a team, which widens their visibility
to the team's mentor and students.
"""

import uuid
from datetime import datetime, timezone

from app.models import db


class Team(db.Model):
    __tablename__ = "teams"
    __table_args__ = (
        db.Index("idx_teams_mentor", "mentor_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    mentor_id = db.Column(
        db.String(36),
        db.ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    mentor = db.relationship("Profile", foreign_keys=[mentor_id])
    members = db.relationship(
        "TeamMember", back_populates="team",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    projects = db.relationship("Project", back_populates="team")

    def member_ids(self) -> set[str]:
        return {m.user_id for m in self.members}

    def to_dict(self, include_projects: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "mentor_id": self.mentor_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "mentor": self.mentor.to_summary() if self.mentor else None,
            "team_members": [m.to_dict() for m in self.members],
            "project_count": len(self.projects),
        }
        if include_projects:
            data["projects"] = [p.to_dict() for p in self.projects]
        return data

    def __repr__(self):
        return f"<Team {self.id}: {self.name}>"


class TeamMember(db.Model):
    __tablename__ = "team_members"
    __table_args__ = (
        db.UniqueConstraint("team_id", "user_id", name="uq_team_member"),
        db.Index("ix_team_members_user", "user_id"),
    )

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(
        db.String(36),
        db.ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = db.Column(
        db.String(36),
        db.ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    joined_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    team = db.relationship("Team", back_populates="members")
    user = db.relationship("Profile")

    def to_dict(self):
        return {
            "team_id": self.team_id,
            "user_id": self.user_id,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
            "user": self.user.to_summary() if self.user else None,
        }
