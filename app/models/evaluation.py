"""
Student Project Tracker
Evaluation domain model.

One row per (student_id, mentor_id, project_id).  A mentor resubmitting an
evaluation overwrites score, criteria and comments instead of adding a row;
see app.services.evaluation_service.save_evaluation.
"""

import json
import uuid
from datetime import datetime, timezone

from app.models import db


class Evaluation(db.Model):
    __tablename__ = "evaluations"
    __table_args__ = (
        db.UniqueConstraint(
            "student_id", "mentor_id", "project_id", name="uq_evaluation_triple",
        ),
        db.CheckConstraint("score >= 0 AND score <= 100", name="ck_evaluation_score"),
        db.Index("idx_evaluations_student", "student_id"),
        db.Index("idx_evaluations_mentor", "mentor_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = db.Column(
        db.String(36),
        db.ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    mentor_id = db.Column(
        db.String(36),
        db.ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    project_id = db.Column(
        db.String(36),
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
    )
    score = db.Column(db.Integer, nullable=False)
    criteria_json = db.Column(
        db.Text, default="{}",
        comment="JSON: free-form rubric, e.g. {code_quality: 8, teamwork: 9}",
    )
    comments = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    student = db.relationship("Profile", foreign_keys=[student_id])
    mentor = db.relationship("Profile", foreign_keys=[mentor_id])
    project = db.relationship("Project", foreign_keys=[project_id])

    @property
    def criteria(self) -> dict:
        try:
            return json.loads(self.criteria_json or "{}")
        except (json.JSONDecodeError, TypeError):
            return {}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "mentor_id": self.mentor_id,
            "project_id": self.project_id,
            "score": self.score,
            "criteria": self.criteria,
            "comments": self.comments,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "student": self.student.to_summary() if self.student else None,
            "mentor": self.mentor.to_summary() if self.mentor else None,
            "project": (
                {"id": self.project.id, "title": self.project.title}
                if self.project else None
            ),
        }

    def __repr__(self):
        return f"<Evaluation {self.id}: student={self.student_id} score={self.score}>"
