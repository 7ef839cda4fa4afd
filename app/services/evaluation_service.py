"""
Evaluation service — mentor evaluations of students.

At most one evaluation exists per (student_id, mentor_id, project_id).
save_evaluation is an upsert on that key: a mentor resubmitting for the same
student and project overwrites score, criteria and comments.  A missing
project_id is a key value of its own (one general evaluation per
mentor/student pair); because unique constraints never match NULLs, that
case is resolved with a lookup instead of ON CONFLICT.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.auth import Principal
from app.core.exceptions import AuthorizationError, InternalError
from app.models import db
from app.models.evaluation import Evaluation
from app.models.profile import Profile
from app.models.project import Project
from app.schemas.evaluation import EvaluationCreate
from app.services import access_scope
from app.services.helpers.predicates import fetch_all
from app.services.helpers.upsert import upsert_row
from app.utils.helpers import get_or_404

logger = logging.getLogger(__name__)

_OVERWRITTEN = ("score", "criteria_json", "comments", "updated_at")


def list_evaluations(principal: Principal) -> list[dict]:
    """Student: own; mentor: authored; admin: all.  Newest first."""
    rows = fetch_all(
        Evaluation,
        access_scope.evaluation_scope(principal),
        order_by=Evaluation.created_at.desc(),
    )
    return [e.to_dict() for e in rows]


def list_student_evaluations(principal: Principal, student_id: str) -> list[dict]:
    if principal.is_student and principal.id != student_id:
        raise AuthorizationError("You can only view your own evaluations")
    rows = (
        Evaluation.query.filter_by(student_id=student_id)
        .order_by(Evaluation.created_at.desc())
        .all()
    )
    return [e.to_dict() for e in rows]


def _find(student_id: str, mentor_id: str, project_id: str | None) -> Evaluation | None:
    stmt = select(Evaluation).where(
        Evaluation.student_id == student_id,
        Evaluation.mentor_id == mentor_id,
        Evaluation.project_id.is_(None) if project_id is None
        else Evaluation.project_id == project_id,
    )
    return db.session.execute(stmt).scalars().first()


def save_evaluation(principal: Principal, data: EvaluationCreate) -> dict:
    """Create or overwrite the principal's evaluation of a student.

    Raises:
        NotFoundError: the student (or the named project) does not exist.
    """
    get_or_404(Profile, data.student_id, label="Student")
    if data.project_id:
        get_or_404(Project, data.project_id)

    now = datetime.now(timezone.utc)
    values = {
        "student_id": data.student_id,
        "mentor_id": principal.id,
        "project_id": data.project_id,
        "score": data.score,
        "criteria_json": json.dumps(data.criteria, default=str),
        "comments": data.comments,
        "updated_at": now,
    }

    try:
        if data.project_id is not None:
            upsert_row(
                Evaluation,
                {"id": str(uuid.uuid4()), "created_at": now, **values},
                conflict_keys=("student_id", "mentor_id", "project_id"),
                update_columns=_OVERWRITTEN,
            )
        else:
            existing = _find(data.student_id, principal.id, None)
            if existing is None:
                db.session.add(Evaluation(**values))
            else:
                for column in _OVERWRITTEN:
                    setattr(existing, column, values[column])
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Failed to save evaluation student=%s mentor=%s", data.student_id, principal.id)
        raise InternalError("Failed to save evaluation") from exc

    evaluation = _find(data.student_id, principal.id, data.project_id)
    logger.info(
        "Evaluation %s saved by mentor %s (score=%s)", evaluation.id, principal.id, data.score,
    )
    return evaluation.to_dict()
