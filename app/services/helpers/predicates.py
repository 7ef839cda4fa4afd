"""
Visibility predicates.

A small closed vocabulary for "which rows may this principal see":

    Eq("created_by", user_id)
    In("id", member_project_ids)
    Or((Eq(...), In(...)))
    EVERYTHING   # no filter (admin)
    NOTHING      # empty result, the query is never issued

Predicates are built by app.services.access_scope and compiled to
SQLAlchemy clauses here, so list endpoints never assemble filter strings.

Usage:
    pred = any_of(In("id", project_ids), In("team_id", team_ids))
    rows = fetch_all(Project, pred, order_by=Project.created_at.desc())
"""

from dataclasses import dataclass
from typing import Any, Union

import sqlalchemy as sa

from app.models import db


@dataclass(frozen=True)
class Eq:
    column: str
    value: Any


@dataclass(frozen=True)
class In:
    column: str
    values: tuple

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    @property
    def is_empty(self) -> bool:
        return not self.values


@dataclass(frozen=True)
class Or:
    terms: tuple


class _Sentinel:
    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


EVERYTHING = _Sentinel("EVERYTHING")
NOTHING = _Sentinel("NOTHING")

Predicate = Union[Eq, In, Or, _Sentinel]


def any_of(*terms: Predicate) -> Predicate:
    """OR-compose terms, simplifying as it goes.

    Empty ``In`` sets and NOTHING contribute no rows and are dropped;
    EVERYTHING absorbs the rest.  With no terms left the result is NOTHING.
    """
    kept = []
    for term in terms:
        if term is EVERYTHING:
            return EVERYTHING
        if term is NOTHING:
            continue
        if isinstance(term, In) and term.is_empty:
            continue
        kept.append(term)
    if not kept:
        return NOTHING
    if len(kept) == 1:
        return kept[0]
    return Or(tuple(kept))


def to_clause(model, predicate: Predicate):
    """Compile *predicate* into a SQLAlchemy boolean clause for *model*."""
    if predicate is EVERYTHING:
        return sa.true()
    if predicate is NOTHING:
        return sa.false()
    if isinstance(predicate, Eq):
        return getattr(model, predicate.column) == predicate.value
    if isinstance(predicate, In):
        return getattr(model, predicate.column).in_(predicate.values)
    if isinstance(predicate, Or):
        return sa.or_(*(to_clause(model, t) for t in predicate.terms))
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def fetch_all(model, predicate: Predicate, *, order_by=None, limit: int | None = None) -> list:
    """Run a filtered select.  NOTHING returns [] without touching the store."""
    if predicate is NOTHING:
        return []
    stmt = sa.select(model)
    if predicate is not EVERYTHING:
        stmt = stmt.where(to_clause(model, predicate))
    if order_by is not None:
        stmt = stmt.order_by(order_by)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.session.execute(stmt).scalars().all())
