"""
Single-row insert-or-update on a composite natural key.

Compiles to ``INSERT ... ON CONFLICT (<keys>) DO UPDATE`` on PostgreSQL and
SQLite, so concurrent writers of the same key converge (last write wins)
instead of duplicating rows.  The caller owns the transaction.

Usage:
    upsert_row(
        GitHubCommit,
        {"project_id": pid, "sha": sha, "message": msg, ...},
        conflict_keys=("project_id", "sha"),
    )
"""

import logging

from sqlalchemy.dialects import postgresql, sqlite

from app.models import db

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_row(model, values: dict, *, conflict_keys: tuple[str, ...], update_columns=None) -> None:
    """Insert *values* into *model*'s table or overwrite the row sharing
    *conflict_keys*.

    Args:
        model:          Mapped class.
        values:         Column → value for the row.
        conflict_keys:  Columns backed by a unique constraint.
        update_columns: Columns overwritten on conflict; defaults to every
                        supplied non-key column.

    Raises:
        NotImplementedError: the bound dialect has no ON CONFLICT support.
        sqlalchemy.exc.SQLAlchemyError: propagated from the store.
    """
    dialect = db.session.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise NotImplementedError(f"upsert not supported for dialect {dialect!r}")

    if update_columns is None:
        update_columns = [c for c in values if c not in conflict_keys]

    stmt = insert(model.__table__).values(**values)
    if update_columns:
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_keys),
            set_={c: stmt.excluded[c] for c in update_columns},
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_keys))
    db.session.execute(stmt)
