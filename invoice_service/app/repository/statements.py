"""Dialect specific INSERT constructs for single-statement upserts."""

from typing import Any, Callable, Dict

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_service.app.core.exceptions import PersistenceError

_INSERT_BY_DIALECT: Dict[str, Callable[[Any], Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(session: AsyncSession, model: Any) -> Any:
    """Return an INSERT supporting ``ON CONFLICT`` for the session's database."""

    dialect_name = session.bind.dialect.name
    try:
        insert = _INSERT_BY_DIALECT[dialect_name]
    except KeyError:
        raise PersistenceError(f"Unsupported database dialect `{dialect_name}`.")
    return insert(model)
