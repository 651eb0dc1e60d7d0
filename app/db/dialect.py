from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


async def insert_ignore_conflict(
    session: AsyncSession,
    model: Any,
    values: dict[str, Any],
    index_elements: list[str],
) -> None:
    """INSERT ... ON CONFLICT DO NOTHING. Concurrent callers converge on one row."""
    if session.get_bind().dialect.name == "postgresql":
        stmt = postgresql.insert(model)
    else:
        stmt = sqlite.insert(model)
    stmt = stmt.values(**values).on_conflict_do_nothing(index_elements=index_elements)
    await session.execute(stmt)
