# boutique/db/upsert.py

from typing import Iterable, Optional

from sqlalchemy import Table
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert


def upsert(
    conn,
    table: Table,
    values: dict,
    index_elements: Iterable[str],
    update_cols: Iterable[str],
    extra_set: Optional[dict] = None,
) -> None:
    """
    INSERT ... ON CONFLICT (index_elements) DO UPDATE for SQLite and PostgreSQL.

    update_cols are copied from the incoming row; extra_set holds literal or
    SQL-expression overrides (e.g. updated_at=func.now()).
    """
    insert = pg_insert if conn.dialect.name == "postgresql" else sqlite_insert
    stmt = insert(table).values(**values)

    set_ = {col: stmt.excluded[col] for col in update_cols}
    if extra_set:
        set_.update(extra_set)

    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c[name] for name in index_elements],
        set_=set_,
    )

    conn.execute(stmt)
