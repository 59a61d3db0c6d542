# boutique/db/engine.py

from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from boutique.config import DB_URL


def make_engine(url: str = DB_URL) -> Engine:
    # echo=True if you want to see SQL printed in the terminal
    engine = create_engine(url, future=True)

    if engine.dialect.name == "sqlite":
        # cascading deletes need SQLite's foreign key enforcement switched on
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return make_engine(DB_URL)
