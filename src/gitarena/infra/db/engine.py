"""Re-export the singleton engine from gitarena.db and register SQLite pragmas."""
from sqlalchemy import event
from gitarena.db import engine          # singleton; created once at gitarena.db import
import gitarena.models  # noqa: F401   # registers the user/group/repository mappers


def _set_wal_mode(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA journal_mode=WAL")
    cur.execute("PRAGMA synchronous=NORMAL")
    cur.close()


if engine.dialect.name == "sqlite":
    event.listen(engine, "connect", _set_wal_mode)

__all__ = ["engine"]
