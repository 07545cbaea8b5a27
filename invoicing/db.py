from __future__ import annotations

# invoicing/db.py
import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator, Sequence
import os
import yaml

from .errors import PersistenceError

# DB path resolution order:
# 1) env INVOICE_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) fallback: invoices.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "invoices.db")
SCHEMA_PATH = os.path.join(_PROJECT_ROOT, "schema.sql")


def _read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    out = {}
    for k in ("db_path", "test_db_path"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def get_db_path() -> str:
    env_path = os.environ.get("INVOICE_DB_PATH")
    cfg = _read_config_yaml()
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg.get("test_db_path"):
        path = cfg["test_db_path"]
    elif cfg.get("db_path"):
        path = cfg["db_path"]
    else:
        path = _ROOT_DB

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection. An explicit db_path wins, otherwise get_db_path().
    Autocommit mode, row_factory set to Row.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
    try:
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


class Store:
    """Process-wide store client. Every call runs exactly one bound statement."""

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            with get_conn(self.db_path) as conn:
                cur = conn.execute(sql, params)
                return cur.rowcount
        except (sqlite3.Error, OverflowError) as e:
            raise PersistenceError(str(e)) from e

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Row | None:
        try:
            with get_conn(self.db_path) as conn:
                return conn.execute(sql, params).fetchone()
        except (sqlite3.Error, OverflowError) as e:
            raise PersistenceError(str(e)) from e

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        try:
            with get_conn(self.db_path) as conn:
                return conn.execute(sql, params).fetchall()
        except (sqlite3.Error, OverflowError) as e:
            raise PersistenceError(str(e)) from e


_store: Store | None = None


def get_store() -> Store:
    """Return the shared Store, creating it on first use."""
    global _store
    if _store is None:
        _store = Store()
    return _store


def reset_store() -> None:
    global _store
    _store = None


def ensure_schema():
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        ddl = f.read()
    with get_conn() as conn:
        conn.executescript(ddl)
