import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "invoices_test.db"
    # Point the store at this temp DB
    os.environ["INVOICE_DB_PATH"] = str(path)
    schema = Path(_PROJECT_ROOT / "schema.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(schema)
        conn.commit()
    finally:
        conn.close()
    from invoicing.logs import ensure_log_schema
    ensure_log_schema()
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    from invoicing.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture()
def log():
    from invoicing.logs import OperationLogContext
    return OperationLogContext("TEST")


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: only ever wipe the temp DB
    assert os.environ.get("INVOICE_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    from invoicing.db import reset_store
    from invoicing.services.cache_svc import get_cache
    reset_store()
    get_cache().clear()
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in ("invoices", "operation_log"):
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture()
def seed_invoice(tmp_db_path):
    def _seed(invoice_id: str, customer_id: str = "c1", amount: int = 5000,
              status: str = "pending", date: str = "2024-01-15") -> str:
        conn = sqlite3.connect(tmp_db_path)
        try:
            conn.execute(
                "INSERT INTO invoices(id, customer_id, amount, status, date) VALUES(?,?,?,?,?)",
                (invoice_id, customer_id, amount, status, date),
            )
            conn.commit()
        finally:
            conn.close()
        return invoice_id
    return _seed


@pytest.fixture()
def broken_store(monkeypatch):
    """Every store call fails as if the database were unreachable."""
    from invoicing.db import get_store
    from invoicing.errors import PersistenceError

    def _boom(*args, **kwargs):
        raise PersistenceError("unable to open database file")

    store = get_store()
    monkeypatch.setattr(store, "execute", _boom)
    monkeypatch.setattr(store, "fetch_one", _boom)
    monkeypatch.setattr(store, "fetch_all", _boom)
    return store
