from __future__ import annotations

from sqlite3 import Row

from ..db import Store


def insert_invoice(store: Store, customer_id: str, amount_cents: int, status: str, date: str) -> int:
    return store.execute(
        "INSERT INTO invoices(customer_id, amount, status, date) VALUES(?,?,?,?)",
        (customer_id, amount_cents, status, date),
    )


def update_invoice(store: Store, invoice_id: str, customer_id: str, amount_cents: int, status: str) -> int:
    return store.execute(
        "UPDATE invoices SET customer_id=?, amount=?, status=? WHERE id=?",
        (customer_id, amount_cents, status, invoice_id),
    )


def delete_invoice(store: Store, invoice_id: str) -> int:
    return store.execute("DELETE FROM invoices WHERE id=?", (invoice_id,))


def get_one(store: Store, invoice_id: str) -> Row | None:
    return store.fetch_one(
        "SELECT id, customer_id, amount, status, date FROM invoices WHERE id=?",
        (invoice_id,),
    )


def list_all(store: Store) -> list[Row]:
    return store.fetch_all(
        "SELECT id, customer_id, amount, status, date FROM invoices ORDER BY date DESC, rowid DESC"
    )
