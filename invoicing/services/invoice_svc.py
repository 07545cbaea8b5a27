from __future__ import annotations

# invoicing/services/invoice_svc.py
import datetime as dt
import logging
from typing import Any, Mapping, NoReturn

from ..db import get_store
from ..errors import PersistenceError
from ..logs import OperationLogContext
from ..navigation import redirect
from ..repository import invoice_repo
from ..schemas import CreateInvoice, UpdateInvoice, amount_to_cents, validate_invoice_form
from .cache_svc import cached, invalidate

logger = logging.getLogger(__name__)

INVOICES_PATH = "/dashboard/invoices"


def today_utc() -> str:
    return dt.datetime.now(dt.timezone.utc).date().isoformat()


def create_invoice(form: Mapping[str, Any], log: OperationLogContext) -> NoReturn:
    """Validate and insert one invoice, then invalidate the listing and redirect to it.

    A store failure is logged and does not stop the invalidate/redirect steps.
    """
    inv = validate_invoice_form(form, CreateInvoice)
    amount_cents = amount_to_cents(inv.amount)
    date = today_utc()
    log.set_payload({"customer_id": inv.customer_id, "amount": amount_cents, "status": inv.status, "date": date})
    try:
        invoice_repo.insert_invoice(get_store(), inv.customer_id, amount_cents, inv.status, date)
        log.write("OK")
    except PersistenceError as e:
        logger.exception("create_invoice failed for customer_id=%s", inv.customer_id)
        log.write("ERROR", str(e))

    invalidate(INVOICES_PATH)
    redirect(INVOICES_PATH)


def update_invoice(invoice_id: str, form: Mapping[str, Any], log: OperationLogContext) -> NoReturn:
    """Overwrite customer, amount and status of one invoice. The date column is never touched.

    An unknown id changes nothing and is not an error.
    """
    inv = validate_invoice_form(form, UpdateInvoice)
    amount_cents = amount_to_cents(inv.amount)
    log.set_entity("invoice", invoice_id)
    log.set_payload({"customer_id": inv.customer_id, "amount": amount_cents, "status": inv.status})
    try:
        changed = invoice_repo.update_invoice(get_store(), invoice_id, inv.customer_id, amount_cents, inv.status)
        if changed == 0:
            logger.info("update_invoice: no invoice with id=%s", invoice_id)
        log.write("OK")
    except PersistenceError as e:
        logger.exception("update_invoice failed for id=%s", invoice_id)
        log.write("ERROR", str(e))

    invalidate(INVOICES_PATH)
    redirect(INVOICES_PATH)


def delete_invoice(invoice_id: str, log: OperationLogContext) -> int:
    # store failures propagate to the caller
    log.set_entity("invoice", invoice_id)
    deleted = invoice_repo.delete_invoice(get_store(), invoice_id)
    log.write("OK")
    invalidate(INVOICES_PATH)
    return deleted


def get_invoice(invoice_id: str) -> dict | None:
    row = invoice_repo.get_one(get_store(), invoice_id)
    return dict(row) if row else None


def list_invoices() -> dict:
    def _render() -> dict:
        rows = invoice_repo.list_all(get_store())
        return {
            "total": len(rows),
            "items": [dict(r) for r in rows],
            "rendered_at": dt.datetime.now(dt.timezone.utc).isoformat(),
        }

    return cached(INVOICES_PATH, _render)
