from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ..errors import PersistenceError
from ..logs import OperationLogContext, entity_history
from ..schemas import InvoiceList, InvoiceOut
from ..services.invoice_svc import (
    create_invoice,
    update_invoice,
    delete_invoice,
    get_invoice,
    list_invoices,
)

router = APIRouter()


def _form_errors(e: ValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in e.errors()
    ]


@router.get("/dashboard/invoices", response_model=InvoiceList)
def api_invoice_list():
    return list_invoices()


@router.get("/api/invoices/{invoice_id}", response_model=InvoiceOut)
def api_invoice_get(invoice_id: str):
    inv = get_invoice(invoice_id)
    if not inv:
        raise HTTPException(status_code=404, detail="invoice_not_found")
    return inv


@router.get("/api/invoices/{invoice_id}/history")
def api_invoice_history(invoice_id: str, page: int = 1, size: int = 20):
    total, items = entity_history("invoice", invoice_id, page, size)
    return {"total": total, "items": items}


# create/update leave through a Redirect, which the app turns into a 303
@router.post("/dashboard/invoices/create")
async def api_invoice_create(request: Request):
    form = await request.form()
    log = OperationLogContext("CREATE_INVOICE")
    try:
        await run_in_threadpool(create_invoice, form, log)
    except ValidationError as e:
        log.write("ERROR", "validation_failed")
        raise HTTPException(status_code=400, detail={"errors": _form_errors(e)})


@router.post("/dashboard/invoices/{invoice_id}/edit")
async def api_invoice_update(invoice_id: str, request: Request):
    form = await request.form()
    log = OperationLogContext("UPDATE_INVOICE")
    log.set_entity("invoice", invoice_id)
    try:
        await run_in_threadpool(update_invoice, invoice_id, form, log)
    except ValidationError as e:
        log.write("ERROR", "validation_failed")
        raise HTTPException(status_code=400, detail={"errors": _form_errors(e)})


@router.post("/dashboard/invoices/{invoice_id}/delete")
def api_invoice_delete(invoice_id: str):
    log = OperationLogContext("DELETE_INVOICE")
    try:
        deleted = delete_invoice(invoice_id, log)
    except PersistenceError as e:
        log.write("ERROR", str(e))
        raise
    return {"message": "ok", "deleted": deleted}
