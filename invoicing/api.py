"""
FastAPI app entry point aggregating the invoice routers under invoicing/routes.
Run as `uvicorn invoicing.api:app`.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from .db import ensure_schema
from .logs import ensure_log_schema
from .navigation import Redirect

app = FastAPI(title="invoicing-api", version="0.1.0")


@app.on_event("startup")
def on_startup():
    ensure_schema()
    ensure_log_schema()


@app.exception_handler(Redirect)
async def on_redirect(request: Request, exc: Redirect):
    return RedirectResponse(exc.path, status_code=303)


from .routes import base as base_routes
from .routes import invoices as invoices_routes

app.include_router(base_routes.router)
app.include_router(invoices_routes.router)
