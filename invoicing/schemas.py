"""Invoice form shapes.

`InvoiceForm` is the one canonical shape; the create/update shapes are
projections of it with server-owned fields left out.
"""
from __future__ import annotations

import copy
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, create_model

InvoiceStatus = Literal["pending", "paid"]

MAX_AMOUNT = 9e16


class InvoiceForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    customer_id: str = Field(alias="customerId", min_length=1)
    # major units, e.g. dollars; bounded so the cents value fits a signed 64-bit INTEGER
    amount: float = Field(allow_inf_nan=False, ge=-MAX_AMOUNT, le=MAX_AMOUNT)
    status: InvoiceStatus
    date: str  # YYYY-MM-DD


def omit(model: type[BaseModel], *names: str) -> type[BaseModel]:
    """Build a model with every field of `model` except `names`."""
    unknown = set(names) - set(model.model_fields)
    if unknown:
        raise KeyError(f"unknown fields: {sorted(unknown)}")
    fields = {
        name: (info.annotation, copy.deepcopy(info))
        for name, info in model.model_fields.items()
        if name not in names
    }
    return create_model(
        f"{model.__name__}Without{''.join(n.title().replace('_', '') for n in names)}",
        __config__=model.model_config,
        **fields,
    )


CreateInvoice = omit(InvoiceForm, "id", "date")
UpdateInvoice = omit(InvoiceForm, "id", "date")


def form_field_names(shape: type[BaseModel]) -> list[str]:
    return [info.alias or name for name, info in shape.model_fields.items()]


def validate_invoice_form(form: Mapping[str, Any], shape: type[BaseModel] = CreateInvoice) -> BaseModel:
    """Read only the fields `shape` knows about and validate them.

    Raises pydantic.ValidationError on missing fields, a non-numeric amount
    or a status outside pending/paid.
    """
    data = {k: form.get(k) for k in form_field_names(shape) if k in form}
    return shape.model_validate(data)


def amount_to_cents(amount: float) -> int:
    return int(round(amount * 100))


class InvoiceOut(BaseModel):
    id: str
    customer_id: str
    amount: int  # cents
    status: InvoiceStatus
    date: str


class InvoiceList(BaseModel):
    total: int
    items: list[InvoiceOut]
    rendered_at: Optional[str] = None
