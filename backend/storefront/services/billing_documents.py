"""Billing Document helpers - shared write path for proposals and invoices.

Invariants:
    - line_items always leave here with an id and a recomputed amount
    - Totals columns are written only by apply_totals
    - Document numbers come from a per-kind, per-year counter row updated in
      the caller's transaction (flush, no commit)
"""

from datetime import datetime
from collections.abc import Iterable, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import DocumentKind, TaxBase
from storefront.core.totals import (
    DOCUMENT_PREFIXES, Totals, calculate_totals, counter_key,
    generate_document_number, recompute_line_items,
)
from storefront.db.base import new_id
from storefront.models.document_counter import DocumentCounter

BILLING_FIELDS = (
    "client", "client_id", "line_items", "tax_config", "discount",
    "processing_fee_config", "payment_method_discount", "title", "notes", "terms",
)


def prepare_line_items(items: Iterable[Mapping]) -> list[dict]:
    return recompute_line_items(
        {**item, "id": item.get("id") or new_id()} for item in items
    )


# a document always has these; None means "leave as is"
_REQUIRED_FIELDS = frozenset({"client", "line_items"})


def apply_fields(document, data: Mapping, fields: Iterable[str]) -> None:
    for key in fields:
        if key not in data:
            continue
        value = data[key]
        if value is None and key in _REQUIRED_FIELDS:
            continue
        if key == "line_items":
            value = prepare_line_items(value)
        setattr(document, key, value)


def apply_totals(document, tax_base: TaxBase = TaxBase.AFTER_DISCOUNT) -> Totals:
    totals = calculate_totals(
        document.line_items, document.tax_config, document.discount, tax_base,
    )
    document.subtotal = totals.subtotal
    document.discount_amount = totals.discount_amount
    document.tax_amount = totals.tax_amount
    document.total = totals.total
    return totals


def client_email_matches(model, email: str):
    """WHERE clause on the JSON client.email of a billing document."""
    return model.client["email"].as_string() == email


async def next_document_number(
    db: AsyncSession, kind: DocumentKind, now: datetime, padding: int = 3,
) -> str:
    key = counter_key(kind.value, now.year)
    counter = (await db.execute(
        select(DocumentCounter).where(DocumentCounter.key == key).with_for_update()
    )).scalar_one_or_none()
    if counter is None:
        counter = DocumentCounter(key=key, value=0)
        db.add(counter)
    counter.value += 1
    await db.flush()
    return generate_document_number(
        DOCUMENT_PREFIXES[kind.value], now.year, counter.value, padding,
    )
