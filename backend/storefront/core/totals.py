"""Billing Totals - line item, discount, tax and payment arithmetic.

Invariants:
    - A line item's amount is ALWAYS quantity * rate, recomputed here and
      never taken from input
    - Every computed money value is rounded half-up to cents
    - total = subtotal - discount_amount + tax_amount, with no floor: a fixed
      discount larger than the subtotal yields a negative total
    - Tax base is explicit (TaxBase); AFTER_DISCOUNT is the default used by
      every service, BEFORE_DISCOUNT reproduces the older pre-discount formula

Design Decisions:
    - Floats at the boundary, Decimal only for the rounding step: stored
      documents keep plain JSON numbers
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from collections.abc import Iterable, Mapping

from storefront.core.domain_types import (
    DiscountType, InvoiceStatus, ProposalStatus, TaxBase,
)

_CENT = Decimal("0.01")


def round_currency(value: float) -> float:
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


# ─── Types ───────────────────────────────────────────────────────

@dataclass
class Totals:
    subtotal: float
    discount_amount: float
    tax_amount: float
    total: float

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount_amount": self.discount_amount,
            "tax_amount": self.tax_amount,
            "total": self.total,
        }


@dataclass
class PaymentOutcome:
    amount_paid: float
    amount_due: float
    status: InvoiceStatus
    fully_paid: bool


# ─── Line items ──────────────────────────────────────────────────

def calculate_line_item_amount(quantity: float, rate: float) -> float:
    return round_currency(quantity * rate)


def recompute_line_items(line_items: Iterable[Mapping]) -> list[dict]:
    """Copy of line_items with every amount recomputed from quantity and rate."""
    return [
        {**item, "amount": calculate_line_item_amount(item["quantity"], item["rate"])}
        for item in line_items
    ]


def calculate_subtotal(line_items: Iterable[Mapping]) -> float:
    return round_currency(sum(
        calculate_line_item_amount(item["quantity"], item["rate"])
        for item in line_items
    ))


# ─── Discount / tax / total ──────────────────────────────────────

def calculate_discount_amount(subtotal: float, discount: Mapping | None) -> float:
    """Percentage of subtotal, or the fixed value unclamped."""
    if not discount or not discount.get("value"):
        return 0.0
    value = float(discount["value"])
    if DiscountType(discount.get("type", DiscountType.PERCENTAGE)) is DiscountType.PERCENTAGE:
        return round_currency(subtotal * value / 100)
    return round_currency(value)


def calculate_tax_amount(taxable_amount: float, tax_config: Mapping | None) -> float:
    if not tax_config or not tax_config.get("tax_rate"):
        return 0.0
    return round_currency(taxable_amount * float(tax_config["tax_rate"]) / 100)


def calculate_total(subtotal: float, tax_amount: float, discount_amount: float) -> float:
    return round_currency(subtotal - discount_amount + tax_amount)


def calculate_totals(
    line_items: Iterable[Mapping],
    tax_config: Mapping | None = None,
    discount: Mapping | None = None,
    tax_base: TaxBase = TaxBase.AFTER_DISCOUNT,
) -> Totals:
    subtotal = calculate_subtotal(line_items)
    discount_amount = calculate_discount_amount(subtotal, discount)
    if tax_base is TaxBase.AFTER_DISCOUNT:
        taxable = subtotal - discount_amount
    else:
        taxable = subtotal
    tax_amount = calculate_tax_amount(taxable, tax_config)
    return Totals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax_amount=tax_amount,
        total=calculate_total(subtotal, tax_amount, discount_amount),
    )


# ─── Payment-method adjustments ──────────────────────────────────

def calculate_processing_fee(total: float, fee_config: Mapping | None) -> float:
    if not fee_config or not fee_config.get("enabled"):
        return 0.0
    return round_currency(total * float(fee_config["card_fee_percent"]) / 100)


def calculate_total_with_processing_fee(total: float, fee_config: Mapping | None) -> float:
    return round_currency(total + calculate_processing_fee(total, fee_config))


def calculate_ach_discount(total: float, method_discount: Mapping | None) -> float:
    if not method_discount or not method_discount.get("enabled"):
        return 0.0
    return round_currency(total * float(method_discount["ach_discount_percent"]) / 100)


def calculate_ach_total(total: float, method_discount: Mapping | None) -> float:
    return round_currency(total - calculate_ach_discount(total, method_discount))


def format_payment_method_savings(
    total: float, method_discount: Mapping | None,
) -> str | None:
    if not method_discount or not method_discount.get("enabled"):
        return None
    savings = calculate_ach_discount(total, method_discount)
    percent = method_discount["ach_discount_percent"]
    return f"Save ${savings:.2f} ({percent:g}%) by paying with ACH"


# ─── Document numbers ────────────────────────────────────────────

DOCUMENT_PREFIXES = {"proposals": "PROP", "invoices": "INV"}


def generate_document_number(
    prefix: str, year: int, sequence: int, padding: int = 3,
) -> str:
    """PROP-2026-001 style identifiers."""
    return f"{prefix}-{year}-{str(sequence).zfill(padding)}"


def counter_key(kind: str, year: int) -> str:
    return f"{kind}_{year}"


# ─── Payments / due dates ────────────────────────────────────────

def apply_payment(
    total: float,
    previous_payments: Iterable[Mapping],
    amount: float,
    current_status: InvoiceStatus,
) -> PaymentOutcome:
    """Paid/due after adding one payment. Overpayment counts as paid."""
    amount_paid = round_currency(
        sum(float(p["amount"]) for p in previous_payments) + amount,
    )
    amount_due = round_currency(total - amount_paid)
    if amount_due <= 0:
        status = InvoiceStatus.PAID
    elif amount_paid > 0:
        status = InvoiceStatus.PARTIALLY_PAID
    else:
        status = current_status
    return PaymentOutcome(amount_paid, amount_due, status, amount_due <= 0)


_OVERDUE_CANDIDATES = frozenset({
    InvoiceStatus.SENT, InvoiceStatus.VIEWED, InvoiceStatus.PARTIALLY_PAID,
})


def is_invoice_overdue(
    status: InvoiceStatus, due_date: datetime, amount_due: float, now: datetime,
) -> bool:
    return status in _OVERDUE_CANDIDATES and due_date < now and amount_due > 0


_EXPIRABLE = frozenset({ProposalStatus.SENT, ProposalStatus.VIEWED})


def is_proposal_expired(
    status: ProposalStatus, valid_until: datetime | None, now: datetime,
) -> bool:
    return status in _EXPIRABLE and valid_until is not None and valid_until < now
