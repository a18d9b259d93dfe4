"""Billing Schemas - proposal and invoice boundary validation.

Invariants:
    - At least one line item; quantity > 0 and rate >= 0 per item
    - Client name and email are required
    - Amounts and totals are never accepted from input; responses carry the
      server-computed values
    - card_total, ach_total and payment_method_savings are derived from total
      and the stored fee/discount configs on every response

Design Decisions:
    - Update models repeat the field constraints with every field optional;
      the service applies only fields that were sent (exclude_unset)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator

from storefront.core.domain_types import (
    DiscountType, InvoiceStatus, PaymentMethod, ProposalStatus,
)
from storefront.core.totals import (
    calculate_ach_total, calculate_total_with_processing_fee, format_payment_method_savings,
)


class ClientInfo(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    company: str | None = None
    phone: str | None = None
    address: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("client name is required")
        return v


class LineItemInput(BaseModel):
    id: str | None = None
    description: str = Field(min_length=1, max_length=1000)
    quantity: float = Field(gt=0)
    rate: float = Field(ge=0)
    taxable: bool = True


class TaxConfig(BaseModel):
    tax_rate: float = Field(ge=0, le=100)
    tax_label: str = "Tax"


class Discount(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: DiscountType
    value: float = Field(ge=0)
    reason: str | None = None


class ProcessingFeeConfig(BaseModel):
    enabled: bool = False
    card_fee_percent: float = Field(0, ge=0, le=100)


class PaymentMethodDiscount(BaseModel):
    enabled: bool = False
    ach_discount_percent: float = Field(0, ge=0, le=100)


class BillingDocumentInput(BaseModel):
    client: ClientInfo
    client_id: str | None = None
    line_items: list[LineItemInput] = Field(min_length=1)
    tax_config: TaxConfig | None = None
    discount: Discount | None = None
    processing_fee_config: ProcessingFeeConfig | None = None
    payment_method_discount: PaymentMethodDiscount | None = None
    title: str | None = Field(None, max_length=300)
    notes: str | None = None
    terms: str | None = None


class BillingDocumentUpdate(BaseModel):
    client: ClientInfo | None = None
    client_id: str | None = None
    line_items: list[LineItemInput] | None = Field(None, min_length=1)
    tax_config: TaxConfig | None = None
    discount: Discount | None = None
    processing_fee_config: ProcessingFeeConfig | None = None
    payment_method_discount: PaymentMethodDiscount | None = None
    title: str | None = Field(None, max_length=300)
    notes: str | None = None
    terms: str | None = None

    @field_validator("client", "line_items")
    @classmethod
    def not_clearable(cls, v):
        if v is None:
            raise ValueError("may be replaced but not cleared")
        return v


class BillingDocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: str | None = None
    client: dict
    line_items: list[dict]
    subtotal: float
    tax_config: dict | None = None
    tax_amount: float
    discount: dict | None = None
    discount_amount: float
    total: float
    processing_fee_config: dict | None = None
    payment_method_discount: dict | None = None
    title: str | None = None
    notes: str | None = None
    terms: str | None = None
    sent_at: datetime | None = None
    viewed_at: datetime | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def card_total(self) -> float:
        """Total when paid by card, processing fee included."""
        return calculate_total_with_processing_fee(self.total, self.processing_fee_config)

    @computed_field
    @property
    def ach_total(self) -> float:
        return calculate_ach_total(self.total, self.payment_method_discount)

    @computed_field
    @property
    def payment_method_savings(self) -> str | None:
        return format_payment_method_savings(self.total, self.payment_method_discount)


# ─── Proposals ───────────────────────────────────────────────────

class ProposalCreate(BillingDocumentInput):
    description: str | None = None
    valid_until: datetime | None = None


class ProposalUpdate(BillingDocumentUpdate):
    description: str | None = None
    valid_until: datetime | None = None


class ProposalResponse(BillingDocumentResponse):
    proposal_number: str
    status: ProposalStatus
    description: str | None = None
    valid_until: datetime | None = None
    responded_at: datetime | None = None
    converted_to_invoice_id: str | None = None


# ─── Invoices ────────────────────────────────────────────────────

class InvoiceCreate(BillingDocumentInput):
    issue_date: datetime | None = None
    due_date: datetime | None = None
    purchase_order_number: str | None = Field(None, max_length=100)


class InvoiceUpdate(BillingDocumentUpdate):
    issue_date: datetime | None = None
    due_date: datetime | None = None
    purchase_order_number: str | None = Field(None, max_length=100)


class PaymentCreate(BaseModel):
    amount: float = Field(gt=0)
    method: PaymentMethod
    reference: str | None = Field(None, max_length=200)
    notes: str | None = None
    paid_at: datetime | None = None


class InvoiceResponse(BillingDocumentResponse):
    invoice_number: str
    status: InvoiceStatus
    amount_paid: float
    amount_due: float
    payments: list[dict]
    issue_date: datetime
    due_date: datetime
    proposal_id: str | None = None
    purchase_order_number: str | None = None
    paid_at: datetime | None = None
    cancelled_at: datetime | None = None


class SweepResult(BaseModel):
    updated: int
    ids: list[str]
