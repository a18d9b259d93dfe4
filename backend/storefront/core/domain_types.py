"""Domain Types - enums and identity types shared across the codebase.

Invariants:
    - All valid states encoded as Enums, no raw string matching in core
    - Money values are floats rounded to cents at every computed boundary

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - NewType identities: zero runtime cost, still visible to the type checker
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CategoryId = NewType("CategoryId", str)
ProductId = NewType("ProductId", str)
UserId = NewType("UserId", str)


# ─── Billing ─────────────────────────────────────────────────────

class ProposalStatus(str, Enum):
    """Proposal lifecycle. Only DRAFT is editable."""
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CONVERTED = "converted"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle. Only DRAFT is editable."""
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    PAID = "paid"
    PARTIALLY_PAID = "partially_paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class TaxBase(str, Enum):
    """Which amount tax is charged on."""
    AFTER_DISCOUNT = "after_discount"
    BEFORE_DISCOUNT = "before_discount"


class PaymentMethod(str, Enum):
    CARD = "card"
    ACH = "ach"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"
    WIRE = "wire"
    OTHER = "other"


class DocumentKind(str, Enum):
    """Numbered billing documents. Value is the counter prefix."""
    PROPOSAL = "proposals"
    INVOICE = "invoices"


# ─── SEO ─────────────────────────────────────────────────────────

class SEOTemplateType(str, Enum):
    PRODUCT = "product"
    CATEGORY = "category"
    VENDOR = "vendor"
    CONTENT_POST = "content_post"


class TwitterCard(str, Enum):
    SUMMARY = "summary"
    SUMMARY_LARGE_IMAGE = "summary_large_image"


class ValidationSeverity(str, Enum):
    """Severity of an advisory SEO finding (never blocks a save)."""
    WARNING = "warning"
    ERROR = "error"


# ─── Calculators ─────────────────────────────────────────────────

class FieldKind(str, Enum):
    """Discriminant of the calculator step field union."""
    FEATURE = "feature"
    CONFIG_FIELD = "config_field"


class ConfigFieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    CONTACTED = "contacted"
    CONVERTED = "converted"
    ARCHIVED = "archived"


class MessageSource(str, Enum):
    CONTACT_FORM = "contact_form"
    CALCULATOR = "calculator"
