"""Error Hierarchy - typed, categorized exceptions for all storefront failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Business-rule errors (400/404/409) are raised BEFORE any store mutation
    - Infrastructure errors (503) wrap store failures after rollback
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with StorefrontError base: one global FastAPI handler
    - ErrorContext as dataclass: ids for observability without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for the response and the log line."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_type: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "resource_type": self.context.resource_type,
                    "resource_id": self.context.resource_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class BusinessRuleError(StorefrontError):
    """Generic business rule violation with a human-readable message."""
    def __init__(self, message: str, code: str = "BUSINESS_RULE_VIOLATED",
                 context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class ResourceNotFoundError(StorefrontError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class ParentCategoryNotFoundError(ResourceNotFoundError):
    """A category referenced a parent_id that does not exist."""
    def __init__(self, parent_id: str, context: ErrorContext | None = None):
        super().__init__("Parent category", parent_id, context)
        self.code = "PARENT_CATEGORY_NOT_FOUND"
        self.parent_id = parent_id


class CategoryHasChildrenError(StorefrontError):
    """Category cannot be deleted while subcategories point at it."""
    def __init__(self, category_id: str, child_count: int,
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_type = "Category"
        ctx.resource_id = category_id
        super().__init__(
            "Cannot delete category with subcategories. "
            "Delete or reassign subcategories first.",
            "CATEGORY_HAS_CHILDREN", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.child_count = child_count


class CategoryCycleError(StorefrontError):
    """A category was asked to become a child of itself or of a descendant."""
    def __init__(self, category_id: str, parent_id: str,
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_type = "Category"
        ctx.resource_id = category_id
        super().__init__(
            f"Category '{category_id}' cannot be moved under '{parent_id}': "
            "the parent is the category itself or one of its descendants.",
            "CATEGORY_CYCLE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


class DuplicateWishlistItemError(StorefrontError):
    """Product is already on the user's wishlist."""
    def __init__(self, product_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_type = "Product"
        ctx.resource_id = product_id
        super().__init__(
            "Item already in wishlist",
            "WISHLIST_DUPLICATE_ITEM", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )


class DocumentNotEditableError(StorefrontError):
    """Proposal or invoice edited outside the draft status."""
    def __init__(self, document_type: str, document_id: str, status: str,
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_type = document_type
        ctx.resource_id = document_id
        super().__init__(
            f"{document_type} can only be edited while in draft "
            f"(current status: {status})",
            "DOCUMENT_NOT_EDITABLE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.status = status


class InvalidStatusTransitionError(StorefrontError):
    """Requested status change is not allowed from the current status."""
    def __init__(self, document_type: str, current: str, target: str,
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_type = document_type
        super().__init__(
            f"{document_type} cannot move from '{current}' to '{target}'",
            "INVALID_STATUS_TRANSITION", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.current = current
        self.target = target


class ProposalAlreadyConvertedError(StorefrontError):
    """Proposal has already been converted to an invoice."""
    def __init__(self, proposal_id: str, invoice_id: str | None,
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_type = "Proposal"
        ctx.resource_id = proposal_id
        super().__init__(
            "Proposal has already been converted to an invoice",
            "PROPOSAL_ALREADY_CONVERTED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.invoice_id = invoice_id


class DataIntegrityError(StorefrontError):
    """A write collided with a unique or foreign-key constraint."""
    def __init__(self, constraint: str, context: ErrorContext | None = None):
        super().__init__(
            f"Write conflicts with existing data ({constraint})",
            "DATA_INTEGRITY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.constraint = constraint


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(StorefrontError):
    """Document store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
