"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Time and outbound notifications are reached only through these protocols
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, ORM rows satisfy CategoryLike as-is
    - Notifier is async because implementations do IO; core never calls it,
      services do
"""

from datetime import datetime
from typing import Protocol


class CategoryLike(Protocol):
    """Structural contract for category records handed to core/category_tree."""
    id: str
    name: str
    slug: str
    parent_id: str | None
    product_count: int


class Clock(Protocol):
    """Timestamp source. Returns an aware UTC datetime."""
    def __call__(self) -> datetime: ...


class Notifier(Protocol):
    """Outbound notification channel (email in production)."""
    async def send_restock_notice(
        self, recipient: str, customer_name: str, product: dict,
    ) -> None: ...

    async def send_proposal_accepted(
        self, recipient: str, proposal: dict,
    ) -> None: ...
