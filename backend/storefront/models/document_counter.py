"""Document Counter ORM - per-kind, per-year sequence for document numbers.

Invariants:
    - key is "<kind>_<year>", e.g. "proposals_2026"
    - value only grows; the row is updated under SELECT ... FOR UPDATE
"""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base


class DocumentCounter(Base):
    __tablename__ = "document_counters"

    key: Mapped[str] = mapped_column(String(40), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
