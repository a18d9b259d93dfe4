"""Calculator ORM - admin-defined estimate form and its immutable submissions.

Invariants:
    - steps is the full Step[] document; every field carries its "kind" tag
    - slug is unique across calculators
    - CalculatorSubmission rows are never edited except for status

Design Decisions:
    - No FK from submissions to calculators: submissions outlive a deleted
      calculator and keep their own calculator_name snapshot
"""

from datetime import datetime

from sqlalchemy import String, Text, Float, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, new_id, utcnow


class Calculator(Base):
    __tablename__ = "calculators"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    header_copy: Mapped[str | None] = mapped_column(Text, nullable=True)
    footer_copy: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_hourly_rate: Mapped[float] = mapped_column(Float, nullable=False)
    min_hourly_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_hourly_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    def to_definition(self) -> dict:
        return {
            "name": self.name,
            "default_hourly_rate": self.default_hourly_rate,
            "min_hourly_rate": self.min_hourly_rate,
            "max_hourly_rate": self.max_hourly_rate,
            "steps": self.steps,
        }


class CalculatorSubmission(Base):
    __tablename__ = "calculator_submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    calculator_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    calculator_name: Mapped[str] = mapped_column(String(200), nullable=False)
    selections: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    config: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    breakdown: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_hours: Mapped[float] = mapped_column(Float, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    hourly_rate: Mapped[float] = mapped_column(Float, nullable=False)
    contact_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
