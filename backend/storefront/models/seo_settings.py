"""SEO Settings ORM - singleton row (id "main") holding the whole SEO document.

Design Decisions:
    - One JSON column per top-level section, written wholesale on update
"""

from datetime import datetime

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, utcnow

SINGLETON_ID = "main"


class SEOSettingsRecord(Base):
    __tablename__ = "seo_settings"

    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=SINGLETON_ID)
    global_config: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    pages: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    patterns: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    templates: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    def to_document(self) -> dict:
        return {
            "global": self.global_config,
            "pages": self.pages,
            "patterns": self.patterns,
            "templates": self.templates,
        }
