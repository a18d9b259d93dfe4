"""ORM Models - SQLAlchemy declarative models for all storefront collections.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before
      create_all or an Alembic autogenerate runs
"""

from storefront.models.category import Category  # noqa: F401
from storefront.models.product import Product  # noqa: F401
from storefront.models.seo_settings import SEOSettingsRecord  # noqa: F401
from storefront.models.store_settings import StoreSettings  # noqa: F401
from storefront.models.calculator import Calculator, CalculatorSubmission  # noqa: F401
from storefront.models.contact_message import ContactMessage  # noqa: F401
from storefront.models.proposal import Proposal  # noqa: F401
from storefront.models.invoice import Invoice  # noqa: F401
from storefront.models.document_counter import DocumentCounter  # noqa: F401
from storefront.models.wishlist import Wishlist  # noqa: F401
