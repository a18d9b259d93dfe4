"""Service test fixtures - async DB, FastAPI test client and fakes.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager is a real DatabaseSessionManager over the test database, so
      the API and the readiness check run the production session path
    - Time is injected through FixedClock; nothing depends on the wall clock

Design Decisions:
    - SQLite in-memory: build_engine gives it one shared connection, so data
      written through one session is visible to the next
    - PostgreSQL-only behavior (FOR UPDATE row locks) is not exercised here
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from storefront.infrastructure.database import DatabaseSessionManager
import storefront.infrastructure.database as db_module
from storefront.main import app
from storefront.models.category import Category
from storefront.models.product import Product


class FixedClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_schema()
    yield manager
    await manager.drop_schema()
    await manager.dispose()


@pytest.fixture
async def test_db(db_manager):
    async with db_manager.session() as session:
        yield session


@pytest.fixture
async def client(db_manager):
    """FastAPI test client wired to the test database."""
    original_manager = db_module.db_manager
    db_module.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = original_manager


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def notifier():
    """Notifier double; every send is an AsyncMock the test can inspect."""
    fake = AsyncMock()
    fake.send_restock_notice = AsyncMock(return_value=None)
    fake.send_proposal_accepted = AsyncMock(return_value=None)
    return fake


@pytest.fixture
async def category_tree(test_db):
    """food > fruit > apples, plus a standalone crafts category."""
    food = Category(id="food", name="Food", slug="food", product_count=0)
    fruit = Category(id="fruit", name="Fruit", slug="food/fruit", parent_id="food", product_count=0)
    apples = Category(
        id="apples", name="Apples", slug="food/fruit/apples", parent_id="fruit", product_count=0,
    )
    crafts = Category(id="crafts", name="Crafts", slug="crafts", product_count=0)
    test_db.add_all([food, fruit, apples, crafts])
    await test_db.commit()
    return {"food": food, "fruit": fruit, "apples": apples, "crafts": crafts}


@pytest.fixture
async def honey(test_db):
    product = Product(
        id="honey", name="Raw Honey", slug="raw-honey", description="Local raw honey",
        price=12.5, stock=0, is_active=True, vendor_id="v1", vendor_name="Bee Farm",
        images=["honey.jpg"], tags=[],
    )
    test_db.add(product)
    await test_db.commit()
    return product
