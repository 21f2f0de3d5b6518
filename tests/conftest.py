"""
conftest.py — Shared Test Fixtures for QuoteDesk

Provides an in-memory SQLite database, FastAPI TestClients with auth
overrides for a supplier and a buyer, and factory fixtures for the
parties, an RFQ, an inquiry, and one quotation of each kind.

Business Rules:
- All tests run against an isolated in-memory DB
- Auth is overridden so route tests don't need a login round-trip
- Each test function gets fresh tables (create_all / drop_all)

Called by: all test files via pytest autodiscovery
Depends on: quotedesk.models (Base), quotedesk.database (get_db), quotedesk.dependencies
"""

import os
os.environ["TESTING"] = "1"  # Must be set before importing quotedesk modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from quotedesk.models import (
    Base, Buyer, Category, Inquiry, InquiryQuotation, Product, Quotation, Rfq, Supplier, User,
)
from quotedesk.utils.passwords import hash_password

# ── In-memory SQLite engine ──────────────────────────────────────────

TEST_DB_URL = "sqlite://"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@event.listens_for(engine, "connect")
def _enable_fk(dbapi_conn, _):
    """SQLite ignores FKs by default — turn them on."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


TEST_PASSWORD = "s3cret-pass"


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def db_session():
    """Create all tables, yield a session, then tear down."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _add(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture()
def supplier_user(db_session: Session) -> User:
    return _add(db_session, User(
        email="sales@shenzhen-parts.example",
        first_name="Li",
        last_name="Wei",
        role="supplier",
        password_hash=hash_password(TEST_PASSWORD, iterations=1000),
    ))


@pytest.fixture()
def supplier(db_session: Session, supplier_user: User) -> Supplier:
    return _add(db_session, Supplier(
        user_id=supplier_user.id,
        business_name="Shenzhen Parts Co",
        verification_status="verified",
    ))


@pytest.fixture()
def buyer_user(db_session: Session) -> User:
    return _add(db_session, User(
        email="procurement@acme.example",
        first_name="Jane",
        last_name="Doe",
        role="buyer",
        password_hash=hash_password(TEST_PASSWORD, iterations=1000),
    ))


@pytest.fixture()
def buyer(db_session: Session, buyer_user: User) -> Buyer:
    return _add(db_session, Buyer(
        user_id=buyer_user.id,
        company_name="Acme Manufacturing",
        industry="Industrial",
    ))


@pytest.fixture()
def category(db_session: Session) -> Category:
    return _add(db_session, Category(name="Fasteners"))


@pytest.fixture()
def product(db_session: Session, supplier: Supplier, category: Category) -> Product:
    return _add(db_session, Product(
        supplier_id=supplier.id, category_id=category.id, name="M6 hex bolt", is_published=True,
    ))


@pytest.fixture()
def rfq(db_session: Session, buyer: Buyer, category: Category) -> Rfq:
    """An open RFQ for 500 units, expiring in two weeks."""
    return _add(db_session, Rfq(
        buyer_id=buyer.id,
        category_id=category.id,
        title="Stainless M6 bolts",
        description="A2-70 stainless, DIN 933",
        quantity=500,
        target_price=Decimal("12.00"),
        status="open",
        expires_at=datetime.now(timezone.utc) + timedelta(days=14),
    ))


@pytest.fixture()
def inquiry(db_session: Session, buyer: Buyer, supplier: Supplier, product: Product) -> Inquiry:
    return _add(db_session, Inquiry(
        buyer_id=buyer.id,
        supplier_id=supplier.id,
        product_id=product.id,
        subject="Bulk washers for Q3",
        message="Need zinc plated washers",
        quantity=200,
        target_price=Decimal("0.40"),
        status="pending",
    ))


@pytest.fixture()
def rfq_quotation(db_session: Session, rfq: Rfq, supplier: Supplier) -> Quotation:
    """A sent quotation on the RFQ, valid for ten more days."""
    now = datetime.now(timezone.utc)
    return _add(db_session, Quotation(
        rfq_id=rfq.id,
        supplier_id=supplier.id,
        unit_price=Decimal("12.50"),
        total_price=Decimal("6250.00"),
        moq=100,
        lead_time="15-20 days",
        payment_terms="30% deposit, 70% before shipment",
        validity_period=30,
        valid_until=now + timedelta(days=10),
        status="sent",
        created_at=now - timedelta(days=2),
    ))


@pytest.fixture()
def inquiry_quotation(db_session: Session, inquiry: Inquiry) -> InquiryQuotation:
    """A pending inquiry quotation, valid for ten more days."""
    now = datetime.now(timezone.utc)
    return _add(db_session, InquiryQuotation(
        inquiry_id=inquiry.id,
        price_per_unit=Decimal("0.35"),
        total_price=Decimal("70.00"),
        moq=200,
        lead_time="7 days",
        payment_terms="T/T",
        valid_until=now + timedelta(days=10),
        status="pending",
        created_at=now - timedelta(days=1),
    ))


def _make_client(db_session: Session, overrides: dict) -> TestClient:
    from quotedesk.database import get_db
    from quotedesk.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides.update(overrides)
    return TestClient(app)


@pytest.fixture()
def client(db_session: Session, supplier: Supplier):
    """TestClient acting as the supplier."""
    from quotedesk.dependencies import require_supplier

    with _make_client(db_session, {require_supplier: lambda: supplier}) as c:
        yield c

    from quotedesk.main import app
    app.dependency_overrides.clear()


@pytest.fixture()
def buyer_client(db_session: Session, buyer: Buyer):
    """TestClient acting as the buyer."""
    from quotedesk.dependencies import require_buyer

    with _make_client(db_session, {require_buyer: lambda: buyer}) as c:
        yield c

    from quotedesk.main import app
    app.dependency_overrides.clear()


@pytest.fixture()
def anon_client(db_session: Session):
    """TestClient with only the DB overridden; auth runs for real."""
    with _make_client(db_session, {}) as c:
        yield c

    from quotedesk.main import app
    app.dependency_overrides.clear()
