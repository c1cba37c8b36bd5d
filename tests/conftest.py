import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REMINDER_EMAILS_ENABLED"] = "false"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import ChangeFeed, get_session
from main import app
from models import Base, Expense, Lease, Owner, Payment, Property, Tenant
from models.expense import ExpenseCategory
from models.lease import LeaseStatus
from models.payment import PaymentStatus, PaymentType
from models.property import PropertyStatus, PropertyType
from services.reporting import ReportCache


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def change_feed():
    return ChangeFeed()


@pytest.fixture
def session_factory(engine, change_feed):
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    change_feed.install(factory)
    return factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def report_cache(change_feed):
    cache = ReportCache()
    cache.attach(change_feed)
    return cache


@pytest.fixture
def client(session_factory, report_cache):
    def override_get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    previous_cache = app.state.report_cache
    app.state.report_cache = report_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.report_cache = previous_cache


# ---------------------------------------------------------------------------
# Factories: add rows and flush; the test commits when it is done seeding.
# ---------------------------------------------------------------------------

def make_owner(db, name="Awa Diallo", phone="+225 0700000000", email=None):
    owner = Owner(name=name, phone=phone, email=email)
    db.add(owner)
    db.flush()
    return owner


def make_property(db, owner, name="Studio A1", rent="100000", commission="10",
                  property_type=PropertyType.ROOM, status=PropertyStatus.AVAILABLE):
    property_obj = Property(
        owner_id=owner.id,
        name=name,
        address="Cocody, Abidjan",
        type=property_type,
        monthly_rent=Decimal(rent),
        commission_percent=Decimal(commission),
        status=status,
    )
    db.add(property_obj)
    db.flush()
    return property_obj


def make_tenant(db, name="Koffi Yao", phone="+225 0500000000", email=None):
    tenant = Tenant(name=name, phone=phone, email=email)
    db.add(tenant)
    db.flush()
    return tenant


def make_lease(db, tenant, property_obj, start=date(2026, 1, 1), end=None,
               rent=None, deposit="0", status=LeaseStatus.ACTIVE):
    lease = Lease(
        tenant_id=tenant.id,
        property_id=property_obj.id,
        monthly_rent=Decimal(rent) if rent is not None else property_obj.monthly_rent,
        deposit=Decimal(deposit),
        advance_months=0,
        start_date=start,
        end_date=end,
        status=status,
    )
    db.add(lease)
    if status == LeaseStatus.ACTIVE:
        property_obj.status = PropertyStatus.OCCUPIED
    db.flush()
    return lease


def make_payment(db, lease, amount, target_month=None, paid_date=date(2026, 3, 2),
                 payment_type=PaymentType.RENT):
    payment = Payment(
        lease_id=lease.id,
        tenant_id=lease.tenant_id,
        property_id=lease.property_id,
        amount=Decimal(amount),
        type=payment_type,
        target_month=target_month,
        paid_date=paid_date,
        status=PaymentStatus.PAID,
    )
    db.add(payment)
    db.flush()
    return payment


def make_expense(db, property_obj, amount, expense_date=date(2026, 3, 12),
                 category=ExpenseCategory.REPAIR, description="Repair"):
    expense = Expense(
        property_id=property_obj.id,
        amount=Decimal(amount),
        category=category,
        description=description,
        expense_date=expense_date,
    )
    db.add(expense)
    db.flush()
    return expense
