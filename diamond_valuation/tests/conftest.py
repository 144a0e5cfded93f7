import os

# settings are read at import time by db.session; point them at an in-memory database
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import uuid
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE model registration
import diamond_valuation.models  # noqa

from diamond_valuation.core.security import hash_password
from diamond_valuation.db.base import Base
from diamond_valuation.db.session import get_db
from diamond_valuation.main import create_app
from diamond_valuation.models.enums import UserRole
from diamond_valuation.models.receipt import Receipt
from diamond_valuation.models.service_offering import ServiceOffering
from diamond_valuation.models.user import User
from diamond_valuation.tests.helpers import PASSWORD

engine = create_engine(
    "sqlite+pysqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    app = create_app()

    def override_get_db():
        s = TestingSessionLocal()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c


def _user(db, username, name, role):
    u = User(
        id=uuid.uuid4(),
        name=name,
        email=f"{username}@example.com",
        phone_number="0900000000",
        role=role.value,
        username=username,
        password_hash=hash_password(PASSWORD),
    )
    db.add(u)
    return u


@pytest.fixture(scope="function")
def people(db):
    customer = _user(db, "customer1", "Linh Tran", UserRole.CUSTOMER)
    other_customer = _user(db, "customer2", "Bao Vo", UserRole.CUSTOMER)
    consultant = _user(db, "consultant1", "Minh Nguyen", UserRole.CONSULTANT)
    appraiser = _user(db, "appraiser1", "Hoa Pham", UserRole.APPRAISER)
    other_appraiser = _user(db, "appraiser2", "Quan Do", UserRole.APPRAISER)
    manager = _user(db, "manager1", "An Le", UserRole.MANAGER)

    service = ServiceOffering(id=uuid.uuid4(), name="Standard Valuation", price=Decimal("50.00"))
    db.add(service)
    db.flush()

    receipt = Receipt(
        id=uuid.uuid4(),
        receipt_number="RC-000001",
        customer_id=customer.id,
        customer_name=customer.name,
        phone_number="0911222333",
        email="linh@example.com",
        consultant_id=consultant.id,
        service_id=service.id,
        appointment_date=date(2026, 10, 20),
        appointment_time="09:00-10:00",
    )
    db.add(receipt)
    db.commit()

    return SimpleNamespace(
        customer=customer,
        other_customer=other_customer,
        consultant=consultant,
        appraiser=appraiser,
        other_appraiser=other_appraiser,
        manager=manager,
        service=service,
        receipt=receipt,
    )
