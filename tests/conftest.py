import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.db.db import get_session
from app.main import app
from app.models import admin, product, warranty_claim, warranty_record  # noqa: F401
from app.models.product import CameraType, Product
from app.services import warranty_records
from scripts.create_admin import create_admin

# Fixed "now" for every status decision made in tests
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock():
    return NOW


@pytest.fixture(scope="function")
def test_engine():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session(test_engine):
    with Session(test_engine) as session:
        yield session


@pytest.fixture(scope="function")
def client(session):
    """Test client sharing the test session"""
    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def camera(session):
    item = Product(
        product_id="CAM-001",
        product_name="Hikvision 4MP Dome",
        brand="Hikvision",
        camera_type=CameraType.ip,
        resolution="4MP",
        warranty_months=12,
        price=8500,
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


@pytest.fixture
def other_camera(session):
    item = Product(
        product_id="CAM-002",
        product_name="Dahua 2MP Bullet",
        brand="Dahua",
        camera_type=CameraType.analog,
        resolution="2MP",
        price=4200,
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


@pytest.fixture
def make_record(session, camera):
    """Create a warranty record through the service with the fixed clock"""
    def _make(**overrides):
        status_override = overrides.pop("status_override", None)
        fields = {
            "customer_name": "Ali Raza",
            "phone_number": "0300-1112222",
            "customer_address": "12 Mall Road, Lahore",
            "product_id": camera.id,
            "quantity_purchased": 2,
            "purchase_date": datetime(2025, 1, 10, tzinfo=timezone.utc),
            "warranty_valid_until": datetime(2026, 1, 10, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return warranty_records.create_warranty_record(
            session, fields, status_override=status_override, now=fixed_clock
        )

    return _make


@pytest.fixture
def admin_account(session):
    return create_admin(
        session,
        email="Admin@Shop.pk",
        password="Admin@123",
        username="admin",
        full_name="Super Admin",
        phone="03000000000",
    )


@pytest.fixture
def admin_headers(client, admin_account):
    """Log in through the real route and return bearer headers"""
    response = client.post("/admin/login", json={"email": "admin@shop.pk", "password": "Admin@123"})
    assert response.status_code == 200
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return fixed_clock
