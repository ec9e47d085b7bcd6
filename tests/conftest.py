"""
Test configuration and fixtures
"""

from datetime import date, timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from orderflow.app import app
from orderflow.database import get_db
from orderflow.models import Base
from orderflow.services import ClientService, OrderItemService, OrderService, ProductService

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Valid CPFs (check digits verified)
CPF_BRUCE = "40177715057"
CPF_MARIA = "52998224725"
CPF_JOAO = "11144477735"
CPF_ANA = "12345678909"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client_service(db_session):
    return ClientService(db_session)


@pytest.fixture
def product_service(db_session):
    return ProductService(db_session)


@pytest.fixture
def order_service(db_session):
    return OrderService(db_session)


@pytest.fixture
def order_item_service(db_session):
    return OrderItemService(db_session)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    # Mock init_db to prevent creating the configured database
    with patch("orderflow.app.init_db"):
        app.dependency_overrides[get_db] = override_get_db
        with TestClient(app) as test_client:
            yield test_client
        app.dependency_overrides.clear()


@pytest.fixture
def future_date():
    """A date comfortably in the future."""
    return date.today() + timedelta(days=365)


@pytest.fixture
def saved_client(client_service):
    """A registered client"""
    return client_service.save(
        name="Bruce Wayne",
        email="b@w.com",
        cpf=CPF_BRUCE,
        birth_date=date(1972, 2, 19),
    )


@pytest.fixture
def saved_product(product_service, future_date):
    """A registered product"""
    return product_service.save(
        name="Utility Belt",
        price=79.99,
        expiration_date=future_date,
        sku="AB12CD34",
    )


@pytest.fixture
def saved_order(order_service, saved_client):
    """A PENDING order for saved_client"""
    return order_service.save(client_id=saved_client.id, status="PENDING")
