import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from inventory_ledger.config import Settings
from inventory_ledger.database import Database
from inventory_ledger.main import create_app


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def database():
    """Fresh in-memory database for each test."""
    db = Database(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db.create_all()

    yield db

    db.drop_all()
    db.dispose()


@pytest.fixture(scope="function")
def settings():
    return Settings(DATABASE_URL=SQLALCHEMY_DATABASE_URL)


@pytest.fixture(scope="function")
def client(database, settings):
    """Create test client bound to the test database."""
    app = create_app(settings=settings, database=database)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(database):
    """Create database session for direct database access in tests."""
    session = database.session()

    yield session

    session.close()


@pytest.fixture
def import_products(client):
    """Import products through the API for the given owner."""
    def _import(products, owner="owner@x.com"):
        response = client.post(
            "/api/importar-productos",
            json={"productos": products, "usuario_correo": owner}
        )
        assert response.status_code == 200
        return response

    return _import
