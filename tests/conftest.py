import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from product_catalog.config import Settings
from product_catalog.database import Database
from product_catalog.main import create_app
from product_catalog.models.product import PRODUCTS_COLLECTION
from product_catalog.services.product_service import ProductService


# In-memory MongoDB for testing
TEST_MONGODB_URI = "mongodb://localhost:27017"
TEST_MONGODB_DB = "productcatalog_test"

API = "/api/productcatalog"


class InMemoryDatabase(Database):
    """Database handle backed by mongomock-motor instead of a server."""

    def __init__(self):
        super().__init__(TEST_MONGODB_URI, TEST_MONGODB_DB, client=AsyncMongoMockClient(tz_aware=True))

    async def disconnect(self) -> None:
        # Keep the in-memory data so tests can inspect it after the app stops
        pass

    async def ping(self) -> bool:
        return self.is_connected


@pytest.fixture(scope="function")
def database():
    """Fresh in-memory database for each test."""
    return InMemoryDatabase()


@pytest.fixture(scope="function")
def products_collection(database):
    """Direct access to the products collection for assertions."""
    return database.get_collection(PRODUCTS_COLLECTION)


@pytest.fixture(scope="function")
def product_service(products_collection):
    """Service bound to the in-memory products collection."""
    return ProductService(products_collection)


@pytest.fixture(scope="function")
def client(database):
    """Create test client with a fresh database for each test."""
    app = create_app(settings=Settings(), database=database)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def product_payload():
    """A valid create payload."""
    return {
        "name": "iPhone 15 Pro",
        "description": "Latest Apple iPhone",
        "price": 1500,
        "category": "Electronics",
        "stock": 50,
    }


@pytest.fixture
def created_product(client, product_payload):
    """A product created through the API; returns its response data."""
    response = client.post(API, json=product_payload)
    assert response.status_code == 201
    return response.json()["data"]
