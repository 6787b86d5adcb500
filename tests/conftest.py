# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from product_api.config import Settings
from product_api.database import MemoryProductStore
from product_api.main import create_app

SAMPLE_PRODUCT = {
    "name": "Test iPhone",
    "description": "A test product",
    "price": 999.99,
    "category": "Smartphones",
    "inStock": True,
    "quantity": 50,
}

CATALOG = [
    SAMPLE_PRODUCT,
    {
        "name": "Test MacBook",
        "description": "High-end laptop with M1 chip",
        "price": 1499.99,
        "category": "Computers",
        "inStock": True,
        "quantity": 30,
    },
    {
        "name": "Test AirPods",
        "description": "Wireless earbuds",
        "price": 199.99,
        "category": "Electronics",
        "inStock": False,
        "quantity": 0,
    },
]

MISSING_ID = "64b7f0c2e4b0a1a2b3c4d5e6"


@pytest.fixture
def settings():
    return Settings(store_backend="memory", node_env="test")


@pytest.fixture
def store():
    return MemoryProductStore()


@pytest.fixture
def client(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def catalog(client):
    """Seed the three sample products through the API; returns their ids in creation order."""
    ids = []
    for product in CATALOG:
        r = client.post("/api/products", json=product)
        assert r.status_code == 201
        ids.append(r.json()["data"]["id"])
    return ids
