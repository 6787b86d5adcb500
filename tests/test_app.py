# tests/test_app.py
from fastapi.testclient import TestClient

from product_api.config import Settings
from product_api.database import MemoryProductStore
from product_api.errors import StoreError
from product_api.main import create_app


class FailingStore(MemoryProductStore):
    async def ping(self):
        return False

    async def find(self, query):
        raise StoreError(detail="connection refused")

    async def insert(self, fields):
        raise StoreError(detail="disk full")


def _app_with_boom(node_env: str):
    app = create_app(settings=Settings(store_backend="memory", node_env=node_env), store=MemoryProductStore())

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return app


def test_welcome(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"message": "Welcome to the Product API"}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "message": "Server is running", "database": "up"}


def test_health_reports_store_down():
    app = create_app(settings=Settings(store_backend="memory"), store=FailingStore())
    with TestClient(app) as c:
        r = c.get("/health")
    assert r.status_code == 200
    assert r.json()["database"] == "down"


def test_store_failure_maps_to_500():
    app = create_app(settings=Settings(store_backend="memory", node_env="production"), store=FailingStore())
    with TestClient(app) as c:
        r = c.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"status": "error", "message": "Failed to fetch products"}


def test_store_failure_exposes_detail_in_development():
    app = create_app(settings=Settings(store_backend="memory", node_env="development"), store=FailingStore())
    with TestClient(app) as c:
        r = c.post("/api/products", json={
            "name": "Kettle",
            "description": "Boils water",
            "price": 25,
            "category": "Kitchen",
        })
    assert r.status_code == 500
    assert r.json() == {"status": "error", "message": "Failed to create product", "error": "disk full"}


def test_unhandled_error_hides_detail_in_production():
    with TestClient(_app_with_boom("production"), raise_server_exceptions=False) as c:
        r = c.get("/boom")
    assert r.status_code == 500
    assert r.json() == {"status": "error", "message": "Internal Server Error"}


def test_unhandled_error_shows_detail_in_development():
    with TestClient(_app_with_boom("development"), raise_server_exceptions=False) as c:
        r = c.get("/boom")
    assert r.status_code == 500
    assert r.json()["error"] == "kaboom"


def test_cors_headers(client):
    r = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert r.headers.get("access-control-allow-origin") in ("*", "http://localhost:5173")
