"""
Pytest fixtures for the inventory and orders services.

Provides:
- In-memory SQLite sessions per test, one database per service
- FastAPI test clients with the database dependency overridden
- Routing of the orders service's inventory calls to an httpx transport

DATABASE_URL is forced to SQLite before the service modules are imported,
since both create their tables at import time.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("SEED_SAMPLE_DATA", None)

from datetime import date, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory_app import crud as inventory_crud
from inventory_app import database as inventory_database
from inventory_app import main as inventory_main
from inventory_app import schemas as inventory_schemas
from orders_app import database as orders_database
from orders_app import main as orders_main

TODAY = date.today()
RealAsyncClient = httpx.AsyncClient


def _session_factory(base):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    base.metadata.create_all(bind=engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _override(factory):
    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()
    return override_get_db


@pytest.fixture
def inventory_sessions():
    engine, factory = _session_factory(inventory_database.Base)
    yield factory
    engine.dispose()


@pytest.fixture
def inventory_db(inventory_sessions):
    db = inventory_sessions()
    yield db
    db.close()


@pytest.fixture
def inventory_api(inventory_sessions):
    inventory_main.app.dependency_overrides[inventory_database.get_db] = _override(inventory_sessions)
    with TestClient(inventory_main.app) as client:
        yield client
    inventory_main.app.dependency_overrides.clear()


@pytest.fixture
def orders_sessions():
    engine, factory = _session_factory(orders_database.Base)
    yield factory
    engine.dispose()


@pytest.fixture
def orders_db(orders_sessions):
    db = orders_sessions()
    yield db
    db.close()


@pytest.fixture
def orders_api(orders_sessions):
    orders_main.app.dependency_overrides[orders_database.get_db] = _override(orders_sessions)
    with TestClient(orders_main.app) as client:
        yield client
    orders_main.app.dependency_overrides.clear()


@pytest.fixture
def route_inventory(monkeypatch):
    """Send every httpx.AsyncClient request through the given transport."""
    def route(transport):
        def client_factory(**kwargs):
            return RealAsyncClient(transport=transport, **kwargs)
        monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return route


@pytest.fixture
def wheat(inventory_db):
    """WHEAT with B1 (1000, +6 months) and B2 (500, +9 months)."""
    inventory_crud.create_product(
        inventory_db, inventory_schemas.ProductCreate(product_id="WHEAT", name="Wheat")
    )
    for batch_id, quantity, days in (("B1", 1000, 182), ("B2", 500, 273)):
        inventory_crud.update_inventory(
            inventory_db,
            inventory_schemas.InventoryUpdate(
                product_id="WHEAT",
                batch_id=batch_id,
                quantity=quantity,
                expiry_date=TODAY + timedelta(days=days),
            ),
        )
    return inventory_crud.get_product(inventory_db, "WHEAT")
