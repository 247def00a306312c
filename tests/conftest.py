"""Shared fixtures: an in-memory SQLite store seeded with users and products."""

import os
from decimal import Decimal

# must be set before farm_orders builds its module-level engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from farm_orders import models
from farm_orders.database import build_engine, get_db
from farm_orders.main import app

ADMIN_ID = 1
FARMER_ID = 5
OTHER_FARMER_ID = 6


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    models.Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(bind=engine)
    with session_factory() as session:
        session.add_all([
            models.User(user_id=ADMIN_ID, name="Ada", role="admin"),
            models.User(user_id=FARMER_ID, name="Fern", role="farmer"),
            models.User(user_id=OTHER_FARMER_ID, name="Basil", role="farmer"),
            models.Product(product_id=1, name="Tomatoes", price=Decimal("10.00")),
            models.Product(product_id=2, name="Carrots", price=Decimal("2.50")),
        ])
        session.commit()
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def count_rows(session_factory):
    """Count rows as seen by a fresh session, i.e. what other readers see."""

    def _count(model) -> int:
        with session_factory() as session:
            return session.query(model).count()

    return _count


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
