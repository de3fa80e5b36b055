import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, build_engine, get_db, init_db
from main import app


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload():
    return {
        "fullName": "Asha Rao",
        "phoneNumber": "9876543210",
        "pickupLocation": "12 MG Road",
        "dropoffLocation": "4 Park Street",
        "movingDate": "2026-11-02",
        "items": {"sofaSet": True, "bed": True},
        "price": 289,
    }
