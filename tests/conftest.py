"""
Shared test fixtures: SQLite test database, test client, seed helpers.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point settings at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from backend.database import Base, get_db
from backend.main import app


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lead_id(client):
    """Create a lead through the API and return its id."""
    response = client.post("/api/leads/", json={
        "name": "Asha Menon",
        "phone": "+91-9800000001",
        "email": "asha@example.com",
        "source": "referral",
        "project_tag": "Whitefield 3BHK",
    })
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def client_id(client, lead_id):
    """Create a client linked to the lead and return its id."""
    response = client.post("/api/clients/", json={
        "name": "Asha Menon",
        "email": "asha@example.com",
        "lead_id": lead_id,
    })
    assert response.status_code == 201
    return response.json()["id"]
