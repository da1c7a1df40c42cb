"""
Shared test fixtures: SQLite database, test client, company helpers.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from paintquote.database import Base, get_db
from paintquote.main import app
from paintquote.pricing.pricing_config import create_default_config


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
    """Create all tables before each test, drop after. Cached settings go with them."""
    Base.metadata.create_all(bind=engine)
    app.state.settings_cache.clear()
    yield
    app.state.settings_cache.clear()
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
def neutral_config():
    """Default config with every seasonal multiplier at 1.0, so quotes are date-independent."""
    config = create_default_config(1)
    return config.model_copy(update={
        "seasonal_pricing": config.seasonal_pricing.model_copy(update={
            "spring": 1.0, "summer": 1.0, "fall": 1.0, "winter": 1.0,
        }),
    })


@pytest.fixture
def company(client):
    """Create a company with its own rates and return the response JSON."""
    response = client.post("/api/companies/", json={
        "company_name": "Brush & Roller Painting",
        "email": "office@brushroller.test",
        "tax_rate": 8.0,
        "default_hourly_rate": 60.0,
        "markup_percentage": 25.0,
        "overhead_percent": 10.0,
        "minimum_job_size": 400.0,
    })
    assert response.status_code == 200
    return response.json()
