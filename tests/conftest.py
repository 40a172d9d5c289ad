"""
Shared fixtures: the API wired to an in-memory MongoDB.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from auth import create_access_token
from database import Database, get_db
from main import app

ADMIN_EMAIL = "admin@bistro.com"
USER_EMAIL = "guest@bistro.com"


def bearer(email: str) -> dict:
    """Authorization header for a token carrying the given email claim."""
    token = create_access_token({"email": email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db() -> Database:
    return Database(mongomock.MongoClient(), "bistroDb")


@pytest.fixture
def client(db: Database):
    """Test client whose routes see the in-memory database."""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(db: Database) -> dict:
    db.users.insert_one({"name": "Admin", "email": ADMIN_EMAIL, "role": "admin"})
    return bearer(ADMIN_EMAIL)


@pytest.fixture
def user_headers(db: Database) -> dict:
    db.users.insert_one({"name": "Guest", "email": USER_EMAIL})
    return bearer(USER_EMAIL)
