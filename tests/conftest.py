"""
Pet Registry — Test Configuration (conftest.py)

Shared fixtures: an in-memory SQLite database recreated per test, a FastAPI
TestClient, and seeded admin / pet-owner accounts with their bearer tokens.
"""

import os

# Override settings BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["BASE_URL"] = "https://pets.example.com"
os.environ["DEFAULT_ADMIN_EMAIL"] = ""
os.environ["DEFAULT_ADMIN_PASSWORD"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from app.application.services.auth_service import generate_token, register_user
from app.core.constants import Role
from app.core.rate_limit import auth_limiter, create_limiter, general_limiter
from app.domain.models.user import User
from app.infrastructure.database import Base, SessionLocal, engine, init_db
from app.infrastructure.geolocation import geolocation_service
from app.infrastructure.qr_code import qr_code_service
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from app.main import app


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test."""
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_state():
    for limiter in (general_limiter, auth_limiter, create_limiter):
        limiter.reset()
    geolocation_service.clear_cache()
    qr_code_service.clear_cache()
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_repo(db_session):
    return SQLAlchemyUserRepository(db_session, User)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _make_user(username: str, email: str, role: int) -> dict:
    session = SessionLocal()
    try:
        user = register_user(SQLAlchemyUserRepository(session, User), username, email, "secret123", role)
        token = generate_token(user)
        return {
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }
    finally:
        session.close()


@pytest.fixture
def admin():
    return _make_user("admin", "admin@pets.com", Role.ADMIN)


@pytest.fixture
def owner():
    return _make_user("maria", "maria@pets.com", Role.PET_OWNER)


@pytest.fixture
def other_owner():
    return _make_user("jorge", "jorge@pets.com", Role.PET_OWNER)


@pytest.fixture
def pet_payload():
    return {
        "name": "Firulais",
        "owner": "María López",
        "species": "Perro",
        "zone": "Centro",
        "birthdate": "2020-05-01",
        "notes": "Muy amigable",
        "phone": [
            {"number": "+34 600 123 456", "owner": "María", "isPrimary": True},
            {"number": "(91) 555-0101", "owner": "Casa"},
        ],
    }


@pytest.fixture
def create_pet(client, admin, pet_payload):
    """Factory creating a pet through the API as the administrator."""

    def _create(owner_id=None, **overrides):
        body = {**pet_payload, **overrides}
        if owner_id:
            body["ownerId"] = owner_id
        resp = client.post("/api/pets", json=body, headers=admin["headers"])
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _create
