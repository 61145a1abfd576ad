import os
import tempfile

# Settings are read at import time, so point them at a scratch database first.
_DB_DIR = tempfile.mkdtemp(prefix="hobbyhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["DATABASE_AUTO_CREATE"] = "false"
os.environ.setdefault("SECURITY_JWT_SECRET", "test-access-secret")
os.environ.setdefault("SECURITY_JWT_REFRESH_SECRET", "test-refresh-secret")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

import hobbyhub.models  # noqa: F401
from hobbyhub.core.db import Base, SessionLocal, engine
from hobbyhub.core.dependencies import get_geocoding_client
from hobbyhub.core.security import hash_password
from hobbyhub.main import app
from hobbyhub.models import Event, Hobby, User
from hobbyhub.models.hobby import slugify


class StubGeocoder:
    """Stands in for GeocodingClient inside the app; records calls."""

    def __init__(self):
        self.forward_results = []
        self.reverse_result = None
        self.forward_calls = []
        self.reverse_calls = []

    async def forward_geocode(self, query, near=None, radius_km=None, limit=None):
        self.forward_calls.append(query)
        return list(self.forward_results)

    async def reverse_geocode(self, coordinate):
        self.reverse_calls.append(coordinate)
        return self.reverse_result


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def stub_geocoder():
    return StubGeocoder()


@pytest.fixture
def client(db, stub_geocoder):
    app.dependency_overrides[get_geocoding_client] = lambda: stub_geocoder
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Register through the API; returns (user payload, auth headers, tokens)."""
    def _register(username="alice", email="alice@example.com", password="Passw0rd!", name="Alice"):
        r = client.post(
            "/api/v1/auth/register",
            json={"username": username, "email": email, "password": password, "name": name},
        )
        assert r.status_code == 201, r.text
        body = r.json()
        headers = {"Authorization": f"Bearer {body['tokens']['token']}"}
        return body["user"], headers, body["tokens"]
    return _register


@pytest.fixture
def organizer(db):
    user = User(
        username="organizer",
        email="organizer@example.com",
        name="Organizer",
        hashed_password=hash_password("Passw0rd!"),
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def make_hobby(db, organizer):
    def _make(name="Photography", category="Creative and Visual Arts", description="Taking pictures"):
        hobby = Hobby(
            name=name,
            slug=slugify(name),
            description=description,
            category=category,
            creator_id=organizer.id,
        )
        db.add(hobby)
        db.commit()
        return hobby
    return _make


@pytest.fixture
def make_event(db, organizer):
    def _make(hobby, title, latitude, longitude, description=None, address=None):
        start = datetime.now(timezone.utc) + timedelta(days=1)
        event = Event(
            title=title,
            description=description or f"{title} description",
            hobby_id=hobby.id,
            organizer_id=organizer.id,
            event_type="Public",
            latitude=latitude,
            longitude=longitude,
            formatted_address=address,
            start_date=start,
            end_date=start + timedelta(hours=2),
            capacity=10,
        )
        db.add(event)
        db.commit()
        return event
    return _make
