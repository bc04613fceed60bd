import os
import uuid
from datetime import datetime, timezone

# Settings are cached on first use, so the environment must be in place before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ALLOW_SEEDING"] = "true"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from career_canvas.config import get_settings
from career_canvas.database import Database
from career_canvas.main import create_app
from career_canvas.security import create_access_token
from career_canvas.services.seed_service import SAMPLE_MENTORS, SeedService, build_mentor

get_settings.cache_clear()


@pytest.fixture
def database():
    db = Database(url="sqlite://")
    db.create_all()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture
def app(database):
    return create_app(database)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def make_token():
    """Builds a signed session token for an arbitrary identity."""
    def _make(email="alex.doe@company.com", name="Alex Doe", user_id=None, provider="google", picture=None):
        return create_access_token({
            "id": user_id or str(uuid.uuid4()),
            "email": email,
            "name": name,
            "provider": provider,
            "picture": picture,
        })
    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(**kwargs):
        return {"Authorization": f"Bearer {make_token(**kwargs)}"}
    return _headers


@pytest.fixture
def seeded_mentors(db_session):
    return SeedService(db_session).seed_mentors()


@pytest.fixture
def add_samples(db_session):
    """Inserts only the named sample mentors."""
    def _add(*names):
        now = datetime.now(timezone.utc)
        mentors = [build_mentor(s, now) for s in SAMPLE_MENTORS if s["name"] in names]
        db_session.add_all(mentors)
        db_session.commit()
        return mentors
    return _add


@pytest.fixture
def profile_payload():
    return {
        "name": "Alex Doe",
        "title": "Staff Engineer",
        "department": "Engineering",
        "bio": "Ten years of backend work, happy to help with system design interviews.",
        "experience": 10,
        "skills": ["Python", "System Design"],
        "interests": ["career-growth", "technical-skills"],
        "availability": "limited",
    }
