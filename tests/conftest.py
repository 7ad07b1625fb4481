"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import os
import sys
import tempfile
from pathlib import Path

# Settings are read at import time: point the app at an in-memory DB and a
# throwaway log dir before anything from portal is imported.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="portal-logs-"))
os.environ.setdefault("BLOB_BACKEND", "local")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


class FakeBlobStore:
    """In-memory BlobStore double that records calls and can fail on chosen keys."""

    def __init__(self, fail_on=()):
        self.blobs: dict[str, bytes] = {}
        self.types: dict[str, str] = {}
        self.deleted: list[str] = []
        self.fail_on = set(fail_on)

    def put(self, key, data, content_type=None):
        self.blobs[key] = data
        self.types[key] = content_type
        return key

    def get(self, key):
        from infra.storage.store import BlobNotFound

        if key not in self.blobs:
            raise BlobNotFound(key)
        return iter([self.blobs[key]])

    def delete(self, key):
        self.deleted.append(key)
        if key in self.fail_on:
            raise OSError(f"delete failed for {key}")
        self.blobs.pop(key, None)

    def content_type(self, key):
        return self.types.get(key)


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """Create an in-memory SQLite engine for tests."""
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


@pytest.fixture
def db_session(in_memory_engine):
    """Create an in-memory database session. Uses portal.config.Base for schema."""
    import portal.models  # noqa: F401
    from portal.config import Base
    Base.metadata.create_all(in_memory_engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=in_memory_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session):
    """Factory: create a user with the given role."""
    from portal.models.models import User

    def _make(email="learner@example.com", name="Learner", role="user"):
        user = User(email=email, hashed_password="x", name=name, role=role)
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def test_module(db_session):
    from portal.models.models import Module
    module = Module(name="Seguridad", slug="seguridad", description="Safety")
    db_session.add(module)
    db_session.commit()
    return module


@pytest.fixture
def make_course(db_session, test_module, make_user):
    """Factory: create a course in test_module with the given chapter titles."""
    from portal.models.models import Chapter, Course, User

    def _make(title="Fire Safety", chapters=("Intro", "Extinguishers", "Evacuation"), module=None):
        creator = db_session.query(User).filter(User.role == "admin").first()
        if creator is None:
            creator = make_user(email="admin@example.com", name="Admin", role="admin")
        course = Course(
            title=title,
            description=f"{title} course",
            module_id=(module or test_module).id,
            created_by=creator.id,
            chapters=[
                Chapter(position=i, title=t, description=f"{t} chapter")
                for i, t in enumerate(chapters)
            ],
        )
        db_session.add(course)
        db_session.commit()
        return course

    return _make


@pytest.fixture
def fake_store():
    return FakeBlobStore()


@pytest.fixture
def make_store():
    """Factory for FakeBlobStore, e.g. make_store(fail_on={"a.pdf"})."""
    return FakeBlobStore
