"""
Integration test fixtures. Overrides get_db and blob storage for API tests with an in-memory DB.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture
def testing_session_local():
    """Fresh in-memory engine and session factory per test."""
    import portal.models  # noqa: F401
    from portal.config import Base
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def override_get_db(testing_session_local):
    def _get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def blob_store(make_store):
    return make_store()


@pytest.fixture
def api_client(override_get_db, blob_store):
    """FastAPI TestClient with in-memory DB and in-memory blob storage."""
    from fastapi.testclient import TestClient
    from portal.api import app
    from portal.config import get_db
    from portal.services.media_service import MediaStorage, get_media_storage
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_storage] = lambda: MediaStorage(blob_store)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def seed_user(testing_session_local):
    """Factory: insert a user directly and return (id, auth headers)."""
    from portal.models.models import User
    from portal.schemas.user_schemas import Role
    from portal.utils.jwt import create_access_token, get_password_hash

    def _seed(email="learner@example.com", password="pass123", name="Learner", role=Role.USER):
        db = testing_session_local()
        try:
            user = User(email=email, hashed_password=get_password_hash(password), name=name, role=role.value)
            db.add(user)
            db.commit()
            user_id = user.id
        finally:
            db.close()
        return user_id, {"Authorization": f"Bearer {create_access_token(user_id, role)}"}

    return _seed


@pytest.fixture
def seed_module(testing_session_local):
    from portal.models.models import Module

    def _seed(name="Seguridad"):
        db = testing_session_local()
        try:
            module = Module(name=name, slug=name.lower(), description=f"{name} module")
            db.add(module)
            db.commit()
            return module.id
        finally:
            db.close()

    return _seed
