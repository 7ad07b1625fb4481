"""
Unit test fixtures. Services run against the root conftest's in-memory DB and
FakeBlobStore; nothing here touches the app, the network or the filesystem
outside tmp_path.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


@pytest.fixture
def file_sessions(tmp_path):
    """
    Session factory over a file-backed SQLite DB, for tests that interleave
    two sessions. Each session gets its own connection, so one sees only what
    the other has committed.
    """
    import portal.models  # noqa: F401
    from portal.config import Base

    engine = create_engine(
        f"sqlite:///{tmp_path / 'portal.db'}",
        connect_args={"check_same_thread": False, "timeout": 10},
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()
