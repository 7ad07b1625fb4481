from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv
load_dotenv()

# backends with a native conditional insert (see portal.repositories.base)
SUPPORTED_DIALECTS = ("sqlite", "postgresql")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./portal.db"
    secret_key: str = "your-secret-key-here-change-in-production"
    access_token_expire_minutes: int = 24 * 60

    # local: files live under blob_dir and are served through /files/{key}
    # s3: files live in an S3-compatible bucket (MinIO in docker-compose)
    blob_backend: str = "local"
    blob_dir: str = "uploads"
    s3_endpoint_url: Optional[str] = None
    s3_bucket: str = "capacitaciones"
    s3_access_key: Optional[str] = None
    s3_secret_key: Optional[str] = None
    s3_region: str = "us-east-1"

    log_level: str = "INFO"
    log_dir: str = "logs"

    @field_validator("database_url")
    @classmethod
    def check_database_url(cls, value: str) -> str:
        try:
            backend = make_url(value).get_backend_name()
        except ArgumentError as e:
            raise ValueError(f"invalid database_url: {e}") from e
        if backend not in SUPPORTED_DIALECTS:
            raise ValueError(f"unsupported database backend {backend!r}; use one of {', '.join(SUPPORTED_DIALECTS)}")
        return value


settings = Settings()


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    options: dict = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url:
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def reset_db():
    Base.metadata.drop_all(bind=engine)
    create_db()


def create_db():
    # models must be imported so their tables are registered on Base
    import portal.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
