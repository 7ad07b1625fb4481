"""
Common utility functions used across services and routes.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional, TypeVar

T = TypeVar("T")


def utcnow() -> datetime:
    """Naive UTC timestamp (the DB stores naive UTC datetimes)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso_format(dt: datetime) -> str:
    """Format datetime as ISO string with Z suffix."""
    return dt.isoformat() + "Z"


def iso_or_none(dt: Optional[datetime]) -> Optional[str]:
    return iso_format(dt) if dt is not None else None


def find_chapter(chapters: Iterable[T], chapter_id: str) -> Optional[T]:
    """Look a chapter up by its stable id in an ordered chapter sequence."""
    for chapter in chapters:
        if getattr(chapter, "id", None) == chapter_id:
            return chapter
    return None


def display_name(name: Optional[str], email: str) -> str:
    """Get display name from the user's name or email."""
    if isinstance(name, str) and name.strip():
        return name.strip()
    # fallback: email prefix
    return email.split("@", 1)[0]


def slugify(value: str) -> str:
    """Lowercase, hyphen-separated slug for module names."""
    out = []
    prev_dash = False
    for ch in value.strip().lower():
        if ch.isalnum():
            out.append(ch)
            prev_dash = False
        elif not prev_dash and out:
            out.append("-")
            prev_dash = True
    return "".join(out).strip("-")
