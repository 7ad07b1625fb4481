"""
Migration: collapse the legacy free-text courses.category into courses.module_id.

- courses: add module_id if missing.
- each distinct category resolves to a module by id, then by name; an unknown
  category becomes a new module.
- courses with no category go to the "Uncategorized" module, created on demand,
  and are listed so they can be filed properly later.
- courses.category is dropped once every course points at a module.

Safe to re-run: a database without courses.category is left untouched.
"""

import os
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Optional

from portal.utils.common import slugify

UNCATEGORIZED = "Uncategorized"


def _db_path_from_env() -> str:
    return os.getenv("DATABASE_URL", "sqlite:///./portal.db").replace("sqlite:///", "")


def _columns(cursor: sqlite3.Cursor, table: str) -> set[str]:
    cursor.execute(f"PRAGMA table_info({table})")
    return {row[1] for row in cursor.fetchall()}


def _resolve_module(cursor: sqlite3.Cursor, category: str) -> str:
    cursor.execute("SELECT id FROM modules WHERE id = ?", (category,))
    row = cursor.fetchone()
    if row:
        return row[0]
    cursor.execute("SELECT id FROM modules WHERE lower(name) = lower(?)", (category,))
    row = cursor.fetchone()
    if row:
        return row[0]

    module_id = str(uuid.uuid4())
    now = datetime.now(timezone.utc).replace(tzinfo=None).isoformat(sep=" ")
    cursor.execute(
        "INSERT INTO modules (id, name, slug, description, created_at) VALUES (?, ?, ?, ?, ?)",
        (module_id, category, slugify(category), None, now),
    )
    print(f"modules: created {category!r} -> {module_id}")
    return module_id


def run_migration(db_path: Optional[str] = None) -> bool:
    """Returns True when the migration changed the database."""
    db_path = db_path or _db_path_from_env()
    conn = None
    try:
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()

        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='courses'")
        if not cursor.fetchone():
            print("courses table not found. Skipping.")
            return False

        columns = _columns(cursor, "courses")
        if "category" not in columns:
            print("courses.category already migrated. Skipping.")
            return False

        if "module_id" not in columns:
            cursor.execute("ALTER TABLE courses ADD COLUMN module_id VARCHAR")
            print("courses: added module_id")

        cursor.execute(
            "SELECT DISTINCT category FROM courses "
            "WHERE (module_id IS NULL OR module_id = '') AND category IS NOT NULL AND category != ''"
        )
        categories = [row[0] for row in cursor.fetchall()]
        for category in categories:
            module_id = _resolve_module(cursor, category)
            cursor.execute(
                "UPDATE courses SET module_id = ? WHERE category = ? AND (module_id IS NULL OR module_id = '')",
                (module_id, category),
            )
            print(f"courses: {cursor.rowcount} course(s) in {category!r} moved to module {module_id}")

        cursor.execute(
            "SELECT id, title FROM courses "
            "WHERE (module_id IS NULL OR module_id = '') AND (category IS NULL OR category = '')"
        )
        orphans = cursor.fetchall()
        if orphans:
            module_id = _resolve_module(cursor, UNCATEGORIZED)
            cursor.executemany("UPDATE courses SET module_id = ? WHERE id = ?", [(module_id, cid) for cid, _ in orphans])
            for cid, title in orphans:
                print(f"courses: {cid} ({title!r}) has no category, filed under {UNCATEGORIZED!r}")

        try:
            cursor.execute("ALTER TABLE courses DROP COLUMN category")
            print("courses: dropped category")
        except sqlite3.OperationalError as e:
            # sqlite < 3.35 has no DROP COLUMN; the column is then simply ignored
            print(f"courses.category kept: {e}")

        conn.commit()
        print("✓ Migration migrate_course_categories completed successfully!")
        return True

    except sqlite3.Error as e:
        print(f"Error during migration: {e}")
        if conn:
            conn.rollback()
        raise
    finally:
        if conn:
            conn.close()


if __name__ == "__main__":
    run_migration()
