"""Unit tests for the legacy course category migration (plain sqlite3 file)."""
import sqlite3

import pytest

from migrations.migrate_course_categories import run_migration


def _legacy_db(path):
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE modules (
            id VARCHAR PRIMARY KEY, name VARCHAR UNIQUE NOT NULL, slug VARCHAR,
            description TEXT, created_by INTEGER, created_at DATETIME NOT NULL
        );
        CREATE TABLE courses (
            id VARCHAR PRIMARY KEY, title VARCHAR NOT NULL, category VARCHAR
        );
        INSERT INTO modules (id, name, created_at) VALUES ('m-safety', 'Seguridad', '2025-01-01 00:00:00');
        INSERT INTO courses (id, title, category) VALUES
            ('c1', 'Fire', 'm-safety'),
            ('c2', 'Ladders', 'seguridad'),
            ('c3', 'Audits', 'Calidad');
        """
    )
    conn.commit()
    conn.close()


def _rows(path, sql):
    conn = sqlite3.connect(path)
    try:
        return conn.execute(sql).fetchall()
    finally:
        conn.close()


@pytest.mark.unit
class TestMigrateCourseCategories:
    def test_collapses_category_into_module(self, tmp_path):
        db = str(tmp_path / "legacy.db")
        _legacy_db(db)

        assert run_migration(db) is True

        modules = dict(_rows(db, "SELECT name, id FROM modules"))
        assert set(modules) == {"Seguridad", "Calidad"}
        courses = dict(_rows(db, "SELECT id, module_id FROM courses"))
        # by id, by case-insensitive name, and a newly created module
        assert courses == {"c1": "m-safety", "c2": "m-safety", "c3": modules["Calidad"]}
        assert _rows(db, "SELECT slug FROM modules WHERE name = 'Calidad'") == [("calidad",)]

    def test_rerun_is_noop(self, tmp_path):
        db = str(tmp_path / "legacy.db")
        _legacy_db(db)
        run_migration(db)
        columns = {row[1] for row in _rows(db, "PRAGMA table_info(courses)")}

        assert run_migration(db) is False
        assert "module_id" in columns
        assert _rows(db, "SELECT COUNT(*) FROM modules") == [(2,)]

    def test_missing_courses_table(self, tmp_path):
        db = str(tmp_path / "empty.db")
        assert run_migration(db) is False

    def test_courses_without_category_get_placeholder_module(self, tmp_path):
        db = str(tmp_path / "legacy.db")
        _legacy_db(db)
        conn = sqlite3.connect(db)
        conn.execute("INSERT INTO courses (id, title, category) VALUES ('c4', 'Orphan', NULL), ('c5', 'Blank', '')")
        conn.commit()
        conn.close()

        assert run_migration(db) is True

        modules = dict(_rows(db, "SELECT name, id FROM modules"))
        assert set(modules) == {"Seguridad", "Calidad", "Uncategorized"}
        courses = dict(_rows(db, "SELECT id, module_id FROM courses"))
        assert courses["c4"] == courses["c5"] == modules["Uncategorized"]
        assert _rows(db, "SELECT COUNT(*) FROM courses WHERE module_id IS NULL OR module_id = ''") == [(0,)]

    def test_placeholder_module_is_reused(self, tmp_path):
        db = str(tmp_path / "legacy.db")
        _legacy_db(db)
        conn = sqlite3.connect(db)
        conn.execute(
            "INSERT INTO modules (id, name, created_at) VALUES ('m-misc', 'uncategorized', '2025-01-01 00:00:00')"
        )
        conn.execute("INSERT INTO courses (id, title, category) VALUES ('c4', 'Orphan', NULL)")
        conn.commit()
        conn.close()

        run_migration(db)

        assert _rows(db, "SELECT module_id FROM courses WHERE id = 'c4'") == [("m-misc",)]
        assert _rows(db, "SELECT COUNT(*) FROM modules") == [(3,)]
