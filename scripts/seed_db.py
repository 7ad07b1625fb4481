#!/usr/bin/env python3
"""
Seed a development database: an admin, a teacher, a few modules and one sample
course with text-only chapters.

Run: python scripts/seed_db.py
     python scripts/seed_db.py --admin-email admin@portal.local --admin-password secret
     python scripts/seed_db.py --reset

Uses DATABASE_URL (see .env). Existing rows are kept; the script only adds
what is missing.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from portal.config import SessionLocal, create_db, reset_db  # noqa: E402
from portal.models.models import Chapter, Course, Module, User  # noqa: E402
from portal.repositories.user_repository import UserRepository  # noqa: E402
from portal.schemas.user_schemas import Role  # noqa: E402
from portal.utils.common import slugify  # noqa: E402
from portal.utils.jwt import get_password_hash  # noqa: E402

MODULES = [
    ("Seguridad", "Workplace safety and emergency procedures"),
    ("Calidad", "Quality standards and audits"),
    ("Onboarding", "First steps for new staff"),
]

SAMPLE_COURSE = {
    "title": "Welcome to the company",
    "description": "What every new team member needs to know in their first week.",
    "module": "Onboarding",
    "chapters": [
        ("Our mission", "Who we are and what we do."),
        ("Tools and accounts", "Setting up email, chat and the training portal."),
        ("Who to ask", "Your team, your manager and the HR desk."),
    ],
}


def _ensure_user(db, email: str, password: str, name: str, role: Role) -> User:
    users = UserRepository(db)
    user = users.get_by_email(email)
    if user is None:
        user = users.create(email=email, hashed_password=get_password_hash(password), name=name, role=role.value)
        db.flush()
        print(f"users: created {role.value} {email}")
    return user


def _ensure_module(db, name: str, description: str, created_by: int) -> Module:
    module = db.query(Module).filter(Module.name == name).first()
    if module is None:
        module = Module(name=name, slug=slugify(name), description=description, created_by=created_by)
        db.add(module)
        db.flush()
        print(f"modules: created {name}")
    return module


def seed(admin_email: str, admin_password: str, reset: bool = False) -> None:
    if reset:
        reset_db()
        print("database reset")
    else:
        create_db()
    db = SessionLocal()
    try:
        admin = _ensure_user(db, admin_email, admin_password, "Administrator", Role.ADMIN)
        _ensure_user(db, "teacher@portal.local", "teacher123", "Teacher", Role.TEACHER)

        modules = {name: _ensure_module(db, name, desc, admin.id) for name, desc in MODULES}

        if db.query(Course).filter(Course.title == SAMPLE_COURSE["title"]).first() is None:
            course = Course(
                title=SAMPLE_COURSE["title"],
                description=SAMPLE_COURSE["description"],
                module_id=modules[SAMPLE_COURSE["module"]].id,
                created_by=admin.id,
                chapters=[
                    Chapter(position=i, title=title, description=description)
                    for i, (title, description) in enumerate(SAMPLE_COURSE["chapters"])
                ],
            )
            db.add(course)
            print(f"courses: created {course.title}")

        db.commit()
        print("✓ Seed completed")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the training portal database")
    parser.add_argument("--admin-email", default="admin@portal.local")
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    args = parser.parse_args()
    seed(args.admin_email, args.admin_password, reset=args.reset)


if __name__ == "__main__":
    main()
