"""Unit tests for BadgeIssuer and the conditional inserts behind it."""
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from portal.models.models import Badge, BadgeAward, Course, Module, User
from portal.repositories.badge_repository import BadgeRepository
from portal.services.badge_issuer import BadgeIssuer, badge_description, badge_name


@pytest.fixture
def issuer(db_session):
    return BadgeIssuer(BadgeRepository(db_session))


@pytest.mark.unit
class TestBadgeNaming:
    def test_name(self):
        assert badge_name("Fire Safety") == "Fire Safety - Completed"

    def test_description(self):
        assert badge_description("Fire Safety") == "Badge awarded for completing the course Fire Safety"


@pytest.mark.unit
class TestGetOrCreateBadge:
    def test_creates_once_per_course(self, issuer, db_session, make_course):
        course = make_course()
        first = issuer.get_or_create_badge_for_course(course)
        second = issuer.get_or_create_badge_for_course(course)
        db_session.commit()

        assert first.id == second.id
        assert db_session.query(Badge).filter_by(course_id=course.id).count() == 1
        assert first.name == "Fire Safety - Completed"

    def test_existing_badge_keeps_its_fields(self, issuer, db_session, make_course):
        course = make_course()
        db_session.add(Badge(course_id=course.id, name="Custom", description="Hand made", image="/files/b.png"))
        db_session.commit()

        badge = issuer.get_or_create_badge_for_course(course)
        assert badge.name == "Custom"
        assert badge.image == "/files/b.png"


@pytest.mark.unit
class TestAwardIfAbsent:
    def test_award_once(self, issuer, db_session, make_course, make_user):
        user = make_user()
        badge = issuer.get_or_create_badge_for_course(make_course())

        assert issuer.award_if_absent(badge, user.id) is True
        assert issuer.award_if_absent(badge, user.id) is False
        db_session.commit()
        assert db_session.query(BadgeAward).count() == 1

    def test_list_badges_with_earners(self, issuer, db_session, make_course, make_user):
        course = make_course()
        alice = make_user(email="alice@example.com", name="Alice")
        bob = make_user(email="bob@example.com", name="Bob")
        badge = issuer.get_or_create_badge_for_course(course)
        issuer.award_if_absent(badge, alice.id)
        issuer.award_if_absent(badge, bob.id)
        db_session.commit()

        [response] = issuer.list_badges()
        assert response.course.title == course.title
        assert sorted(e.user for e in response.earned_by) == sorted([alice.id, bob.id])
        assert all(e.earned_at.endswith("Z") for e in response.earned_by)


@pytest.mark.unit
class TestConcurrentBadgeCreation:
    def _seed_course(self, session) -> str:
        admin = User(email="admin@example.com", hashed_password="x", name="Admin", role="admin")
        module = Module(name="Seguridad", slug="seguridad", description="Safety")
        session.add_all([admin, module])
        session.flush()
        course = Course(title="Fire Safety", description="d", module_id=module.id, created_by=admin.id)
        session.add(course)
        session.commit()
        return course.id

    def test_two_open_transactions_end_with_one_badge(self, file_sessions):
        seed = file_sessions()
        course_id = self._seed_course(seed)
        seed.close()

        first, second = file_sessions(), file_sessions()
        try:
            mine = BadgeRepository(first).find_or_create_for_course(course_id, name="First", description="first")
            mine_id = mine.id
            with ThreadPoolExecutor(max_workers=1) as pool:
                # blocks on the first session's write lock until it commits
                theirs = pool.submit(
                    BadgeRepository(second).find_or_create_for_course,
                    course_id,
                    name="Second",
                    description="second",
                )
                time.sleep(0.2)
                first.commit()
                other = theirs.result(timeout=15)
            second.commit()

            assert other.id == mine_id
            assert other.name == "First"
            assert second.query(Badge).filter_by(course_id=course_id).count() == 1
        finally:
            first.close()
            second.close()

    def test_earner_added_once_across_sessions(self, file_sessions):
        seed = file_sessions()
        course_id = self._seed_course(seed)
        learner = User(email="learner@example.com", hashed_password="x", name="Learner", role="user")
        seed.add(learner)
        seed.commit()
        user_id = learner.id
        badge_id = BadgeRepository(seed).find_or_create_for_course(course_id, name="n", description="d").id
        seed.commit()
        seed.close()

        first, second = file_sessions(), file_sessions()
        try:
            assert BadgeRepository(first).add_earner_if_absent(badge_id, user_id) is True
            with ThreadPoolExecutor(max_workers=1) as pool:
                theirs = pool.submit(BadgeRepository(second).add_earner_if_absent, badge_id, user_id)
                time.sleep(0.2)
                first.commit()
                assert theirs.result(timeout=15) is False
            second.commit()
            assert second.query(BadgeAward).filter_by(badge_id=badge_id).count() == 1
        finally:
            first.close()
            second.close()
