from portal.config import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Table, UniqueConstraint
from sqlalchemy.orm import relationship
from uuid import uuid4

from portal.utils.common import utcnow


def _uuid() -> str:
    return str(uuid4())


user_modules = Table(
    "user_modules",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("module_id", String, ForeignKey("modules.id"), primary_key=True),
)

user_completed_courses = Table(
    "user_completed_courses",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("course_id", String, ForeignKey("courses.id"), primary_key=True),
)

user_badges = Table(
    "user_badges",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("badge_id", String, ForeignKey("badges.id"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="user")  # user|admin|teacher
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    progress = relationship(
        "ProgressEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="ProgressEntry.id",
    )
    completed_courses = relationship("Course", secondary=user_completed_courses, back_populates="completed_by")
    badges = relationship("Badge", secondary=user_badges, back_populates="holders")
    subscribed_modules = relationship("Module", secondary=user_modules)


class ProgressEntry(Base):
    __tablename__ = "progress_entries"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_progress_user_course"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    # No FK: progress outlives a deleted course, like the history ledger.
    course_id = Column(String, index=True, nullable=False)

    user = relationship("User", back_populates="progress")
    chapters = relationship(
        "ProgressChapter",
        cascade="all, delete-orphan",
        order_by="ProgressChapter.id",
    )

    @property
    def completed_chapter_ids(self) -> list[str]:
        return [c.chapter_id for c in self.chapters]


class ProgressChapter(Base):
    __tablename__ = "progress_chapters"
    __table_args__ = (UniqueConstraint("entry_id", "chapter_id", name="uq_progress_chapter"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    entry_id = Column(Integer, ForeignKey("progress_entries.id"), index=True, nullable=False)
    chapter_id = Column(String, nullable=False)


class Module(Base):
    __tablename__ = "modules"
    id = Column(String, primary_key=True, index=True, default=_uuid)  # uuid
    name = Column(String, unique=True, nullable=False)
    slug = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    courses = relationship("Course", back_populates="module")


class Course(Base):
    __tablename__ = "courses"
    id = Column(String, primary_key=True, index=True, default=_uuid)  # uuid
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    thumbnail = Column(String, nullable=True)  # blob url
    module_id = Column(String, ForeignKey("modules.id"), index=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    module = relationship("Module", back_populates="courses")
    creator = relationship("User", foreign_keys=[created_by])
    chapters = relationship(
        "Chapter",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Chapter.position",
    )
    badge = relationship("Badge", back_populates="course", uselist=False, cascade="all, delete-orphan")
    completed_by = relationship("User", secondary=user_completed_courses, back_populates="completed_courses")


class Chapter(Base):
    __tablename__ = "chapters"
    id = Column(String, primary_key=True, index=True, default=_uuid)  # uuid, never positional
    course_id = Column(String, ForeignKey("courses.id"), index=True, nullable=False)
    position = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    course = relationship("Course", back_populates="chapters")
    content = relationship(
        "ChapterContent",
        cascade="all, delete-orphan",
        order_by="ChapterContent.position",
    )


class ChapterContent(Base):
    __tablename__ = "chapter_content"
    id = Column(Integer, primary_key=True, autoincrement=True)
    chapter_id = Column(String, ForeignKey("chapters.id"), index=True, nullable=False)
    position = Column(Integer, nullable=False)
    type = Column(String, nullable=False)  # video|pdf|presentation
    url = Column(String, nullable=False)


class Badge(Base):
    __tablename__ = "badges"
    id = Column(String, primary_key=True, index=True, default=_uuid)  # uuid
    course_id = Column(String, ForeignKey("courses.id"), unique=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    course = relationship("Course", back_populates="badge")
    earned_by = relationship(
        "BadgeAward",
        cascade="all, delete-orphan",
        order_by="BadgeAward.earned_at",
    )
    holders = relationship("User", secondary=user_badges, back_populates="badges")


class BadgeAward(Base):
    __tablename__ = "badge_awards"
    badge_id = Column(String, ForeignKey("badges.id"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    earned_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User")


class HistoryEntry(Base):
    __tablename__ = "history"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_history_user_course"),)

    id = Column(String, primary_key=True, index=True, default=_uuid)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    course_id = Column(String, index=True, nullable=False)
    course_title = Column(String, nullable=True)  # snapshot
    category = Column(String, nullable=False, default="")  # module name snapshot
    completed_at = Column(DateTime, nullable=True)  # set on full course completion only
    total_time = Column(Integer, nullable=False, default=0)  # minutes
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User")
    completed_chapters = relationship(
        "HistoryChapter",
        cascade="all, delete-orphan",
        order_by="HistoryChapter.id",
    )


class HistoryChapter(Base):
    __tablename__ = "history_chapters"
    __table_args__ = (UniqueConstraint("history_id", "chapter_id", name="uq_history_chapter"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    history_id = Column(String, ForeignKey("history.id"), index=True, nullable=False)
    chapter_id = Column(String, nullable=False)  # no FK: survives chapter deletion
    title = Column(String, nullable=False)  # snapshot at completion time
    completed_at = Column(DateTime, default=utcnow, nullable=False)
