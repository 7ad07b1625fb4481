"""
Portal schemas package. Import from submodules or from this package.

Example:
    from portal.schemas import CourseResponse, UserSnapshot
    from portal.schemas.history_schemas import MyHistoryResponse
"""

from portal.schemas.auth_schemas import (
    AuthResponse,
    AuthTokenPayload,
    AuthUser,
    LoginRequest,
    RegisterRequest,
)
from portal.schemas.user_schemas import (
    CourseRef,
    Principal,
    ProgressEntryResponse,
    Role,
    SubscribeRequest,
    SubscriptionResponse,
    UpdateProfileRequest,
    UserBadge,
    UserSnapshot,
)
from portal.schemas.course_schemas import (
    ChapterResponse,
    CompleteChapterResponse,
    ContentItem,
    ContentType,
    CourseBadgeResponse,
    CourseResponse,
    CreatorResponse,
    MessageResponse,
    ModuleResponse,
)
from portal.schemas.history_schemas import (
    CategoryStats,
    HistoryChapterResponse,
    HistoryEntryResponse,
    HistoryStats,
    HistoryUserResponse,
    MyHistoryResponse,
)
from portal.schemas.badge_schemas import BadgeEarner, BadgeResponse

__all__ = [
    # auth
    "AuthResponse",
    "AuthTokenPayload",
    "AuthUser",
    "LoginRequest",
    "RegisterRequest",
    # user
    "CourseRef",
    "Principal",
    "ProgressEntryResponse",
    "Role",
    "SubscribeRequest",
    "SubscriptionResponse",
    "UpdateProfileRequest",
    "UserBadge",
    "UserSnapshot",
    # course
    "ChapterResponse",
    "CompleteChapterResponse",
    "ContentItem",
    "ContentType",
    "CourseBadgeResponse",
    "CourseResponse",
    "CreatorResponse",
    "MessageResponse",
    "ModuleResponse",
    # history
    "CategoryStats",
    "HistoryChapterResponse",
    "HistoryEntryResponse",
    "HistoryStats",
    "HistoryUserResponse",
    "MyHistoryResponse",
    # badges
    "BadgeEarner",
    "BadgeResponse",
]
