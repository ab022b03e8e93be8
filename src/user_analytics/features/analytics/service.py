"""
Admin Analytics Service Module

Report functions for the admin dashboard. Each one collects its filters as
predicates, runs one or more read-only aggregate querysets through the
injected QueryExecutor and shapes the rows into response schemas.

Generations are classified the same way everywhere:

- download (paid): ``generation_type = 'paid' OR is_paid``
- preview: ``generation_type = 'preview'`` and not paid

so a single generation is never counted as both.
"""

import logging
import math
from typing import Optional

from fastapi import HTTPException, status
from tortoise.expressions import Q
from tortoise.functions import Count, Max, Sum

from ...core.config import RECENT_GENERATIONS_LIMIT, RECENT_LOGINS_LIMIT
from ..auth.models import LoginLog, User
from ..generations.models import GENERATION_TYPE_PAID, GENERATION_TYPE_PREVIEW, Generation
from .query import Date, QueryExecutor, QueryFilter, ReportPeriod
from .schemas import (
    UserSummary, Pagination, UserListResponse, UserDetail, PreviewRecord,
    DownloadRecord, LoginRecord, UserDetailResponse, DailyRegistrations,
    RegistrationStatsResponse, DailyLogins, LoginStatsResponse,
    OnlineDurationEntry, OnlineDurationResponse, ActivityOverview,
    ActivityOverviewResponse
)

logger = logging.getLogger(__name__)


# Predicates take the relation path from the queried model, e.g.
# "generations__" when counting a user's generations.
def is_preview(prefix: str = "") -> Q:
    return Q(**{f"{prefix}generation_type": GENERATION_TYPE_PREVIEW, f"{prefix}is_paid": False})


def is_download(prefix: str = "") -> Q:
    return Q(**{f"{prefix}generation_type": GENERATION_TYPE_PAID}) | Q(**{f"{prefix}is_paid": True})


def successful_login(prefix: str = "") -> Q:
    return Q(**{f"{prefix}login_success": True})


def user_search(search: str) -> Q:
    """Case-insensitive substring match on username or email."""
    return Q(username__icontains=search) | Q(email__icontains=search)


_PROFILE_FIELDS = (
    "id", "public_id", "username", "email", "last_login_at", "is_active",
    "is_admin", "is_vip", "vip_expiry", "free_previews", "balance",
)


def _activity_counts() -> dict:
    return {
        "preview_count": Count("generations", distinct=True, _filter=is_preview("generations__")),
        "download_count": Count("generations", distinct=True, _filter=is_download("generations__")),
    }


async def list_users(
    executor: QueryExecutor,
    page: int,
    limit: int,
    search: str = "",
    period: Optional[ReportPeriod] = None,
) -> UserListResponse:
    """
    Lists users, newest registrations first, with per-user activity counts.

    Args:
        executor: Query executor bound to the database connection
        page: 1-based page number
        limit: Page size
        search: Case-insensitive substring matched against username or email
        period: Optional registration date range (inclusive)

    Returns:
        UserListResponse: The page of users plus pagination totals, where
            ``pages = ceil(total / limit)``.
    """
    period = period or ReportPeriod()
    user_filter = QueryFilter()
    if search:
        user_filter.add(user_search(search))
    period.apply(user_filter, "created_at")

    rows = await (
        executor.query(User, user_filter)
        .annotate(
            **_activity_counts(),
            total_generations=Count("generations", distinct=True),
            login_count=Count("login_logs", distinct=True, _filter=successful_login("login_logs__")),
            last_login_time=Max("login_logs__login_time", _filter=successful_login("login_logs__")),
        )
        .order_by("-created_at", "-id")
        .offset((page - 1) * limit)
        .limit(limit)
        .values(
            *_PROFILE_FIELDS,
            "preview_count", "download_count", "total_generations", "login_count", "last_login_time",
            registration_time="created_at",
        )
    )
    total = await executor.query(User, user_filter).count()

    return UserListResponse(
        users=[UserSummary.model_validate(row) for row in rows],
        pagination=Pagination(
            total=total, page=page, limit=limit, pages=math.ceil(total / limit)
        ),
    )


async def get_user_detail(executor: QueryExecutor, user_id: int) -> UserDetailResponse:
    """
    Fetches one user's profile with their most recent previews, downloads
    and successful logins, newest first.

    Raises:
        HTTPException: 404 when no user has the given id.
    """
    user_row = await (
        executor.query(User, QueryFilter(Q(id=user_id)))
        .annotate(
            **_activity_counts(),
            total_logins=Count("login_logs", distinct=True, _filter=successful_login("login_logs__")),
        )
        .first()
        .values(
            *_PROFILE_FIELDS, "subscription_type",
            "preview_count", "download_count", "total_logins",
            registration_time="created_at",
        )
    )
    if user_row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    record_fields = ("id", "public_id", "created_at", "status", "processing_time", "template_id")

    preview_rows = await (
        executor.query(Generation, QueryFilter(is_preview(), Q(user_id=user_id)))
        .order_by("-created_at", "-id")
        .limit(RECENT_GENERATIONS_LIMIT)
        .values(*record_fields, template_name="template__name")
    )
    download_rows = await (
        executor.query(Generation, QueryFilter(is_download(), Q(user_id=user_id)))
        .order_by("-created_at", "-id")
        .limit(RECENT_GENERATIONS_LIMIT)
        .values(*record_fields, "payment_amount", template_name="template__name")
    )
    login_rows = await (
        executor.query(LoginLog, QueryFilter(successful_login(), Q(user_id=user_id)))
        .order_by("-login_time", "-id")
        .limit(RECENT_LOGINS_LIMIT)
        .values("login_time", "logout_time", "session_duration", "ip_address", "user_agent")
    )

    return UserDetailResponse(
        user_info=UserDetail.model_validate(user_row),
        preview_records=[PreviewRecord.model_validate(r) for r in preview_rows],
        download_records=[DownloadRecord.model_validate(r) for r in download_rows],
        login_records=[LoginRecord.model_validate(r) for r in login_rows],
    )


async def registration_stats(executor: QueryExecutor, period: ReportPeriod) -> RegistrationStatsResponse:
    """Daily registration counts, newest day first."""
    rows = await (
        executor.query(User, period.apply(QueryFilter(), "created_at"))
        .annotate(date=Date("created_at"), count=Count("id"))
        .group_by("date")
        .order_by("-date")
        .values("date", "count")
    )
    return RegistrationStatsResponse(registrations=[DailyRegistrations.model_validate(r) for r in rows])


async def login_stats(executor: QueryExecutor, period: ReportPeriod) -> LoginStatsResponse:
    """Daily successful logins: distinct users and total logins, newest day first."""
    rows = await (
        executor.query(LoginLog, period.apply(QueryFilter(successful_login()), "login_time"))
        .annotate(
            date=Date("login_time"),
            unique_users=Count("user_id", distinct=True),
            total_logins=Count("id"),
        )
        .group_by("date")
        .order_by("-date")
        .values("date", "unique_users", "total_logins")
    )
    return LoginStatsResponse(logins=[DailyLogins.model_validate(r) for r in rows])


async def online_duration_stats(
    executor: QueryExecutor,
    user_id: Optional[int],
    period: ReportPeriod,
) -> OnlineDurationResponse:
    """
    Total online seconds and session count per user and day.

    Only closed sessions (with a recorded session_duration) are counted.
    Results are ordered by day, newest first, then by total_seconds.
    """
    session_filter = QueryFilter(Q(session_duration__isnull=False))
    session_filter.add_optional(user_id, "user_id")
    period.apply(session_filter, "login_time")

    rows = await (
        executor.query(LoginLog, session_filter)
        .annotate(
            date=Date("login_time"),
            total_seconds=Sum("session_duration"),
            session_count=Count("id"),
        )
        .group_by("username", "date")
        .order_by("-date", "-total_seconds")
        .values("username", "date", "total_seconds", "session_count")
    )
    return OnlineDurationResponse(online_duration=[OnlineDurationEntry.model_validate(r) for r in rows])


async def activity_overview(executor: QueryExecutor, period: ReportPeriod) -> ActivityOverviewResponse:
    """
    One-shot overview counters for the dashboard.

    Users are filtered on registration time, generations on creation time and
    logins on login time. active_users is the number of distinct users with
    at least one successful login in the period.
    """
    total_users = await executor.query(User, period.apply(QueryFilter(), "created_at")).count()

    login_counts = await (
        executor.query(LoginLog, period.apply(QueryFilter(successful_login()), "login_time"))
        .annotate(active_users=Count("user_id", distinct=True), total_logins=Count("id"))
        .first()
        .values("active_users", "total_logins")
    ) or {}

    total_previews = await executor.query(
        Generation, period.apply(QueryFilter(is_preview()), "created_at")
    ).count()
    total_downloads = await executor.query(
        Generation, period.apply(QueryFilter(is_download()), "created_at")
    ).count()

    return ActivityOverviewResponse(
        overview=ActivityOverview(
            total_users=total_users,
            active_users=login_counts.get("active_users") or 0,
            total_previews=total_previews,
            total_downloads=total_downloads,
            total_logins=login_counts.get("total_logins") or 0,
        )
    )
