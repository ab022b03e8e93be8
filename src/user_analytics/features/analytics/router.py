"""Admin analytics API endpoints

Dashboard reports over users, generations and login logs. Every route
requires an authenticated administrator; the admin dependency runs before
any query does.

Handlers only parse parameters and delegate to service functions. Query
validation errors surface as 422, a missing user as 404, and anything else
is logged and reported as a generic 500."""
import datetime
import logging
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from typing import Annotated, Optional

from ...core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, INTERNAL_ERROR_MESSAGE
from ..auth.models import User as AuthUser
from ..auth.security import get_current_active_admin_user

from .query import QueryExecutor, ReportPeriod, get_query_executor
from .schemas import (
    UserListResponse, UserDetailResponse, RegistrationStatsResponse,
    LoginStatsResponse, OnlineDurationResponse, ActivityOverviewResponse
)
from . import service as analytics_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    # Apply admin gate to all routes in this router
    dependencies=[Depends(get_current_active_admin_user)],
    responses={404: {"description": "Not found"}},
)

Executor = Annotated[QueryExecutor, Depends(get_query_executor)]
CurrentAdmin = Annotated[AuthUser, Depends(get_current_active_admin_user)]


def report_period(
    date_from: Annotated[Optional[datetime.date], Query(alias="dateFrom", description="First day of the report period (YYYY-MM-DD)")] = None,
    date_to: Annotated[Optional[datetime.date], Query(alias="dateTo", description="Last day of the report period, inclusive (YYYY-MM-DD)")] = None,
) -> ReportPeriod:
    return ReportPeriod(date_from=date_from, date_to=date_to)


Period = Annotated[ReportPeriod, Depends(report_period)]


def _internal_error(action: str, exc: Exception) -> HTTPException:
    logger.error(f"{action} failed: {exc}", exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=INTERNAL_ERROR_MESSAGE,
    )


@router.get("/users", response_model=UserListResponse)
async def list_users(
    executor: Executor,
    period: Period,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Users per page"),
    search: str = Query("", max_length=255, description="Substring of username or email"),
):
    try:
        return await analytics_service.list_users(executor, page=page, limit=limit, search=search, period=period)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("List users", e)


@router.get("/users/{userId}", response_model=UserDetailResponse)
async def get_user_detail(
    executor: Executor,
    current_admin: CurrentAdmin,
    user_id: Annotated[int, Path(alias="userId", ge=1)],
):
    """
    One user's profile with recent previews, downloads and logins.

    The router dependency already enforces admin access; the admin is
    resolved here as well so the access log names who opened the profile.
    """
    logger.info(f"Admin {current_admin.username} opened user detail {user_id}")
    try:
        return await analytics_service.get_user_detail(executor, user_id)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error(f"User detail for {user_id}", e)


@router.get("/registrations", response_model=RegistrationStatsResponse)
async def get_registration_stats(executor: Executor, period: Period):
    try:
        return await analytics_service.registration_stats(executor, period)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Registration stats", e)


@router.get("/logins", response_model=LoginStatsResponse)
async def get_login_stats(executor: Executor, period: Period):
    try:
        return await analytics_service.login_stats(executor, period)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Login stats", e)


@router.get("/online-duration", response_model=OnlineDurationResponse)
async def get_online_duration(
    executor: Executor,
    period: Period,
    user_id: Annotated[Optional[int], Query(alias="userId", ge=1, description="Restrict to one user")] = None,
):
    try:
        return await analytics_service.online_duration_stats(executor, user_id, period)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Online duration stats", e)


@router.get("/overview", response_model=ActivityOverviewResponse)
async def get_activity_overview(executor: Executor, period: Period):
    try:
        return await analytics_service.activity_overview(executor, period)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Activity overview", e)
