"""Admin Analytics API Schemas

Pydantic models for the admin analytics endpoints:

1. User list with pagination
2. User detail with recent previews, downloads and logins
3. Daily registrations
4. Daily logins
5. Online duration per user and day
6. Activity overview

Response keys follow the dashboard's wire format, so some fields are
serialized under a camelCase alias (``userInfo``, ``onlineDuration``...)."""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
import datetime


class _AliasedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# 1. User list
class UserProfileBase(BaseModel):
    id: int
    public_id: str
    username: str
    email: str
    registration_time: datetime.datetime
    last_login_at: Optional[datetime.datetime] = None
    is_active: bool
    is_admin: bool
    is_vip: bool
    vip_expiry: Optional[datetime.datetime] = None
    free_previews: int
    balance: float
    preview_count: int = 0
    download_count: int = 0


class UserSummary(UserProfileBase):
    total_generations: int = 0
    login_count: int = 0
    last_login_time: Optional[datetime.datetime] = None


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class UserListResponse(BaseModel):
    users: List[UserSummary]
    pagination: Pagination


# 2. User detail
class UserDetail(UserProfileBase):
    subscription_type: Optional[str] = None
    total_logins: int = 0


class PreviewRecord(BaseModel):
    id: int
    public_id: str
    created_at: datetime.datetime
    status: str
    processing_time: Optional[int] = None
    template_name: Optional[str] = None
    template_id: Optional[int] = None


class DownloadRecord(PreviewRecord):
    payment_amount: Optional[float] = None


class LoginRecord(BaseModel):
    login_time: datetime.datetime
    logout_time: Optional[datetime.datetime] = None
    session_duration: Optional[int] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class UserDetailResponse(_AliasedResponse):
    user_info: UserDetail = Field(..., alias="userInfo")
    preview_records: List[PreviewRecord] = Field(default_factory=list, alias="previewRecords")
    download_records: List[DownloadRecord] = Field(default_factory=list, alias="downloadRecords")
    login_records: List[LoginRecord] = Field(default_factory=list, alias="loginRecords")


# 3. Registrations per day
class DailyRegistrations(BaseModel):
    date: datetime.date
    count: int


class RegistrationStatsResponse(BaseModel):
    registrations: List[DailyRegistrations]


# 4. Logins per day
class DailyLogins(BaseModel):
    date: datetime.date
    unique_users: int
    total_logins: int


class LoginStatsResponse(BaseModel):
    logins: List[DailyLogins]


# 5. Online duration
class OnlineDurationEntry(BaseModel):
    username: str
    date: datetime.date
    total_seconds: int
    session_count: int


class OnlineDurationResponse(_AliasedResponse):
    online_duration: List[OnlineDurationEntry] = Field(default_factory=list, alias="onlineDuration")


# 6. Overview
class ActivityOverview(BaseModel):
    total_users: int
    active_users: int
    total_previews: int
    total_downloads: int
    total_logins: int


class ActivityOverviewResponse(BaseModel):
    overview: ActivityOverview
