"""Business logic for authentication, such as user creation and login bookkeeping."""
import datetime
from typing import Optional

from . import models


async def get_user_by_username(username: str) -> Optional[models.User]:
    """Retrieves a user by their username.

    Args:
        username: The username of the user to retrieve.

    Returns:
        The User object if found, otherwise None.
    """
    user = await models.User.get_or_none(username=username)
    return user


async def get_user_by_email(email: str) -> Optional[models.User]:
    """Retrieves a user by their email address.

    Args:
        email: The email address of the user to retrieve.

    Returns:
        The User object if found, otherwise None.
    """
    user = await models.User.get_or_none(email=email)
    return user


async def create_user(user_in: dict, hashed_password_val: str) -> models.User:
    """Creates a new user in the database.

    Args:
        user_in: A dictionary containing the user data (excluding password).
        hashed_password_val: The hashed password for the new user.

    Returns:
        The newly created User object.
    """
    new_user = await models.User.create(
        **user_in,
        hashed_password=hashed_password_val
    )
    return new_user


async def record_login(
    username: str,
    user: Optional[models.User],
    success: bool,
    ip_address: Optional[str],
    user_agent: Optional[str],
    failure_reason: Optional[str] = None,
) -> models.LoginLog:
    """Writes one login_logs row for a login attempt.

    A successful attempt also stamps the user's last_login_at.
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    log = await models.LoginLog.create(
        user=user,
        username=username,
        login_time=now,
        ip_address=ip_address,
        user_agent=user_agent,
        login_success=success,
        failure_reason=failure_reason,
    )
    if success and user is not None:
        user.last_login_at = now
        await user.save(update_fields=["last_login_at"])
    return log


async def close_session(user: models.User, session_id: int) -> Optional[models.LoginLog]:
    """Marks a login session as logged out and stores its duration in seconds.

    Returns None when the session does not belong to the user or does not exist.
    Closing an already closed session returns it unchanged.
    """
    log = await models.LoginLog.get_or_none(id=session_id, user_id=user.id, login_success=True)
    if log is None or log.logout_time is not None:
        return log

    logout_time = datetime.datetime.now(datetime.timezone.utc)
    login_time = log.login_time
    if login_time.tzinfo is None:
        login_time = login_time.replace(tzinfo=datetime.timezone.utc)
    log.logout_time = logout_time
    log.session_duration = max(0, int((logout_time - login_time).total_seconds()))
    await log.save(update_fields=["logout_time", "session_duration"])
    return log
