import datetime

import pytest_asyncio

from user_analytics.features.auth.models import User, LoginLog
from user_analytics.features.auth.security import get_password_hash
from user_analytics.features.generations.models import Generation, Template

# bcrypt is slow; every dataset user shares one hash
PASSWORD_HASH = get_password_hash("password123")


def at(day: int, hour: int = 12) -> datetime.datetime:
    """A UTC timestamp in March 2025, far from the seeded accounts' creation time."""
    return datetime.datetime(2025, 3, day, hour, tzinfo=datetime.timezone.utc)


@pytest_asyncio.fixture
async def user_factory():
    """A factory to create users registered at a given time."""

    async def _factory(username: str, registered_at: datetime.datetime, **extra) -> User:
        return await User.create(
            username=username,
            email=f"{username}@example.com",
            hashed_password=PASSWORD_HASH,
            created_at=registered_at,
            **extra,
        )

    return _factory


@pytest_asyncio.fixture
async def portrait_template() -> Template:
    return await Template.create(name="Portrait")


@pytest_asyncio.fixture
async def analytics_dataset(user_factory, portrait_template):
    """
    Three users registered in March 2025 with generations and login history.

    alice: 2 previews, 3 downloads (one is a paid preview), 3 successful
           logins (two closed sessions on 03-01 totalling 900s, one open),
           1 failed login
    bob:   1 preview, 1 successful login with a 1200s session on 03-02
    carol: no activity
    """
    alice = await user_factory("alice", at(1, 10), is_vip=True, balance=12.5, subscription_type="monthly")
    bob = await user_factory("bob", at(2, 9))
    carol = await user_factory("carol", at(5, 12))

    await Generation.create(user=alice, template=portrait_template, generation_type="preview",
                            status="completed", processing_time=12, created_at=at(1))
    await Generation.create(user=alice, template=portrait_template, generation_type="preview",
                            status="completed", processing_time=9, created_at=at(3))
    await Generation.create(user=alice, template=portrait_template, generation_type="paid", is_paid=True,
                            status="completed", payment_amount=4.99, created_at=at(2))
    await Generation.create(user=alice, generation_type="paid", is_paid=True,
                            status="completed", payment_amount=4.99, created_at=at(2, 13))
    await Generation.create(user=alice, template=portrait_template, generation_type="preview", is_paid=True,
                            status="completed", payment_amount=2.99, created_at=at(4))
    await Generation.create(user=bob, template=portrait_template, generation_type="preview",
                            status="failed", created_at=at(2))

    await LoginLog.create(user=alice, username="alice", login_time=at(1, 11), logout_time=at(1, 11),
                          session_duration=600, ip_address="10.0.0.1", user_agent="pytest")
    await LoginLog.create(user=alice, username="alice", login_time=at(1, 15), logout_time=at(1, 15),
                          session_duration=300, ip_address="10.0.0.1", user_agent="pytest")
    await LoginLog.create(user=alice, username="alice", login_time=at(2, 8), ip_address="10.0.0.2")
    await LoginLog.create(user=alice, username="alice", login_time=at(2, 9), login_success=False,
                          failure_reason="bad_credentials")
    await LoginLog.create(user=bob, username="bob", login_time=at(2, 10), logout_time=at(2, 10),
                          session_duration=1200, ip_address="10.0.0.3")

    return {"alice": alice, "bob": bob, "carol": carol}
