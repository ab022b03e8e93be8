"""
Root conftest for the pytest test suite.

This file contains the main fixtures that are used across the entire test suite.

Each test runs against a fresh, isolated in-memory SQLite database that is
initialized in the same event loop as the test, and requests are sent to the
app through httpx's ASGI transport so no server or lifespan is involved.

Key Fixtures:
- `anyio_backend`: Specifies the asyncio backend.
- `initialize_test_db`: (autouse) Creates a fresh DB schema for each test and
  seeds one admin and one regular account.
- `client`: Provides a non-authenticated httpx.AsyncClient.
- `admin_headers`: Bearer headers for the seeded admin (no login log written).
- `user_headers`: Bearer headers for the seeded regular user.
- `admin_user` / `regular_user`: The seeded User rows.
"""

from typing import Any, AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from tortoise import Tortoise

from user_analytics.core.config import MODEL_MODULES
from user_analytics.features.auth.models import User
from user_analytics.features.auth.security import create_access_token, get_password_hash

# Import the app
from user_analytics.main import app as actual_app

ADMIN_USERNAME = "adminfixture"
ADMIN_PASSWORD = "adminpassword123"
USER_USERNAME = "customerfixture"
USER_PASSWORD = "customerpassword123"


async def add_admin_user() -> User:
    return await User.create(
        username=ADMIN_USERNAME,
        email="adminfixture@example.com",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        is_admin=True,
    )


async def add_regular_user() -> User:
    return await User.create(
        username=USER_USERNAME,
        email="customerfixture@example.com",
        hashed_password=get_password_hash(USER_PASSWORD),
    )


def auth_headers(username: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': username})}"}


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """
    Specifies the asyncio backend.
    """
    return "asyncio"


@pytest_asyncio.fixture(scope="function", autouse=True)
async def initialize_test_db() -> AsyncGenerator[None, None]:
    """
    Initializes the database for each test function.

    This async, autouse fixture creates a fresh in-memory database and schema
    for each test and tears it down afterwards.
    """
    test_db_config = {
        "connections": {"default": "sqlite://:memory:"},
        "apps": {
            "models": {
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
    }
    await Tortoise.init(config=test_db_config)
    await Tortoise.generate_schemas()
    await add_admin_user()
    await add_regular_user()

    yield

    await Tortoise.close_connections()


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[httpx.AsyncClient, Any]:
    """
    Provides a non-authenticated httpx client bound to the app.
    """
    transport = httpx.ASGITransport(app=actual_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture(scope="function")
def admin_headers() -> dict[str, str]:
    """
    Bearer headers for the seeded admin, minted directly so that no
    login_logs row is written.
    """
    return auth_headers(ADMIN_USERNAME)


@pytest.fixture(scope="function")
def user_headers() -> dict[str, str]:
    """
    Bearer headers for the seeded non-admin user.
    """
    return auth_headers(USER_USERNAME)


@pytest_asyncio.fixture(scope="function")
async def admin_user() -> User:
    return await User.get(username=ADMIN_USERNAME)


@pytest_asyncio.fixture(scope="function")
async def regular_user() -> User:
    return await User.get(username=USER_USERNAME)
