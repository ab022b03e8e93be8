import asyncio
import datetime
import logging
from typing import Optional

import typer
from tortoise import Tortoise, connections
from tortoise.exceptions import IntegrityError

from ..core.config import TORTOISE_ORM_CONFIG
from ..features.auth.security import get_password_hash
from ..features.auth.models import User as AuthUser
from ..features.analytics.query import QueryExecutor, ReportPeriod
from ..features.analytics import service as analytics_service

logger = logging.getLogger(__name__)


app = typer.Typer(name="user-analytics-cli", help="CLI for administering User Analytics accounts and reports.")

# Shared async context manager for database connection
class DBConnection:
    def __init__(self, config: Optional[dict] = None):
        self.config = config or TORTOISE_ORM_CONFIG

    async def __aenter__(self):
        await Tortoise.init(config=self.config)
        await Tortoise.generate_schemas(safe=True) # Generate schema if it doesn't exist
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()

# User management commands
user_app = typer.Typer(name="users", help="Manage user accounts.")
app.add_typer(user_app)

# Report commands
report_app = typer.Typer(name="reports", help="Print analytics reports.")
app.add_typer(report_app)

@user_app.command("create-admin")
def create_admin_user_command(
    username: str = typer.Option(..., prompt=True, help="Username for the new admin."),
    email: str = typer.Option(..., prompt=True, help="Email for the new admin."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password for the new admin.")
):
    """Creates a new admin user."""
    asyncio.run(_create_admin_user(username, email, password))

async def _create_admin_user(username: str, email: str, password: str):
    """Async implementation for creating an admin user."""
    async with DBConnection():
        typer.echo(f"Attempting to create admin user: {username} ({email})...")
        if await AuthUser.filter(username=username).exists():
            typer.secho(f"Error: User with username '{username}' already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        if await AuthUser.filter(email=email).exists():
            typer.secho(f"Error: User with email '{email}' already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        try:
            admin_user = await AuthUser.create(
                username=username,
                email=email,
                hashed_password=get_password_hash(password),
                is_admin=True,
                is_active=True
            )
        except IntegrityError as e:
            typer.secho(f"Error creating admin user: an integrity error occurred. Details: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        typer.secho(f"Admin user '{admin_user.username}' created successfully with ID: {admin_user.public_id}", fg=typer.colors.GREEN)

async def _load_user(username: str) -> AuthUser:
    user = await AuthUser.get_or_none(username=username)
    if not user:
        typer.secho(f"Error: User with username '{username}' not found.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return user

@user_app.command("promote-to-admin")
def promote_user_to_admin_command(
    username: str = typer.Argument(..., help="The username of the user to promote to admin.")
):
    """Grants an existing user access to the analytics reports."""
    asyncio.run(_promote_user_to_admin(username))

async def _promote_user_to_admin(username: str):
    async with DBConnection():
        typer.echo(f"Attempting to promote user '{username}' to admin...")
        user = await _load_user(username)

        if user.is_admin:
            typer.secho(f"User '{username}' is already an admin.", fg=typer.colors.YELLOW)
            raise typer.Exit(code=0)

        if not user.is_active:
            typer.secho(f"Error: User '{username}' is currently inactive. Activate the user before promoting to admin.", fg=typer.colors.RED)
            raise typer.Exit(code=1)

        user.is_admin = True
        await user.save(update_fields=["is_admin"])
        typer.secho(f"User '{username}' has been successfully promoted to admin.", fg=typer.colors.GREEN)

@user_app.command("disable-user")
def disable_user_account_command(
    username: str = typer.Argument(..., help="The username of the user to disable.")
):
    """Disables an existing user's account."""
    asyncio.run(_set_user_active(username, False))

@user_app.command("enable-user")
def enable_user_account_command(
    username: str = typer.Argument(..., help="The username of the user to enable.")
):
    """Enables an existing user's account."""
    asyncio.run(_set_user_active(username, True))

async def _set_user_active(username: str, active: bool):
    state = "active" if active else "inactive"
    async with DBConnection():
        user = await _load_user(username)
        if user.is_active == active:
            typer.secho(f"User '{username}' is already {state}.", fg=typer.colors.YELLOW)
            raise typer.Exit(code=0)

        user.is_active = active
        await user.save(update_fields=["is_active"])
        typer.secho(f"User account '{username}' is now {state}.", fg=typer.colors.GREEN)

@report_app.command("overview")
def overview_report_command(
    date_from: Optional[datetime.datetime] = typer.Option(None, "--date-from", formats=["%Y-%m-%d"], help="First day (YYYY-MM-DD)."),
    date_to: Optional[datetime.datetime] = typer.Option(None, "--date-to", formats=["%Y-%m-%d"], help="Last day, inclusive (YYYY-MM-DD).")
):
    """Prints the activity overview as JSON."""
    period = ReportPeriod(
        date_from=date_from.date() if date_from else None,
        date_to=date_to.date() if date_to else None,
    )
    asyncio.run(_print_overview(period))

async def _print_overview(period: ReportPeriod):
    async with DBConnection():
        executor = QueryExecutor(connections.get("default"))
        report = await analytics_service.activity_overview(executor, period)
        typer.echo(report.model_dump_json(indent=2))

@app.command("test-db-connection")
def test_db_connection_command_sync():
    """Tests the database connection and counts user accounts."""
    asyncio.run(_check_db_connection())

async def _check_db_connection():
    async with DBConnection():
        typer.echo("Successfully connected to the database.")
        user_count = await AuthUser.all().count()
        admin_count = await AuthUser.filter(is_admin=True).count()
        typer.echo(f"Found {user_count} user(s) in the database, {admin_count} admin(s).")

if __name__ == "__main__":
    app()
