"""Data models for accounts and login history."""

from tortoise import fields, models
from ...common.models import TrackedModel


class User(TrackedModel):
    username = fields.CharField(max_length=100, unique=True, db_index=True)
    email = fields.CharField(max_length=255, unique=True, db_index=True)
    hashed_password = fields.CharField(max_length=255)
    is_active = fields.BooleanField(default=True)
    is_admin = fields.BooleanField(default=False)
    is_vip = fields.BooleanField(default=False)
    vip_expiry = fields.DatetimeField(null=True)
    free_previews = fields.IntField(default=3)
    balance = fields.FloatField(default=0.0)
    subscription_type = fields.CharField(max_length=50, null=True)
    last_login_at = fields.DatetimeField(null=True)

    generations: fields.ReverseRelation["Generation"]
    login_logs: fields.ReverseRelation["LoginLog"]

    def __str__(self):
        return f"{self.username} ({'admin' if self.is_admin else 'user'})"

    class Meta:
        table = "users"


class LoginLog(models.Model):  # login_time is the event time
    id = fields.IntField(primary_key=True)
    user: fields.ForeignKeyNullableRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="login_logs", on_delete=fields.SET_NULL, null=True
    )
    # Kept even when the attempt matched no account
    username = fields.CharField(max_length=100, db_index=True)
    login_time = fields.DatetimeField(auto_now_add=True)
    logout_time = fields.DatetimeField(null=True)
    session_duration = fields.IntField(null=True, description="Seconds between login and logout")
    ip_address = fields.CharField(max_length=45, null=True)
    user_agent = fields.TextField(null=True)
    login_success = fields.BooleanField(default=True)
    failure_reason = fields.CharField(max_length=100, null=True)

    def __str__(self):
        outcome = "ok" if self.login_success else "failed"
        return f"Login {outcome} for {self.username} at {self.login_time}"

    class Meta:
        table = "login_logs"
        ordering = ["-login_time"]
