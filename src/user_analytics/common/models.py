"""Shared model base for the tables the reports read.

Rows get an integer primary key for joins and a KSUID ``public_id`` that can
be shown outside the service. ``created_at`` is the registration time for
users and the event time for generations; reports filter and bucket on it,
so it is indexed."""

from tortoise import fields, models
from ksuid import ksuid

KSUID_LENGTH = 27


def generate_ksuid() -> str:
    """Returns a new K-Sortable Unique IDentifier for ``public_id`` columns."""
    return str(ksuid.Ksuid())


class TrackedModel(models.Model):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=KSUID_LENGTH, unique=True, default=generate_ksuid, db_index=True
    )
    created_at = fields.DatetimeField(auto_now_add=True, db_index=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True
