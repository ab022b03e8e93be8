"""
Report Query Building Blocks

Optional report filters are collected as ``Q`` predicates in a ``QueryFilter``
instead of being glued onto a statement, and every report queryset is handed
out by a ``QueryExecutor`` bound to one injected Tortoise connection. Tortoise
does the parameter binding and the per-dialect SQL.
"""

import datetime
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Type

from pypika_tortoise import functions
from tortoise import connections
from tortoise.backends.base.client import BaseDBAsyncClient
from tortoise.expressions import Function, Q
from tortoise.models import Model
from tortoise.queryset import QuerySet


class Date(Function):
    """
    Calendar day of a datetime column.

    :samp:`Date("{FIELD_NAME}")`
    """

    database_func = functions.Date


class QueryFilter:
    """An explicit list of active predicates, combined with AND."""

    def __init__(self, *predicates: Q):
        self._predicates: List[Q] = list(predicates)

    def add(self, predicate: Q) -> "QueryFilter":
        self._predicates.append(predicate)
        return self

    def add_optional(self, value: Any, lookup: str) -> "QueryFilter":
        """Adds ``Q(lookup=value)``, unless value is None."""
        if value is not None:
            self.add(Q(**{lookup: value}))
        return self

    @property
    def predicates(self) -> Tuple[Q, ...]:
        return tuple(self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    def build(self) -> Q:
        return Q(*self._predicates)

    def apply(self, queryset: QuerySet) -> QuerySet:
        if not self._predicates:
            return queryset
        return queryset.filter(*self._predicates)


def _start_of_day(day: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time.min, tzinfo=datetime.timezone.utc)


@dataclass(frozen=True)
class ReportPeriod:
    """An optional date range, inclusive of both days."""
    date_from: Optional[datetime.date] = None
    date_to: Optional[datetime.date] = None

    @property
    def start(self) -> Optional[datetime.datetime]:
        return _start_of_day(self.date_from) if self.date_from else None

    @property
    def end(self) -> Optional[datetime.datetime]:
        # Exclusive bound: midnight after date_to
        if self.date_to is None:
            return None
        return _start_of_day(self.date_to + datetime.timedelta(days=1))

    def apply(self, query_filter: QueryFilter, field: str) -> QueryFilter:
        query_filter.add_optional(self.start, f"{field}__gte")
        query_filter.add_optional(self.end, f"{field}__lt")
        return query_filter


class QueryExecutor:
    """Hands out read-only report querysets bound to one Tortoise connection."""

    def __init__(self, client: BaseDBAsyncClient):
        self.client = client

    def query(self, model: Type[Model], query_filter: Optional[QueryFilter] = None) -> QuerySet:
        queryset = model.all().using_db(self.client)
        if query_filter is not None:
            queryset = query_filter.apply(queryset)
        return queryset


async def get_query_executor() -> QueryExecutor:
    """FastAPI dependency: an executor over the default Tortoise connection."""
    return QueryExecutor(connections.get("default"))
