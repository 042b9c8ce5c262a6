from __future__ import annotations

# eonet_backend/db.py
import logging
from dataclasses import dataclass, field
from typing import Iterable, Literal

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import Settings
from .domain.feed import EventRow
from .repository import event_repo

logger = logging.getLogger(__name__)

OrderBy = Literal["title", "date"]
ORDER_BY_CHOICES = ("title", "date")


class StoreError(Exception):
    """Raised when the events table cannot be read."""


@dataclass
class WriteReport:
    written: int = 0
    failures: list[tuple[EventRow, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def connect(settings: Settings):
    """
    获取 DynamoDB resource。endpoint 为空时走 AWS 默认地址；
    凭证未配置时交给 boto3 默认链解析。
    """
    kwargs = {"region_name": settings.region}
    if settings.dynamodb_endpoint:
        kwargs["endpoint_url"] = settings.dynamodb_endpoint
    if settings.aws_access_key_id and settings.aws_secret_access_key:
        kwargs["aws_access_key_id"] = settings.aws_access_key_id
        kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    return boto3.resource("dynamodb", **kwargs)


class EventStore:
    """Owns the DynamoDB connection and the events table operations."""

    def __init__(self, ddb, table_name: str, read_capacity: int = 5, write_capacity: int = 5):
        self.ddb = ddb
        self.table_name = table_name
        self.read_capacity = read_capacity
        self.write_capacity = write_capacity
        self.table = ddb.Table(table_name)

    @classmethod
    def from_settings(cls, settings: Settings) -> "EventStore":
        return cls(
            connect(settings),
            settings.table_name,
            read_capacity=settings.read_capacity,
            write_capacity=settings.write_capacity,
        )

    def ensure_table(self) -> bool:
        try:
            created = event_repo.ensure_schema(
                self.ddb, self.table_name, self.read_capacity, self.write_capacity
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("ensure_table %s failed: %s", self.table_name, e)
            return False
        if created:
            logger.info("created table %s", self.table_name)
        else:
            logger.info("table %s already exists", self.table_name)
        return created

    def _put(self, row: EventRow) -> str | None:
        try:
            event_repo.put(self.table, row.id, row.title, row.date)
            return None
        except (ClientError, BotoCoreError) as e:
            logger.error("put_row failed for %s/%s: %s", row.title, row.date, e)
            return str(e)

    def put_row(self, row: EventRow) -> bool:
        return self._put(row) is None

    def put_rows(self, rows: Iterable[EventRow]) -> WriteReport:
        report = WriteReport()
        for row in rows:
            err = self._put(row)
            if err is None:
                report.written += 1
            else:
                report.failures.append((row, err))
        return report

    def query_ordered(self, group_id: str, order_by: OrderBy) -> list[dict[str, str]]:
        if order_by not in ORDER_BY_CHOICES:
            raise ValueError(f"order_by must be one of {ORDER_BY_CHOICES}, got {order_by!r}")
        index_name = event_repo.DATE_INDEX if order_by == "date" else None
        try:
            items = event_repo.query_by_group(self.table, group_id, index_name)
        except (ClientError, BotoCoreError) as e:
            logger.error("query_ordered(%s) on %s failed: %s", order_by, self.table_name, e)
            raise StoreError(f"query by {order_by} failed: {e}") from e
        return [
            {"id": str(it.get("id", "")), "title": str(it.get("title", "")), "date": str(it.get("date", ""))}
            for it in items
        ]
