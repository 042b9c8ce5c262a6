from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Optional

from ..db import EventStore
from ..domain.feed import FeedDecodeError, decode_feed, flatten, find_duplicates
from ..logs import LogContext
from ..providers.eonet_provider import EonetProvider, FeedFetchError

logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    group_id: Optional[str] = None
    events: int = 0
    rows: int = 0
    written: int = 0
    failures: list[dict[str, Any]] = field(default_factory=list)
    skipped: list[dict[str, Any]] = field(default_factory=list)
    duplicates: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["ok"] = self.ok
        return d


def run_ingestion(provider: EonetProvider, store: EventStore, limit: int, log: LogContext | None = None) -> IngestReport:
    """
    单次导入：拉取 feed -> 解码 -> 展平 -> 逐行写入。
    feed/存储错误不抛出，全部记入报告，由调用方决定部分导入是否可接受。
    """
    log = log or LogContext("INGEST")
    log.set_payload({"url": provider.url, "limit": limit})
    report = IngestReport()

    try:
        raw = provider.fetch_events(limit)
        feed = decode_feed(raw)
    except (FeedFetchError, FeedDecodeError) as e:
        report.error = str(e)
        logger.error("ingestion aborted, no rows written: %s", e)
        log.set_after(report.to_dict())
        log.write("ERROR", report.error)
        return report

    report.group_id = feed.title
    report.events = len(feed.events)
    for idx, reason in feed.skipped:
        logger.warning("skipping event #%d: %s", idx, reason)
        report.skipped.append({"index": idx, "reason": reason})

    rows = flatten(feed)
    report.rows = len(rows)
    dups = find_duplicates(rows)
    report.duplicates = len(dups)
    for r in dups:
        logger.warning("duplicate row %r on %s overwrites an earlier observation", r.title, r.date)

    written = store.put_rows(rows)
    report.written = written.written
    report.failures = [{**row.model_dump(), "error": err} for row, err in written.failures]

    log.set_entity("table", store.table_name)
    log.set_after(report.to_dict())
    if report.failures:
        log.write("ERROR", f"{len(report.failures)} of {report.rows} rows failed to write")
    else:
        log.write("OK")
    return report
