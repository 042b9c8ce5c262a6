import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from eonet_backend.db import ORDER_BY_CHOICES, StoreError, WriteReport
from eonet_backend.repository.event_repo import title_date_key


SCENARIO_FEED = {
    "title": "EONET Events",
    "events": [
        {"title": "Wildfire A", "geometry": [{"date": "2020-01-02"}]},
        {"title": "Storm B", "geometry": [{"date": "2020-01-01"}, {"date": "2020-01-03"}]},
    ],
}


class DummyProvider:
    url = "https://eonet.test/api/v3/events"

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def fetch_events(self, limit: int):
        self.calls.append(limit)
        if self.error is not None:
            raise self.error
        return self.payload


class FakeStore:
    """In-memory stand-in for EventStore keyed the same way as the DynamoDB table."""

    def __init__(self, table_name: str = "events"):
        self.table_name = table_name
        self.items = {}
        self.ensure_calls = 0
        self.fail_queries = False
        self.fail_titles = set()

    def ensure_table(self) -> bool:
        self.ensure_calls += 1
        return self.ensure_calls == 1

    def put_rows(self, rows) -> WriteReport:
        report = WriteReport()
        for row in rows:
            if row.title in self.fail_titles:
                report.failures.append((row, "ProvisionedThroughputExceededException"))
                continue
            self.items[(row.id, title_date_key(row.title, row.date))] = row.model_dump()
            report.written += 1
        return report

    def query_ordered(self, group_id: str, order_by: str):
        if order_by not in ORDER_BY_CHOICES:
            raise ValueError(order_by)
        if self.fail_queries:
            raise StoreError("Could not connect to the endpoint URL")
        rows = [dict(v) for (gid, _), v in self.items.items() if gid == group_id]
        if order_by == "title":
            rows.sort(key=lambda r: title_date_key(r["title"], r["date"]))
        else:
            rows.sort(key=lambda r: r["date"])
        return rows


@pytest.fixture()
def scenario_feed():
    return {
        "title": SCENARIO_FEED["title"],
        "events": [dict(ev, geometry=list(ev["geometry"])) for ev in SCENARIO_FEED["events"]],
    }


@pytest.fixture()
def fake_store():
    return FakeStore()


@pytest.fixture()
def client(fake_store):
    from eonet_backend.api import app
    from fastapi.testclient import TestClient

    prev = (app.state.store, app.state.group_id, app.state.ingest_report)
    app.state.store = fake_store
    app.state.group_id = "EONET Events"
    app.state.ingest_report = None
    try:
        yield TestClient(app)
    finally:
        app.state.store, app.state.group_id, app.state.ingest_report = prev
