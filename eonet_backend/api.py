"""
FastAPI app entry point. Keep as `uvicorn eonet_backend.api:app`.

Startup creates the events table if absent and runs one ingestion pass
before the app starts serving /title and /date.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI

from .api_meta import APP_NAME, APP_VERSION
from .config import DEFAULTS, Settings, get_settings
from .db import EventStore
from .logs import LogContext, configure_logging
from .providers.eonet_provider import EonetProvider
from .services.ingest_svc import IngestReport, run_ingestion

logger = logging.getLogger(__name__)

app = FastAPI(title=APP_NAME, version=APP_VERSION)
app.state.store = None
app.state.group_id = DEFAULTS["grouping_key"]
app.state.ingest_report = None


def bootstrap(
    target: FastAPI,
    settings: Settings,
    store: EventStore | None = None,
    provider: EonetProvider | None = None,
) -> IngestReport:
    store = store or EventStore.from_settings(settings)
    owns_provider = provider is None
    provider = provider or EonetProvider(settings.feed_url, timeout=settings.feed_timeout)

    log = LogContext("ENSURE_TABLE")
    log.set_entity("table", store.table_name)
    created = store.ensure_table()
    log.set_after({"created": created})
    log.write("OK")

    try:
        report = run_ingestion(provider, store, settings.feed_limit)
    finally:
        if owns_provider:
            provider.close()
    logger.info(
        "ingested %d/%d rows from %d events (skipped=%d, failed=%d)",
        report.written, report.rows, report.events, len(report.skipped), len(report.failures),
    )

    target.state.store = store
    target.state.group_id = report.group_id or settings.grouping_key
    target.state.ingest_report = report
    return report


@app.on_event("startup")
def on_startup():
    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        bootstrap(app, settings)
    except Exception as e:
        LogContext("STARTUP").write("ERROR", f"bootstrap_failed: {e}")
        raise


from .routes import base as base_routes
from .routes import events as events_routes

app.include_router(base_routes.router)
app.include_router(events_routes.router)
