#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EONET events service (DynamoDB + FastAPI)

Commands:
  init-table          Create the events table (with the by-date index) if absent
  ingest              Fetch the EONET feed once and write every observation as a row
  query               Print stored rows ordered by title or date
  serve               Run the HTTP API (creates the table and ingests on startup)

Notes:
- Settings come from environment variables, then config.yaml, then defaults.
- Rows are grouped under the feed title, so one query returns the whole dataset.
"""

import argparse
import json
import sys

from eonet_backend.config import get_settings
from eonet_backend.db import ORDER_BY_CHOICES, EventStore, StoreError
from eonet_backend.logs import configure_logging
from eonet_backend.providers.eonet_provider import EonetProvider
from eonet_backend.services.event_svc import list_events, render_lines
from eonet_backend.services.ingest_svc import run_ingestion


def _store(args):
    settings = get_settings(args.config)
    configure_logging(settings.log_level)
    return settings, EventStore.from_settings(settings)


def cmd_init_table(args):
    _, store = _store(args)
    created = store.ensure_table()
    print(f"Table {store.table_name} {'created' if created else 'not created (exists or unavailable)'}.")


def cmd_ingest(args):
    settings, store = _store(args)
    store.ensure_table()
    with EonetProvider(settings.feed_url, timeout=settings.feed_timeout) as provider:
        report = run_ingestion(provider, store, args.limit or settings.feed_limit)
    print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    if not report.ok:
        sys.exit(1)


def cmd_query(args):
    settings, store = _store(args)
    group_id = args.group or settings.grouping_key
    try:
        items = list_events(store, group_id, args.order_by)
    except StoreError as e:
        print(f"query failed: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Events ordered ascending by {args.order_by}")
    for line in render_lines(items):
        print(line)


def cmd_serve(args):
    import os
    import uvicorn

    if args.config:
        os.environ["EONET_CONFIG"] = args.config
    settings = get_settings(args.config)
    configure_logging(settings.log_level)
    uvicorn.run(
        "eonet_backend.api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


# ---------------- Entry ----------------

def main():
    parser = argparse.ArgumentParser(description="EONET events service (DynamoDB + FastAPI)")
    parser.add_argument("--config", default=None, help="path to config.yaml")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init-table", help="create the events table if absent")
    p_init.set_defaults(func=cmd_init_table)

    p_ing = sub.add_parser("ingest", help="fetch the feed once and store it")
    p_ing.add_argument("--limit", type=int, required=False, help="number of feed events (default from config)")
    p_ing.set_defaults(func=cmd_ingest)

    p_q = sub.add_parser("query", help="print stored rows in order")
    p_q.add_argument("--order-by", required=True, choices=list(ORDER_BY_CHOICES))
    p_q.add_argument("--group", required=False, help="grouping key (default from config)")
    p_q.set_defaults(func=cmd_query)

    p_srv = sub.add_parser("serve", help="run the HTTP API")
    p_srv.add_argument("--host", required=False)
    p_srv.add_argument("--port", type=int, required=False)
    p_srv.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
