from __future__ import annotations

from ..db import EventStore, OrderBy, StoreError
from ..logs import LogContext


def list_events(store: EventStore, group_id: str, order_by: OrderBy) -> list[dict[str, str]]:
    log = LogContext(f"QUERY_{order_by.upper()}")
    log.set_entity("group", group_id)
    try:
        items = store.query_ordered(group_id, order_by)
    except StoreError as e:
        log.write("ERROR", str(e))
        raise
    log.set_after({"count": len(items)})
    log.write("OK")
    return items


def render_lines(items: list[dict[str, str]]) -> list[str]:
    return [f"title: {it['title']}\tdate: {it['date']}" for it in items]
