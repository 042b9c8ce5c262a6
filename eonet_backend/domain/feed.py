"""
EONET feed decoding and flattening.

The feed envelope looks like::

    {"title": "EONET Events", "events": [
        {"title": "Wildfire A", "geometry": [{"date": "2020-01-02T00:00:00Z", ...}]},
        ...
    ]}

Each geometry entry of an event becomes one row sharing the envelope title
(grouping key) and the event title.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Tuple

from pydantic import BaseModel, ValidationError, field_validator

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]+")


class FeedDecodeError(ValueError):
    """The feed envelope is not shaped like an EONET events listing."""


class GeoObservation(BaseModel):
    date: str


class FeedEvent(BaseModel):
    title: str
    geometry: List[GeoObservation]

    @field_validator("title")
    @classmethod
    def _clean_title(cls, v: str) -> str:
        # control characters would sort below the title_date separator
        return _CONTROL_CHARS.sub(" ", v).strip()


class FeedEnvelope(BaseModel):
    title: str
    events: List[Any]


class EventRow(BaseModel):
    id: str
    title: str
    date: str


@dataclass
class DecodedFeed:
    title: str
    events: List[FeedEvent] = field(default_factory=list)
    skipped: List[Tuple[int, str]] = field(default_factory=list)


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {e.get('msg')}")
    return "; ".join(parts)


def decode_feed(raw: Any) -> DecodedFeed:
    try:
        envelope = FeedEnvelope.model_validate(raw)
    except ValidationError as e:
        raise FeedDecodeError(f"malformed feed envelope: {_describe(e)}") from e

    out = DecodedFeed(title=envelope.title)
    for idx, item in enumerate(envelope.events):
        try:
            out.events.append(FeedEvent.model_validate(item))
        except ValidationError as e:
            out.skipped.append((idx, _describe(e)))
    return out


def flatten(feed: DecodedFeed) -> list[EventRow]:
    return [
        EventRow(id=feed.title, title=ev.title, date=geo.date)
        for ev in feed.events
        for geo in ev.geometry
    ]


def find_duplicates(rows: list[EventRow]) -> list[EventRow]:
    """Rows whose (id, title, date) repeats an earlier row; the store keeps the last one."""
    seen = set()
    dups = []
    for r in rows:
        k = (r.id, r.title, r.date)
        if k in seen:
            dups.append(r)
        seen.add(k)
    return dups
