from __future__ import annotations
from typing import Any, Optional

import requests


class FeedFetchError(Exception):
    pass


class EonetProvider:
    """Thin wrapper around the EONET events listing endpoint."""

    def __init__(self, url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def fetch_events(self, limit: int) -> Any:
        try:
            resp = self.session.get(self.url, params={"limit": limit}, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FeedFetchError(f"GET {self.url} failed: {e}") from e
        try:
            return resp.json()
        except ValueError as e:
            raise FeedFetchError(f"GET {self.url} returned a non-JSON body: {e}") from e

    def close(self):
        self.session.close()

    def __enter__(self) -> "EonetProvider":
        return self

    def __exit__(self, *exc):
        self.close()
