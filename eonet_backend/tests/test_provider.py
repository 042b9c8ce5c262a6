from unittest.mock import MagicMock

import pytest
import requests

from eonet_backend.providers.eonet_provider import EonetProvider, FeedFetchError

URL = "https://eonet.gsfc.nasa.gov/api/v3/events"


def _provider(resp=None, error=None):
    session = MagicMock()
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = resp
    return EonetProvider(URL, timeout=5, session=session), session


def test_fetch_sends_limit_and_returns_json():
    resp = MagicMock()
    resp.json.return_value = {"title": "EONET Events", "events": []}
    prov, session = _provider(resp)

    assert prov.fetch_events(10) == {"title": "EONET Events", "events": []}
    session.get.assert_called_once_with(URL, params={"limit": 10}, timeout=5)
    assert session.headers["Accept"] == "application/json"


def test_transport_error_becomes_fetch_error():
    prov, _ = _provider(error=requests.ConnectionError("unreachable"))
    with pytest.raises(FeedFetchError, match="unreachable"):
        prov.fetch_events(10)


def test_http_error_becomes_fetch_error():
    resp = MagicMock()
    resp.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
    prov, _ = _provider(resp)
    with pytest.raises(FeedFetchError, match="503"):
        prov.fetch_events(10)


def test_non_json_body_becomes_fetch_error():
    resp = MagicMock()
    resp.json.side_effect = ValueError("Expecting value")
    prov, _ = _provider(resp)
    with pytest.raises(FeedFetchError, match="non-JSON"):
        prov.fetch_events(10)


def test_context_manager_closes_session():
    resp = MagicMock()
    resp.json.return_value = {"title": "EONET Events", "events": []}
    prov, session = _provider(resp)
    with prov as p:
        p.fetch_events(10)
    session.close.assert_called_once()
