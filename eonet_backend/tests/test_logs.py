import json
import logging

from eonet_backend.logs import OPLOG_LOGGER, LogContext


def test_write_emits_json_record(caplog):
    caplog.set_level(logging.INFO, logger=OPLOG_LOGGER)
    log = LogContext("INGEST")
    log.set_entity("table", "events")
    log.set_payload({"limit": 10})
    log.set_after({"written": 3})
    rec = log.write("OK")

    assert rec["action"] == "INGEST"
    assert rec["result"] == "OK"
    assert rec["latency_ms"] >= 0
    emitted = [r for r in caplog.records if r.name == OPLOG_LOGGER]
    assert len(emitted) == 1
    assert emitted[0].levelno == logging.INFO
    body = json.loads(emitted[0].getMessage())
    assert body["entity_id"] == "events"
    assert body["payload"] == {"limit": 10}
    assert body["after"] == {"written": 3}
    assert body["request_id"] == log.request_id


def test_error_result_logged_at_error_level(caplog):
    caplog.set_level(logging.INFO, logger=OPLOG_LOGGER)
    LogContext("QUERY_DATE").write("ERROR", "boom")
    rec = [r for r in caplog.records if r.name == OPLOG_LOGGER][-1]
    assert rec.levelno == logging.ERROR
    assert json.loads(rec.getMessage())["err_msg"] == "boom"
