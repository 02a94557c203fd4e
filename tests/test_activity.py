# =============================================================================
# File: tests/test_activity.py
# Purpose: Request ids, access logging and redaction.
# =============================================================================
import logging

from Security.activity_logging import ACTIVITY_LOGGER, _redact_query
from Security.headers_hardening import DEFAULT_SECURITY_HEADERS


def test_request_id_generated(dev_client):
    rv = dev_client.get("/")
    assert len(rv.headers["x-request-id"]) == 32


def test_request_id_echoed(dev_client):
    rv = dev_client.get("/", headers={"x-request-id": "abc-123"})
    assert rv.headers["x-request-id"] == "abc-123"


def test_access_log_line(dev_client, caplog):
    caplog.set_level(logging.INFO, logger=ACTIVITY_LOGGER)
    dev_client.get("/app.js?token=hunter2&page=2", headers={"x-request-id": "rid-1"})
    lines = [r.getMessage() for r in caplog.records if r.name == ACTIVITY_LOGGER]
    assert len(lines) == 1
    line = lines[0]
    assert "method=GET path=/app.js" in line
    assert "status=200" in line
    assert "request_id=rid-1" in line
    assert "token=***" in line
    assert "hunter2" not in line


def test_access_log_file(make_client, tmp_path):
    log_file = tmp_path / "logs" / "access.log"
    logger = logging.getLogger(ACTIVITY_LOGGER)
    saved_level = logger.level
    try:
        make_client(access_log_file=str(log_file)).get("/dashboard")
        for handler in logger.handlers:
            handler.flush()
        content = log_file.read_text()
        assert "path=/dashboard" in content
        assert "status=200" in content
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(saved_level)


def test_generated_request_id_matches_log_line(dev_client, caplog):
    caplog.set_level(logging.INFO, logger=ACTIVITY_LOGGER)
    rv = dev_client.get("/dashboard")
    request_id = rv.headers["x-request-id"]
    lines = [r.getMessage() for r in caplog.records if r.name == ACTIVITY_LOGGER]
    assert lines == [line for line in lines if f"request_id={request_id}" in line]
    assert len(lines) == 1


def test_logged_redirect_still_hardened(make_client, caplog):
    caplog.set_level(logging.INFO, logger=ACTIVITY_LOGGER)
    rv = make_client("production").get("/login?password=hunter2")
    assert rv.status_code == 302
    assert rv.headers["x-content-type-options"] == DEFAULT_SECURITY_HEADERS["X-Content-Type-Options"]
    line = [r.getMessage() for r in caplog.records if r.name == ACTIVITY_LOGGER][0]
    assert "status=302" in line
    assert "password=***" in line
    assert "hunter2" not in line


def test_redact_masks_known_secrets():
    assert _redact_query("password=abc&user=bob") == "password=***&user=bob"
    assert _redact_query("KEY=xyz&secret=s") == "KEY=***&secret=***"
    assert _redact_query("q=search") == "q=search"
    assert _redact_query("") == ""
