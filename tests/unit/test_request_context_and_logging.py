"""Request ID sanitizing, request context and the logging filter."""

import logging

from app.core.config import Settings
from app.core.request_context import get_request_id, set_request_id
from app.middleware.request_id import REQUEST_ID_MAX_LENGTH, sanitize_request_id
from app.shared.logging import RequestIdLogFilter


def test_sanitize_request_id_keeps_safe_values() -> None:
    assert sanitize_request_id("  req_123-abc ") == "req_123-abc"


def test_sanitize_request_id_replaces_unsafe_values() -> None:
    for raw in (None, "", "has space", "line\nbreak", "x" * (REQUEST_ID_MAX_LENGTH + 1)):
        replaced = sanitize_request_id(raw)
        assert replaced != raw
        assert len(replaced) == 36


def test_log_filter_adds_request_id() -> None:
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    set_request_id("req-1")
    try:
        assert RequestIdLogFilter().filter(record) is True
        assert record.request_id == "req-1"
    finally:
        set_request_id(None)
    assert get_request_id() is None
    RequestIdLogFilter().filter(record)
    assert record.request_id == "-"


def test_lenient_checksum_countries_parsing() -> None:
    settings = Settings(secret_key="s", iban_lenient_checksum_countries=" ch, li ,,")
    assert settings.lenient_checksum_countries == frozenset({"CH", "LI"})
    strict = Settings(secret_key="s", iban_lenient_checksum_countries="")
    assert strict.lenient_checksum_countries == frozenset()
