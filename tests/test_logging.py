"""Tests for logging setup and secret redaction."""

from __future__ import annotations

import logging
from pathlib import Path

from iss_poster.logging import REDACTED, SecretRedactingFilter, configure_logging


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("iss_poster.test", logging.ERROR, __file__, 1, msg, args, None)


def test_filter_masks_secret_in_formatted_arguments():
    record = _record("Graph API rejected token %s: %s", "EAAB-secret", "code 190")

    assert SecretRedactingFilter(["EAAB-secret"]).filter(record) is True
    assert record.getMessage() == f"Graph API rejected token {REDACTED}: code 190"


def test_filter_leaves_records_without_secrets_untouched():
    record = _record("Posting to %s", "Facebook")

    SecretRedactingFilter(["EAAB-secret", None, ""]).filter(record)

    assert record.msg == "Posting to %s"
    assert record.args == ("Facebook",)


def test_configure_logging_redacts_file_output(tmp_path: Path):
    log_path = tmp_path / "logs" / "iss-poster.log"
    configure_logging("DEBUG", log_path=log_path, secrets=("EAAB-secret",))
    try:
        logging.getLogger("iss_poster.test").error("publish failed for EAAB-secret")
        for handler in logging.getLogger().handlers:
            handler.flush()

        output = log_path.read_text(encoding="utf-8")
    finally:
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    assert "EAAB-secret" not in output
    assert f"publish failed for {REDACTED}" in output
    assert logging.getLogger("aiohttp.client").level == logging.WARNING
