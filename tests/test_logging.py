import logging

import pytest

from rentaldocs.utils.logging_config import (LOGGER_NAME, LoggerMixin, SensitiveDataFilter, get_logger,
                                             log_performance, setup_logging)
from rentaldocs.utils.validators import sanitize_log_data


def make_record(msg, *args):
    return logging.LogRecord("rentaldocs.test", logging.INFO, __file__, 1, msg, args, None)


def test_filter_masks_identity_numbers_and_emails():
    record = make_record("Licence DRIVE801015JD9AB, NI AB123456C, contact jane@example.com")

    assert SensitiveDataFilter().filter(record) is True
    assert record.msg == "Licence ***, NI ***, contact ***"


def test_filter_masks_string_arguments():
    record = make_record("Uploaded for %s (%d files)", "jane@example.com", 3)

    SensitiveDataFilter().filter(record)

    assert record.args == ("***", 3)


def test_sanitize_log_data_masks_sensitive_keys_and_inline_images():
    data_url = "data:image/png;base64," + "A" * 200

    sanitized = sanitize_log_data({
        "customer": {"email": "jane@example.com", "name": "Jane"},
        "ni_number": "",
        "signature": data_url,
        "page_count": 2,
    })

    assert sanitized["customer"] == {"email": "jan***", "name": "Jane"}
    assert sanitized["ni_number"] == "***"
    assert sanitized["signature"] == data_url[:30] + "..."
    assert sanitized["page_count"] == 2


def test_setup_logging_writes_rotating_files(test_config):
    logger = setup_logging(test_config)
    try:
        logger.info("Compliance evaluated for jane@example.com")
        for handler in logger.handlers:
            handler.flush()

        log_file = test_config.LOGS_DIR / "rentaldocs.log"
        content = log_file.read_text(encoding="utf-8")
        assert "Compliance evaluated for ***" in content
        assert "jane@example.com" not in content
        assert (test_config.LOGS_DIR / "rentaldocs_errors.log").exists()
    finally:
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)


def test_log_performance_reports_failures(caplog):
    logger = get_logger("tests")

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        with pytest.raises(ValueError):
            with log_performance("compose_agreement", logger, agreement_number="AGR-1"):
                raise ValueError("boom")

    failed = [r for r in caplog.records if r.getMessage() == "Operation failed: compose_agreement"]
    assert len(failed) == 1
    assert failed[0].error_type == "ValueError"
    assert failed[0].agreement_number == "AGR-1"


def test_logger_mixin_uses_class_name():
    class ComplianceAudit(LoggerMixin):
        pass

    assert ComplianceAudit().logger.name == f"{LOGGER_NAME}.ComplianceAudit"
