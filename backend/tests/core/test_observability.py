"""Structured Logging — JSON formatter output and handler idempotence."""

import json
import logging

from app.infrastructure.observability import JSONFormatter, _CatalogHandler, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "app.services.referential_guard", logging.INFO, __file__, 1,
        "Refused delete of Category web", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_line_carries_catalog_fields():
    line = JSONFormatter(service="portfolio-cms-api").format(
        _record(entity_kind="Category", natural_key="web", dependent_count=3),
    )
    payload = json.loads(line)

    assert payload["service"] == "portfolio-cms-api"
    assert payload["level"] == "INFO"
    assert payload["entity_kind"] == "Category"
    assert payload["dependent_count"] == 3


def test_absent_fields_are_omitted():
    payload = json.loads(JSONFormatter().format(_record()))
    assert "natural_key" not in payload
    assert "service" not in payload


def test_non_json_values_are_stringified():
    payload = json.loads(JSONFormatter().format(_record(skipped={"Cobol"})))
    assert payload["skipped"] == "{'Cobol'}"


def test_setup_logging_does_not_stack_handlers():
    previous_level = logging.root.level
    setup_logging("INFO", "text")
    setup_logging("DEBUG", "json")
    try:
        installed = [h for h in logging.root.handlers if isinstance(h, _CatalogHandler)]
        assert len(installed) == 1
        assert isinstance(installed[0].formatter, JSONFormatter)
        assert logging.root.level == logging.DEBUG
    finally:
        for handler in installed:
            logging.root.removeHandler(handler)
        logging.root.setLevel(previous_level)
