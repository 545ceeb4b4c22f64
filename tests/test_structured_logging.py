"""Structured JSON logging."""

import json
import logging

from relay_io.logging import JSONFormatter, LogEvent, StructuredLogger, create_logger
from relay_io.logging.events import ERROR_EVENTS, FIT_EVENTS


def entries(caplog, logger_name):
    return [r.structured for r in caplog.records if r.name == logger_name]


class TestStructuredLogger:

    def test_info_entry(self, caplog):
        logger = StructuredLogger(component="unit_info")
        logger.info(LogEvent.FIT_STARTED, "Fitting", metadata={"points": 3})

        (entry,) = entries(caplog, "relay_io.unit_info")
        assert entry["level"] == "INFO"
        assert entry["component"] == "unit_info"
        assert entry["event"] == "fit.started"
        assert entry["message"] == "Fitting"
        assert entry["metadata"] == {"points": 3}
        assert "timestamp" in entry

    def test_readable_message_for_plain_handlers(self, caplog):
        StructuredLogger(component="unit_text").info(LogEvent.CONFIG_LOADED, "Loaded")
        (record,) = [r for r in caplog.records if r.name == "relay_io.unit_text"]
        assert record.getMessage() == "[config.loaded] Loaded"

    def test_metadata_omitted_when_empty(self, caplog):
        StructuredLogger(component="unit_plain").warning(LogEvent.CONFIG_LOADED, "Loaded")
        (entry,) = entries(caplog, "relay_io.unit_plain")
        assert entry["level"] == "WARNING"
        assert "metadata" not in entry

    def test_bound_context_merged(self, caplog):
        logger = StructuredLogger(component="unit_bind").bind(job_id="j1")
        logger.info(LogEvent.ZONE_FIT_STARTED, "Zone 1", metadata={"zone": 1})
        logger.bind(zone=2).info(LogEvent.ZONE_FIT_STARTED, "Zone 2")

        first, second = entries(caplog, "relay_io.unit_bind")
        assert first["metadata"] == {"job_id": "j1", "zone": 1}
        assert second["metadata"] == {"job_id": "j1", "zone": 2}

    def test_debug_filtered_at_info(self, caplog):
        logger = StructuredLogger(component="unit_debug")
        logger.debug(LogEvent.GENERATION_COMPLETED, "Generation 1")
        assert entries(caplog, "relay_io.unit_debug") == []

        logger.set_level(logging.DEBUG)
        logger.debug(LogEvent.GENERATION_COMPLETED, "Generation 2")
        (entry,) = entries(caplog, "relay_io.unit_debug")
        assert entry["level"] == "DEBUG"

    def test_error_carries_exception(self, caplog):
        logger = create_logger("unit_error")
        logger.error(LogEvent.DOMAIN_ERROR, "Bad angle", exc_info=ValueError("tan(90)"))

        (entry,) = entries(caplog, "relay_io.unit_error")
        assert entry["exception"] == {"type": "ValueError", "message": "tan(90)"}

    def test_custom_logger_name(self):
        logger = StructuredLogger(component="x", logger_name="custom.fit")
        assert logger.logger.name == "custom.fit"


class TestJSONFormatter:

    def test_formats_structured_entry(self, caplog):
        logger = StructuredLogger(component="unit_fmt")
        logger.info(LogEvent.FIT_COMPLETED, "Done", metadata={"path": object})
        (record,) = [r for r in caplog.records if r.name == "relay_io.unit_fmt"]

        document = json.loads(JSONFormatter().format(record))
        assert document["event"] == "fit.completed"
        assert isinstance(document["metadata"]["path"], str)

    def test_formats_plain_record(self):
        record = logging.LogRecord("relay_cli", logging.WARNING, __file__, 1, "plain %s", ("text",), None)
        document = json.loads(JSONFormatter().format(record))
        assert document["message"] == "plain text"
        assert document["level"] == "WARNING"
        assert "event" not in document


def test_event_names_follow_convention():
    for event in LogEvent:
        assert event.value == event.value.lower()
        assert "." in event.value
    assert all(e.value.startswith("fit.") for e in FIT_EVENTS)
    assert all(e.value.startswith("error.") for e in ERROR_EVENTS)
