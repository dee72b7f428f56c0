"""Unit tests for structured logging helpers."""

import pytest
import structlog

from classschema.core.logging import (
    SchemaOperationLogger,
    add_app_context,
    bind_context,
    clear_context,
)


class RecordingLogger:
    """Collects log calls as (level, event, fields)."""

    def __init__(self):
        self.calls = []

    def debug(self, event, **kwargs):
        self.calls.append(("debug", event, kwargs))

    def info(self, event, **kwargs):
        self.calls.append(("info", event, kwargs))

    def error(self, event, **kwargs):
        self.calls.append(("error", event, kwargs))


class TestAppContext:
    """Test the application context processor."""

    def test_adds_service_and_component(self):
        """Test service and component fields are added."""
        event = add_app_context(None, "info", {"logger": "classschema.core.schema"})

        assert event["service"] == "classschema"
        assert event["component"] == "classschema.core.schema"

    def test_context_binding(self):
        """Test bound context variables are merged and cleared."""
        bind_context(class_name="blog.domain.model.Post")
        assert structlog.contextvars.get_contextvars() == {
            "class_name": "blog.domain.model.Post"
        }

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestSchemaOperationLogger:
    """Test operation timing and outcome logging."""

    def test_success(self):
        """Test start and completion events with the recorded summary."""
        logger = RecordingLogger()

        with SchemaOperationLogger(logger, "build_schema", "blog.Post") as op_logger:
            op_logger.log_progress("Class classified", flags="ENTITY")
            op_logger.record(properties=3)

        levels = [level for level, _, _ in logger.calls]
        assert levels == ["debug", "debug", "info"]

        _, event, fields = logger.calls[-1]
        assert event == "Schema operation completed"
        assert fields["properties"] == 3
        assert fields["class_name"] == "blog.Post"
        assert "duration_ms" in fields

    def test_failure(self):
        """Test failures are logged and the exception propagates."""
        logger = RecordingLogger()

        with pytest.raises(ValueError):
            with SchemaOperationLogger(logger, "build_schema", "blog.Post"):
                raise ValueError("broken")

        level, event, fields = logger.calls[-1]
        assert level == "error"
        assert event == "Schema operation failed"
        assert fields["error_type"] == "ValueError"
        assert fields["error"] == "broken"
