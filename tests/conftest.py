"""Shared test configuration.

Structured logging is routed through stdlib logging at WARNING level so
schema construction logs never end up in captured CLI output.
"""

import pytest

from classschema.core.logging import configure_logging


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    configure_logging(environment="testing", log_level="WARNING")
