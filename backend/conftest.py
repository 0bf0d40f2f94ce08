"""Test-wide setup: .env.tests variables and structlog output captured by caplog."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# engine loggers emit through stdlib so caplog sees recompute/tobi lines
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _reset_bound_match_context():
    """Drop contextvars (match_id, snapshot, ...) bound by a previous test."""
    yield
    structlog.contextvars.clear_contextvars()
