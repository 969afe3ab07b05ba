"""Shared pytest fixtures and configuration for pytest."""

import logging

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "race: test that interleaves push events with in-flight requests"
    )


@pytest.fixture(autouse=True)
def _reset_clipdeck_logger() -> None:
    """Let caplog see clipdeck records even after configure_logging() ran."""
    logging.getLogger("clipdeck").propagate = True
