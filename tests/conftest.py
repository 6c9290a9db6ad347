"""Shared fixtures for the full_feed test suite."""

from __future__ import annotations

import asyncio
import logging

import pytest

from full_feed.logging_utils import LOGGER_NAME


class FakeClock:
    """Manually advanced wall clock for cache timestamps."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


async def settle(rounds: int = 5) -> None:
    """Let already-scheduled tasks run a few steps."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo setup_logging() calls made by a test."""
    logger = logging.getLogger(LOGGER_NAME)
    level, handlers, propagate = logger.level, list(logger.handlers), logger.propagate
    yield logger
    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = propagate
