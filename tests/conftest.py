"""
Shared pytest fixtures for partialio tests.
"""

import logging

import pytest

from partialio import InMemoryTraceRecorder, MemoryStream


@pytest.fixture
def recorder() -> InMemoryTraceRecorder:
    """A fresh in-memory trace recorder."""
    return InMemoryTraceRecorder()


@pytest.fixture
def memory_stream() -> MemoryStream:
    """An empty, always-ready poll-based stream."""
    return MemoryStream()


@pytest.fixture(autouse=True)
def reset_partialio_logging():
    """Reset logging state before each test.

    Ensures tests start with a clean logging configuration:
    - Removes all handlers except NullHandler
    - Resets level to NOTSET (inherit from parent)
    """
    logger = logging.getLogger("partialio")

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()

    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)

    yield

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
