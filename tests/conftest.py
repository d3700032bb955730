"""Shared fixtures for the pypack tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_pypack_logger():
    """Drop the handlers main() installs so they do not leak between tests."""
    yield
    logger = logging.getLogger("pypack")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
