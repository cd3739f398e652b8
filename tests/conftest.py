"""
Shared pytest fixtures for integratepy tests.
"""

import logging

import pytest

from integratepy import Configuration, Integrator


@pytest.fixture
def integrator() -> Integrator:
    """A fresh integrator with the default configuration."""
    return Integrator()


@pytest.fixture
def tight_config() -> Configuration:
    """Configuration asking for near machine accuracy."""
    return Configuration(max_subdivisions=200, relative_accuracy=1e-12, absolute_accuracy=1e-12)


@pytest.fixture(autouse=True)
def reset_integratepy_logging():
    """Reset logging state before each test.

    Ensures tests start with a clean logging configuration:
    - Removes all handlers except NullHandler
    - Resets level to NOTSET (inherit from parent)
    """
    logger = logging.getLogger("integratepy")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
