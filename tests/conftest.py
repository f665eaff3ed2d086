import logging

import pytest

from customerio_async.logging_config import PACKAGE_LOGGER
from customerio_async.services.metrics import metrics


@pytest.fixture(autouse=True)
def _reset_metrics():
    """Reset the shared metrics collector between every test."""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo any setup_logging() call made while a test ran."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    level, handlers = logger.level, list(logger.handlers)
    yield
    for h in list(logger.handlers):
        if h not in handlers:
            logger.removeHandler(h)
    logger.setLevel(level)
