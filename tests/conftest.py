import logging

import pytest

from provtip.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_package_logger():
    """run_cli attaches a handler to whatever sys.stderr is at the time; drop it between tests."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
