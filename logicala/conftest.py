import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_logicala_logger():
    """Undo configure_logging() between tests.

    The CLI installs a stderr handler on the package logger; without this
    it would stay bound to a capture stream pytest has already closed.
    """
    logger = logging.getLogger("logicala")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
