import logging

import pytest


@pytest.fixture(autouse=True)
def reset_tasktrack_logging():
    """
    Drop handlers installed by the CLI's setup_logging() after each test.

    The console handler is bound to the stream CliRunner swaps in, which is
    closed once the invocation returns.
    """
    yield
    logger = logging.getLogger("tasktrack")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
