"""Shared fixtures for the trellis test suite."""
import logging

import pytest

from trellis.utils import log


@pytest.fixture(autouse=True)
def clean_package_logger():
    """Undo handler and level changes made to the ``trellis`` logger."""
    root = logging.getLogger(log.ROOT_LOGGER_NAME)
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
