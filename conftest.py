import logging

import pytest

from core import logging as clog


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Context fields and root handlers set up by one test must not leak into the next."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    clog.clear_context()
    yield
    clog.clear_context()
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
