import logging

import pytest


class FakeClock:
    """Manually advanced time source for expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """A fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture(autouse=True)
def restore_library_logger():
    """Undo level and handler changes made to the cachekit logger."""
    library_logger = logging.getLogger("cachekit")
    level = library_logger.level
    handlers = list(library_logger.handlers)
    yield
    for handler in library_logger.handlers:
        if handler not in handlers:
            handler.close()
    library_logger.handlers = handlers
    library_logger.setLevel(level)
