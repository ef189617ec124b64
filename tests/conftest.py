import pytest

from blobcursor.binary.types import SHARED_TYPES
from blobcursor.config import get_settings


@pytest.fixture(autouse=True)
def _isolate_globals():
    saved = dict(SHARED_TYPES._entries)
    get_settings.cache_clear()
    yield
    SHARED_TYPES._entries.clear()
    SHARED_TYPES._entries.update(saved)
    get_settings.cache_clear()


LOREM = (
    b"Lorem ipsum dolor sit amet, consectetur adipisicing elit, sed do eiusmod "
    b"tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, "
    b"quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo."
)


@pytest.fixture
def lorem():
    return LOREM
