from __future__ import annotations

from collections.abc import Iterator

import pytest

from frontend.shared.config import load_config
from frontend.tests.fakes import FakeBackend


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture(autouse=True)
def reset_config_cache() -> Iterator[None]:
    load_config.cache_clear()
    yield
    load_config.cache_clear()
