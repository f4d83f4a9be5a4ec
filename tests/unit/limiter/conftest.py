from unittest.mock import Mock

import pytest

from bucket_limiter import InMemoryCounterStore, Limiter


@pytest.fixture
def clock():
    # mid-slice for 10s windows, so retry_after is not a whole window
    return Mock(return_value=1003.0)


@pytest.fixture
def store(clock):
    return InMemoryCounterStore(clock=clock)


@pytest.fixture
def limiter(store, clock):
    return Limiter(store, clock=clock)
