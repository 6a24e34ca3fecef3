import logging

import pytest

from magpie.utils.dates import FrozenClock
from magpie.utils.testutils import InMemoryClient


@pytest.fixture
def clock():
    return FrozenClock(1500000000.0)


@pytest.fixture
def client(clock):
    return InMemoryClient(clock=clock)


@pytest.fixture(autouse=True)
def reset_magpie_loggers():
    yield
    for name in ('magpie', 'magpie.errors'):
        logging.getLogger(name).propagate = True
