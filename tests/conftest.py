import random

import pytest

from bot.state import build_state
from core.config import BotSettings

from .fakes import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(tmp_path):
    return BotSettings(token="test-token", data_dir=tmp_path, web_enabled=False)


@pytest.fixture
def state(settings, clock):
    return build_state(settings, clock=clock, rng=random.Random(0))
