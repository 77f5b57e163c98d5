"""Shared fixtures for txrx tests."""

import pytest

from txrx import Channel, Settings
from txrx.config import reset_settings


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def channel(settings):
    return Channel(settings=settings)


@pytest.fixture
def fresh_settings():
    """Drop cached settings before and after a test that edits the environment."""
    reset_settings()
    yield
    reset_settings()


class Recorder:
    """Callable listener that records the arguments of each call."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)


@pytest.fixture
def make_recorder():
    return Recorder
