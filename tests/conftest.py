"""Shared fixtures for the calculator, access and report tests."""

import datetime as dt

import matplotlib
matplotlib.use("Agg")

import pytest

from src.codes.ec4 import get_code
from src.core.beam import CompositeBeamDesigner
from src.core.column import CompositeColumnDesigner
from src.core.slab import CompositeSlabDesigner
from src.utils.settings import CONFIG_ENV_VAR, EMAILS_ENV_VAR, _clear_settings_cache


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Every test starts from config/course.yaml without env overrides."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv(EMAILS_ENV_VAR, raising=False)
    _clear_settings_cache()
    yield
    _clear_settings_cache()


@pytest.fixture(scope="session")
def code():
    return get_code()


@pytest.fixture
def slab(code):
    return CompositeSlabDesigner(code)


@pytest.fixture
def beam(code):
    return CompositeBeamDesigner(code)


@pytest.fixture
def column(code):
    return CompositeColumnDesigner(code)


class FakeClock:
    """Settable clock for session expiry tests."""

    def __init__(self, start=None):
        self.now = start or dt.datetime(2026, 1, 5, 9, 0, tzinfo=dt.timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += dt.timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()
