"""
Pytest configuration file for the Lodestone project.
This file sets up the Python path so tests can import modules from the project root,
and provides deterministic stand-ins for the clock and timers.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from domain.models import Provision, ResourceHub  # noqa: E402
from domain.enums import Rarity  # noqa: E402
from repositories.document_store import InMemoryDocumentStore  # noqa: E402


T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class ManualTimer:
    """threading.Timer stand-in that only fires when told to."""

    def __init__(self, interval: float, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class ManualTimerFactory:
    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, interval, function) -> ManualTimer:
        timer = ManualTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> list[ManualTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]

    def fire_due(self, clock: FakeClock, created_at: datetime):
        """Fire active timers whose interval has elapsed since created_at."""
        elapsed = (clock.now - created_at).total_seconds()
        for timer in list(self.active):
            if timer.interval <= elapsed:
                timer.fire()


@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers():
    return ManualTimerFactory()


@pytest.fixture
def forest_cache():
    """The two-provision hub from the product examples."""
    return ResourceHub(
        id="h1",
        name="Forest Cache",
        provisions=(
            Provision(id="p1", name="Trail Rations", rarity=Rarity.COMMON, price=5, hub_id="h1"),
            Provision(id="p2", name="Elven Cloak", rarity=Rarity.RARE, price=50, hub_id="h1"),
        ),
    )
