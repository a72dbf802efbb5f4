"""
Pytest fixtures for the hostel portal test suite.
"""
import random
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from engine.allocation import AllocationEngine
from engine.notice_board import NoticeBoard
from engine.portal import HostelPortal
from engine.settlement import SettlementEngine
from models.app_state import AppState
from storage.database import Database


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)

    def set(self, now: datetime):
        self.now = now


@pytest.fixture
def clock():
    """Clock fixed at 15 Mar 2026, 10:30."""
    return FakeClock(datetime(2026, 3, 15, 10, 30))


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def allocation(state, clock):
    return AllocationEngine(state, clock=clock, rng=random.Random(7))


@pytest.fixture
def settlement(state, clock):
    return SettlementEngine(state, clock=clock)


@pytest.fixture
def notice_board(state, clock):
    return NoticeBoard(state, clock=clock)


@pytest.fixture
def make_profile():
    """Factory for registration profiles."""
    def _make(first_name, last_name="Rao", rent=7500, contact_number="9876543210", **extra):
        profile = {
            "first_name": first_name,
            "last_name": last_name,
            "contact_number": contact_number,
            "rent": rent,
        }
        profile.update(extra)
        return profile
    return _make


@pytest.fixture
def block_a(allocation):
    """Hostel "Block A" with room 101 (capacity 2, NON_AC) and 102 (capacity 3, AC)."""
    hostel = allocation.create_hostel("Block A")
    allocation.add_room(hostel.id, "101", 2, "NON_AC")
    allocation.add_room(hostel.id, "102", 3, "AC")
    return hostel


@pytest.fixture
def asha(allocation, block_a, make_profile):
    """Asha registered into Block A / 101 with rent 7500."""
    return allocation.register_resident(make_profile("Asha"), "Block A", "101")


@pytest.fixture
def store():
    """In-memory DuckDB durable store."""
    db = Database(":memory:", enabled=True)
    yield db
    db.close()


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def uploader():
    mock = MagicMock()
    mock.upload.side_effect = lambda image: "https://media.example/" + str(len(image))
    return mock


@pytest.fixture
def portal(store, notifier, uploader, clock):
    return HostelPortal(
        state=AppState(),
        store=store,
        notifier=notifier,
        uploader=uploader,
        clock=clock,
        rng=random.Random(7),
    )
