"""Root conftest — shared test configuration.

Fixtures:
    - clock: controllable UTC clock (advance() instead of sleeping)
    - engine: fresh CoordinationEngine per test, wired to the clock and a
      small token pool
"""

from datetime import datetime, timedelta, timezone

import pytest

from pairgate.services.coordination_engine import CoordinationEngine

START = datetime(2025, 6, 14, 10, 0, tzinfo=timezone.utc)
TOKENS = ("fc_test01", "fc_test02", "fc_test03")


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    return CoordinationEngine(founding_tokens=TOKENS, founding_cap=30, clock=clock)
