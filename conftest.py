import pytest

from rank_dashboard.data_store import RankStore


class StaticProvider:
    """Serves a fixed payload, or raises ``error`` when set."""

    def __init__(self, payload=None, error=None):
        self.payload = payload if payload is not None else []
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


SAMPLE = [
    {"ticker": "A", "history": [
        {"date": "2025-01-15", "rank": 2},
        {"date": "2025-01-01", "rank": 3},
        {"date": "2025-01-08", "rank": 1},
    ]},
    {"ticker": "B", "name": "Bravo", "history": [
        {"date": "2025-01-03", "rank": 4},
        {"date": "2025-01-08", "rank": 2},
    ]},
    {"ticker": "C", "history": [
        {"date": "2025-01-07", "rank": 1},
        {"date": "2025-01-09", "rank": 1},
    ]},
]


@pytest.fixture
def sample_payload():
    return [dict(r, history=list(r["history"])) for r in SAMPLE]


@pytest.fixture
def make_store():
    def _make(payload=None, error=None, clock="2025-01-08", **kw):
        provider = StaticProvider(payload, error)
        store = RankStore(provider, clock=lambda: clock, **kw)
        return store, provider
    return _make
