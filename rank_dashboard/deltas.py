"""Rank changes around a reference date.

Deltas share one sign convention: ``later rank - earlier rank``. A negative
value means the rank number went down, i.e. the ticker improved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .dates import shift_within_calendar
from .history_store import Entity
from .lookup import boundary_in_range

DEFAULT_WINDOW_DAYS = 7


class DeltaClass(str, Enum):
    IMPROVED = "improved"
    REGRESSED = "regressed"
    NEUTRAL = "neutral"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DeltaDisplay:
    text: str
    css_class: DeltaClass
    # abs(delta); None when there was no data
    magnitude: Optional[int]


@dataclass(frozen=True)
class RankDelta:
    ticker: str
    today_rank: int
    past_delta: Optional[int]
    future_delta: Optional[int]


def compute_deltas(
    entity: Entity,
    reference_date: str,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[RankDelta]:
    """Return today's rank and the trailing/leading deltas for ``entity``.

    ``None`` when the ticker has no observation exactly on ``reference_date``.
    The past point is the earliest one in ``[T - window, T]`` and the future
    point the latest one in ``[T, T + window]``. ``T`` lies in both ranges,
    so a window with no other point yields a delta of 0.
    """
    today = next((pt for pt in entity.history if pt.date == reference_date), None)
    if today is None:
        return None

    start = shift_within_calendar(reference_date, -window_days)
    end = shift_within_calendar(reference_date, window_days)
    past = boundary_in_range(entity.history, start, reference_date, prefer_earliest=True)
    fut = boundary_in_range(entity.history, reference_date, end, prefer_earliest=False)
    return RankDelta(
        ticker=entity.ticker,
        today_rank=today.rank,
        past_delta=None if past is None else today.rank - past.rank,
        future_delta=None if fut is None else fut.rank - today.rank,
    )


def format_delta(d: Optional[int]) -> DeltaDisplay:
    if d is None:
        return DeltaDisplay(text="—", css_class=DeltaClass.UNKNOWN, magnitude=None)
    if d == 0:
        return DeltaDisplay(text="0", css_class=DeltaClass.NEUTRAL, magnitude=0)
    if d < 0:
        return DeltaDisplay(text=f"−{-d}", css_class=DeltaClass.IMPROVED, magnitude=-d)
    return DeltaDisplay(text=f"+{d}", css_class=DeltaClass.REGRESSED, magnitude=d)
