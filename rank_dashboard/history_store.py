"""Normalized per-ticker rank histories.

Raw records follow the ``rankings.json`` contract::

    {"ticker": "NVDA", "name": "Nvidia", "rank": 1,
     "history": [{"date": "2025-01-08", "rank": 1}, ...]}

``normalize`` turns them into immutable ``Entity`` objects whose history is
sorted ascending by date. Bad records are logged and dropped so that one
malformed ticker never prevents the rest of the dataset from loading.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .dates import parse_date, shift_within_calendar
from .errors import (
    EmptyUniverse,
    FetchFailure,
    InvalidObservation,
    MissingIdentifier,
    RankDataError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observation:
    date: str
    rank: int


@dataclass(frozen=True)
class Entity:
    ticker: str
    name: str
    # None only when the record had no rank and an empty history
    rank: Optional[int]
    history: Tuple[Observation, ...] = ()

    @property
    def rank_by_date(self) -> Dict[str, int]:
        """Exact-date lookup table, rebuilt from ``history`` on each access."""
        return {pt.date: pt.rank for pt in self.history}


def _positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _normalize_history(ticker: str, raw_history: Any) -> Tuple[Observation, ...]:
    if not isinstance(raw_history, list):
        return ()
    points: List[Observation] = []
    seen: Set[str] = set()
    for pt in raw_history:
        if not isinstance(pt, dict):
            raise InvalidObservation(f"{ticker}: history point is not an object: {pt!r}")
        d = pt.get("date")
        parse_date(d)
        r = pt.get("rank")
        if not _positive_int(r):
            raise InvalidObservation(f"{ticker}: rank on {d} must be a positive integer, got {r!r}")
        if d in seen:
            raise InvalidObservation(f"{ticker}: duplicate observation for {d}")
        seen.add(d)
        points.append(Observation(date=d, rank=r))
    points.sort(key=lambda p: p.date)
    return tuple(points)


def normalize_record(raw: Any) -> Entity:
    """Validate one raw record and apply the default rules.

    ``name`` defaults to the ticker, ``rank`` to the latest history rank and
    ``history`` to empty when it is missing or not a list.
    """
    if not isinstance(raw, dict):
        raise MissingIdentifier(f"Record is not an object: {raw!r}")
    ticker = raw.get("ticker")
    if not isinstance(ticker, str) or not ticker:
        raise MissingIdentifier(f"Record has no ticker: {raw!r}")

    history = _normalize_history(ticker, raw.get("history"))

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        name = ticker

    rank = raw.get("rank")
    if not _positive_int(rank):
        if rank is not None:
            logger.warning("%s: ignoring non-integer rank %r", ticker, rank)
        rank = history[-1].rank if history else None

    return Entity(ticker=ticker, name=name, rank=rank, history=history)


def normalize(raw_entities: Any) -> List[Entity]:
    if not isinstance(raw_entities, list):
        raise FetchFailure(
            f"Expected a JSON array of records, got {type(raw_entities).__name__}"
        )
    out: List[Entity] = []
    tickers: Set[str] = set()
    for i, raw in enumerate(raw_entities):
        try:
            entity = normalize_record(raw)
        except RankDataError as e:
            logger.warning("Dropping record %d: %s", i, e)
            continue
        if entity.ticker in tickers:
            logger.warning("Dropping record %d: ticker %s already loaded", i, entity.ticker)
            continue
        tickers.add(entity.ticker)
        out.append(entity)
    return out


def compute_universe_dates(entities: Iterable[Entity]) -> List[str]:
    dates: Set[str] = set()
    for e in entities:
        dates.update(pt.date for pt in e.history)
    return sorted(dates)


def pick_reference_date(universe: Sequence[str], clock_value: Optional[str]) -> str:
    """Return the latest universe date not after ``clock_value``.

    Falls back to the latest date overall when every date is in the future
    or no clock value is available.
    """
    if not universe:
        raise EmptyUniverse("No observation dates available")
    if clock_value:
        eligible = [d for d in universe if d <= clock_value]
        if eligible:
            return max(eligible)
    return max(universe)


def chart_window(universe: Sequence[str], reference_date: Optional[str], days: int = 90) -> List[str]:
    """Universe dates within the ``days`` calendar days ending at ``reference_date``.

    Coverage-based: a sparse universe gives fewer than ``days`` labels.
    """
    if not reference_date or days < 1:
        return []
    start = shift_within_calendar(reference_date, -(days - 1))
    return [d for d in universe if start <= d <= reference_date]
