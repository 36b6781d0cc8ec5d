"""Central data store for the rank dashboard.

This module defines the RankStore class, which owns the current dataset
snapshot, the reference date and the set of tickers selected for the
chart. Data comes from a rankings provider (``FileRankingsProvider`` or
``HttpRankingsProvider``). Every reload rebuilds the snapshot from scratch
and swaps it in whole; the selection is kept because it is keyed by
ticker.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from .dates import is_iso_date, today_utc
from .deltas import DEFAULT_WINDOW_DAYS
from .errors import EmptyUniverse, FetchFailure
from .history_store import (
    Entity,
    chart_window,
    compute_universe_dates,
    normalize,
    pick_reference_date,
)
from .providers.base import RankingsProvider
from .providers.rankings_source import provider_from_env
from .ranking import DEFAULT_LIMIT, build_ranking_view, parse_limit, to_display_row
from .series import SelectionSet, chart_payload

logger = logging.getLogger(__name__)

DEFAULT_CHART_DAYS = 90


@dataclass(frozen=True)
class Snapshot:
    entities: Tuple[Entity, ...] = ()
    by_ticker: Dict[str, Entity] = field(default_factory=dict)
    universe: Tuple[str, ...] = ()
    # None when the dataset has no dates at all
    reference_date: Optional[str] = None
    chart_dates: Tuple[str, ...] = ()
    loaded_at: Optional[str] = None


def build_snapshot(
    raw: Any,
    clock_value: Optional[str],
    chart_days: int = DEFAULT_CHART_DAYS,
) -> Snapshot:
    """Derive a complete snapshot from a raw payload. Pure apart from logging."""
    entities = normalize(raw)
    universe = compute_universe_dates(entities)
    try:
        reference_date: Optional[str] = pick_reference_date(universe, clock_value)
    except EmptyUniverse:
        logger.info("Dataset has no observations; showing empty state")
        reference_date = None
    return Snapshot(
        entities=tuple(entities),
        by_ticker={e.ticker: e for e in entities},
        universe=tuple(universe),
        reference_date=reference_date,
        chart_dates=tuple(chart_window(universe, reference_date, chart_days)),
        loaded_at=datetime.now(timezone.utc).isoformat(),
    )


class RankStore:
    """In-memory application state.

    Derivations (ranking rows, chart payload) are recomputed from the
    current snapshot on each call; only ``load`` replaces the snapshot and
    only ``toggle``/``clear_selection`` change the selection.
    """

    def __init__(
        self,
        provider: RankingsProvider,
        clock: Callable[[], Optional[str]] = today_utc,
        chart_days: int = DEFAULT_CHART_DAYS,
        delta_days: int = DEFAULT_WINDOW_DAYS,
        default_limit: int = DEFAULT_LIMIT,
    ) -> None:
        self._provider = provider
        self._clock = clock
        self.chart_days = chart_days
        self.delta_days = delta_days
        self.default_limit = parse_limit(default_limit)
        self._snapshot = Snapshot()
        self._selection = SelectionSet()
        self._loaded = False
        self._lock = threading.Lock()
        self.last_error: Optional[str] = None

    # ----- Loading -----
    def load(self) -> bool:
        """Fetch and rebuild the snapshot. Returns False and keeps the old one on failure.

        Loads are serialised, so a reload started later always wins.
        """
        with self._lock:
            return self._load_locked()

    def _load_locked(self) -> bool:
        try:
            raw = self._provider.fetch()
            snap = build_snapshot(raw, self._clock(), self.chart_days)
        except FetchFailure as e:
            logger.exception("Rankings load failed: %s", e)
            self.last_error = str(e)
            self._loaded = True
            return False
        self._snapshot = snap
        self._loaded = True
        self.last_error = None
        logger.info(
            "Loaded %d tickers, %d dates, reference date %s",
            len(snap.entities), len(snap.universe), snap.reference_date,
        )
        return True

    def ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if not self._loaded:
                self._load_locked()

    @property
    def snapshot(self) -> Snapshot:
        self.ensure_loaded()
        return self._snapshot

    # ----- Derived views -----
    def ranking_rows(self, limit: Any = None) -> List[Dict[str, Any]]:
        snap = self.snapshot
        n = self.default_limit if limit is None else parse_limit(limit, self.default_limit)
        rows = build_ranking_view(snap.entities, snap.reference_date, n, window_days=self.delta_days)
        return [to_display_row(r) for r in rows]

    def chart(self) -> Dict[str, Any]:
        snap = self.snapshot
        return chart_payload(self._selection, snap.chart_dates, snap.by_ticker)

    # ----- Selection -----
    def toggle(self, ticker: str) -> Dict[str, Any]:
        """Flip ``ticker`` in the selection and return the updated chart payload."""
        t = (ticker or "").strip()
        if not t:
            raise ValueError("Ticker is required")
        self._selection.toggle(t)
        return self.chart()

    def is_selected(self, ticker: str) -> bool:
        return ticker in self._selection

    def clear_selection(self) -> None:
        self._selection.clear()

    def status(self) -> Dict[str, Any]:
        snap = self.snapshot
        return {
            "reference_date": snap.reference_date,
            "tickers": len(snap.entities),
            "dates": len(snap.universe),
            "chart_dates": len(snap.chart_dates),
            "selected": list(self._selection),
            "loaded_at": snap.loaded_at,
            "last_error": self.last_error,
        }


def _env_clock() -> Callable[[], Optional[str]]:
    fixed = os.getenv("REFERENCE_DATE")
    if fixed:
        if not is_iso_date(fixed):
            raise ValueError(f"REFERENCE_DATE must be YYYY-MM-DD, got {fixed!r}")
        return lambda: fixed
    return today_utc


def store_from_env() -> RankStore:
    return RankStore(
        provider_from_env(),
        clock=_env_clock(),
        chart_days=int(os.getenv("CHART_WINDOW_DAYS", str(DEFAULT_CHART_DAYS))),
        delta_days=int(os.getenv("DELTA_WINDOW_DAYS", str(DEFAULT_WINDOW_DAYS))),
        default_limit=parse_limit(os.getenv("RANK_LIMIT", str(DEFAULT_LIMIT))),
    )


# Singleton instance used by the FastAPI app and the worker
STORE = store_from_env()
