"""Chart series for the selected tickers.

Each selected ticker becomes one line on a shared date axis. Values are
taken only from exact-date observations; gaps stay ``None`` so the chart
shows a break instead of an invented rank.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

import pandas as pd

from .history_store import Entity

SERIES_COLORS = [
    "#c900ff",
    "#00e5ff",
    "#ff6bcb",
    "#8aff80",
    "#ffd166",
]


def series_color(index: int) -> str:
    return SERIES_COLORS[index % len(SERIES_COLORS)]


class SelectionSet:
    """Tickers currently charted, iterated in the order they were added.

    Keyed by ticker so it survives a reload of the dataset.
    """

    def __init__(self, tickers: Optional[Iterable[str]] = None) -> None:
        self._items: Dict[str, None] = {}
        for t in tickers or ():
            self._items[t] = None

    def toggle(self, ticker: str) -> bool:
        """Add ``ticker`` if absent, remove it if present. Returns True if now selected."""
        if ticker in self._items:
            del self._items[ticker]
            return False
        self._items[ticker] = None
        return True

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, ticker: object) -> bool:
        return ticker in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)


def _aligned_values(entity: Entity, window: Sequence[str]) -> List[Optional[int]]:
    if not window:
        return []
    s = pd.Series(entity.rank_by_date, dtype="float64").reindex(list(window))
    return [None if pd.isna(v) else int(v) for v in s.tolist()]


def align_series(
    selection: Iterable[str],
    window: Sequence[str],
    entities_by_ticker: Mapping[str, Entity],
) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for ticker in selection:
        entity = entities_by_ticker.get(ticker)
        if entity is None:
            continue
        out.append({
            "identifier": ticker,
            "values": _aligned_values(entity, window),
            "color": series_color(len(out)),
        })
    return out


def chart_payload(
    selection: Iterable[str],
    window: Sequence[str],
    entities_by_ticker: Mapping[str, Entity],
) -> Dict[str, Any]:
    return {
        "labels": list(window),
        "series": align_series(selection, window, entities_by_ticker),
    }
