"""Top-N ranking table for a single reference date."""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterable, List, Optional

from .deltas import DEFAULT_WINDOW_DAYS, RankDelta, compute_deltas, format_delta
from .history_store import Entity

DEFAULT_LIMIT = 5

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_limit(value: Any, default: int = DEFAULT_LIMIT) -> int:
    """Coerce a user supplied row limit; junk and values below 1 give ``default``.

    Reads a leading integer the way a form field would, so ``"2.5"`` and
    ``3.0`` become 2 and 3.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        n = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        n = int(value)
    else:
        m = _LEADING_INT_RE.match(str(value))
        if m is None:
            return default
        n = int(m.group(1))
    return n if n >= 1 else default


def build_ranking_view(
    entities: Iterable[Entity],
    reference_date: Optional[str],
    limit: Any = DEFAULT_LIMIT,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> List[RankDelta]:
    if not reference_date:
        return []
    rows = []
    for e in entities:
        row = compute_deltas(e, reference_date, window_days=window_days)
        if row is not None:
            rows.append(row)
    # sorted() is stable, equal ranks keep input order
    rows = sorted(rows, key=lambda r: r.today_rank)
    return rows[: parse_limit(limit)]


def to_display_row(row: RankDelta) -> Dict[str, Any]:
    p = format_delta(row.past_delta)
    f = format_delta(row.future_delta)
    return {
        "rank": row.today_rank,
        "identifier": row.ticker,
        "pastDeltaText": p.text,
        "pastDeltaClass": p.css_class.value,
        "futureDeltaText": f.text,
        "futureDeltaClass": f.css_class.value,
    }
