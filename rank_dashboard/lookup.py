"""Point lookups over one ticker's sorted history.

Histories hold tens to a few hundred points, so both queries are plain
linear scans. Neither function mutates its input.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .history_store import Observation


def latest_on_or_before(history: Sequence[Observation], target: str) -> Optional[Observation]:
    cand: Optional[Observation] = None
    for pt in history:
        # >= so that a repeated date resolves to the later entry
        if pt.date <= target and (cand is None or pt.date >= cand.date):
            cand = pt
    return cand


def boundary_in_range(
    history: Sequence[Observation],
    start: str,
    end: str,
    prefer_earliest: bool,
) -> Optional[Observation]:
    """Earliest (or latest) point with ``start <= date <= end``, or ``None``."""
    pts = [pt for pt in history if start <= pt.date <= end]
    if not pts:
        return None
    return pts[0] if prefer_earliest else pts[-1]
