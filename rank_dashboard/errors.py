"""Error types raised while loading and deriving rank data.

Per-record problems (``InvalidDateFormat``, ``MissingIdentifier``,
``InvalidObservation``) are caught during normalization and the record is
dropped. ``EmptyUniverse`` and ``FetchFailure`` describe the whole dataset
and are turned into an empty or error state by ``RankStore``.
"""

from __future__ import annotations


class RankDataError(ValueError):
    """Base class for malformed rank data."""


class InvalidDateFormat(RankDataError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid ISO date: {value!r}")
        self.value = value


class MissingIdentifier(RankDataError):
    """A record without a usable ``ticker``."""


class InvalidObservation(RankDataError):
    """A history point with a bad rank, a bad shape or a repeated date."""


class EmptyUniverse(RankDataError):
    """No observation dates exist across any ticker."""


class FetchFailure(RuntimeError):
    """The source dataset could not be retrieved or decoded."""
