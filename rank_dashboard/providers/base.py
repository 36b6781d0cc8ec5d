"""Provider interface definitions.

A rankings provider returns the raw ``rankings.json`` payload. The store
does not care where it comes from; see ``rankings_source.py`` for the HTTP
and local file implementations. You can plug in another source by
implementing the same method on your own class.
"""

from __future__ import annotations

from typing import Any, Protocol


class RankingsProvider(Protocol):
    """Supplies the raw dataset, loaded once per reload."""

    def fetch(self) -> Any:
        """Return the decoded JSON payload (normally a list of records).

        Implementations raise ``FetchFailure`` when the source cannot be
        reached, answers with a non-success status, or is not valid JSON.
        They must not retry on their own.
        """
