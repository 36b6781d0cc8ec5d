"""Rankings dataset sources.

``HttpRankingsProvider`` downloads ``rankings.json`` with ``requests``;
``FileRankingsProvider`` reads it from disk. ``provider_from_env`` picks one
based on ``RANKINGS_URL`` / ``RANKINGS_PATH``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import requests

from ..errors import FetchFailure

DEFAULT_RANKINGS_PATH = Path(__file__).resolve().parent.parent / "data" / "rankings.json"
DEFAULT_TIMEOUT = 15.0


class HttpRankingsProvider:
    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self) -> Any:
        try:
            r = self._session.get(self.url, timeout=self.timeout, headers={"Accept": "application/json"})
        except requests.RequestException as e:
            raise FetchFailure(f"Failed to load {self.url}: {e}") from e
        if not r.ok:
            raise FetchFailure(f"Failed to load {self.url}: HTTP {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise FetchFailure(f"{self.url} did not return valid JSON") from e


class FileRankingsProvider:
    def __init__(self, path: Union[str, Path] = DEFAULT_RANKINGS_PATH) -> None:
        self.path = Path(path)

    def fetch(self) -> Any:
        try:
            with self.path.open(encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise FetchFailure(f"Failed to read {self.path}: {e}") from e
        except ValueError as e:
            raise FetchFailure(f"{self.path} is not valid JSON: {e}") from e


def provider_from_env() -> Union[HttpRankingsProvider, FileRankingsProvider]:
    url = os.getenv("RANKINGS_URL")
    if url:
        timeout = float(os.getenv("RANKINGS_TIMEOUT", str(DEFAULT_TIMEOUT)))
        return HttpRankingsProvider(url, timeout=timeout)
    return FileRankingsProvider(os.getenv("RANKINGS_PATH") or DEFAULT_RANKINGS_PATH)
