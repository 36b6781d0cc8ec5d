from __future__ import annotations

import json

import pytest
import requests

from rank_dashboard.errors import FetchFailure
from rank_dashboard.providers import rankings_source
from rank_dashboard.providers.rankings_source import FileRankingsProvider, HttpRankingsProvider, provider_from_env


class _Resp:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("no json")
        return self._payload


class _Session:
    def __init__(self, resp=None, exc=None):
        self.resp = resp
        self.exc = exc
        self.urls = []

    def get(self, url, timeout=None, headers=None):
        self.urls.append(url)
        if self.exc is not None:
            raise self.exc
        return self.resp


def test_http_provider_returns_payload() -> None:
    sess = _Session(_Resp(payload=[{"ticker": "A"}]))
    p = HttpRankingsProvider("https://example.test/rankings.json", session=sess)
    assert p.fetch() == [{"ticker": "A"}]
    assert sess.urls == ["https://example.test/rankings.json"]


@pytest.mark.parametrize(
    "session",
    [
        _Session(_Resp(status_code=404)),
        _Session(_Resp(bad_json=True)),
        _Session(exc=requests.ConnectionError("down")),
    ],
)
def test_http_provider_failures(session) -> None:
    with pytest.raises(FetchFailure):
        HttpRankingsProvider("https://example.test/r.json", session=session).fetch()
    assert len(session.urls) == 1


def test_file_provider(tmp_path) -> None:
    path = tmp_path / "rankings.json"
    path.write_text(json.dumps([{"ticker": "A", "history": []}]), encoding="utf-8")
    assert FileRankingsProvider(path).fetch() == [{"ticker": "A", "history": []}]


def test_file_provider_failures(tmp_path) -> None:
    with pytest.raises(FetchFailure):
        FileRankingsProvider(tmp_path / "missing.json").fetch()
    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")
    with pytest.raises(FetchFailure):
        FileRankingsProvider(broken).fetch()


def test_bundled_sample_dataset_loads() -> None:
    payload = FileRankingsProvider().fetch()
    assert {r["ticker"] for r in payload} == {"NVDA", "MSFT", "ASML"}


def test_provider_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("RANKINGS_URL", "https://example.test/r.json")
    monkeypatch.setenv("RANKINGS_TIMEOUT", "3")
    p = provider_from_env()
    assert isinstance(p, HttpRankingsProvider)
    assert p.timeout == 3.0

    monkeypatch.delenv("RANKINGS_URL")
    monkeypatch.setenv("RANKINGS_PATH", str(tmp_path / "r.json"))
    p = provider_from_env()
    assert isinstance(p, FileRankingsProvider)
    assert p.path == tmp_path / "r.json"

    monkeypatch.delenv("RANKINGS_PATH")
    assert provider_from_env().path == rankings_source.DEFAULT_RANKINGS_PATH
