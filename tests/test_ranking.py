from __future__ import annotations

import pytest

from rank_dashboard.history_store import normalize, normalize_record
from rank_dashboard.ranking import build_ranking_view, parse_limit, to_display_row


@pytest.mark.parametrize("value", [0, -3, "abc", "", None, "0.9", float("nan"), True])
def test_parse_limit_defaults(value) -> None:
    assert parse_limit(value) == 5


def test_parse_limit_accepts_ints_and_numeric_strings() -> None:
    assert parse_limit(3) == 3
    assert parse_limit(" 12 ") == 12
    assert parse_limit("x", default=10) == 10


def test_parse_limit_truncates_like_a_form_field() -> None:
    assert parse_limit("2.5") == 2
    assert parse_limit(3.0) == 3
    assert parse_limit(3.9) == 3
    assert parse_limit("7 rows") == 7
    assert parse_limit("-2.5") == 5


def test_excludes_tickers_without_exact_reference_point(sample_payload) -> None:
    rows = build_ranking_view(normalize(sample_payload), "2025-01-08", 10)
    assert [r.ticker for r in rows] == ["A", "B"]


def test_sorted_by_rank_and_truncated() -> None:
    entities = [
        normalize_record({"ticker": t, "history": [{"date": "2025-01-08", "rank": r}]})
        for t, r in [("X", 3), ("Y", 1), ("Z", 2), ("W", 4)]
    ]
    rows = build_ranking_view(entities, "2025-01-08", 2)
    assert [(r.ticker, r.today_rank) for r in rows] == [("Y", 1), ("Z", 2)]
    assert len(build_ranking_view(entities, "2025-01-08", 50)) == 4
    assert len(build_ranking_view(entities, "2025-01-08", "abc")) == 4


def test_equal_ranks_keep_input_order() -> None:
    entities = [
        normalize_record({"ticker": t, "history": [{"date": "2025-01-08", "rank": 1}]})
        for t in ["Q", "P", "R"]
    ]
    assert [r.ticker for r in build_ranking_view(entities, "2025-01-08")] == ["Q", "P", "R"]


def test_empty_input_gives_empty_view() -> None:
    assert build_ranking_view([], None) == []
    assert build_ranking_view(normalize([]), None) == []


def test_display_row(sample_payload) -> None:
    rows = build_ranking_view(normalize(sample_payload), "2025-01-08")
    assert to_display_row(rows[0]) == {
        "rank": 1,
        "identifier": "A",
        "pastDeltaText": "−2",
        "pastDeltaClass": "improved",
        "futureDeltaText": "+1",
        "futureDeltaClass": "regressed",
    }
    assert to_display_row(rows[1])["futureDeltaClass"] == "neutral"


def test_reference_date_at_end_of_calendar() -> None:
    entities = normalize([{"ticker": "A", "history": [{"date": "9999-12-30", "rank": 1}]}])
    rows = build_ranking_view(entities, "9999-12-30")
    assert [(r.ticker, r.past_delta, r.future_delta) for r in rows] == [("A", 0, 0)]
