# backend/tests/test_dates.py
from datetime import date, datetime, timezone

import pytest

from stockwatch.utils.dates import (
    article_date_to_av_date,
    av_date_to_article_date,
    format_article_date,
    parse_article_date,
    parse_av_date,
    price_map_to_list,
)


class TestDateFormats:

    def test_parse_av_date(self):
        assert parse_av_date("2018-01-25") == date(2018, 1, 25)

    def test_parse_av_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_av_date("25/01/2018")
        with pytest.raises(ValueError):
            parse_av_date(None)

    def test_parse_article_date_variants(self):
        expected = datetime(2018, 1, 25, 14, 3, 11, tzinfo=timezone.utc)
        assert parse_article_date("2018-01-25T14:03:11Z") == expected
        assert parse_article_date("2018-01-25T14:03:11+00:00") == expected
        assert parse_article_date("2018-01-25T14:03:11") == expected
        # offsets are normalized to UTC
        assert parse_article_date("2018-01-25T16:03:11+02:00") == expected

    def test_parse_article_date_empty(self):
        with pytest.raises(ValueError):
            parse_article_date("")

    def test_article_to_av(self):
        assert article_date_to_av_date("2018-01-25T23:59:59Z") == "2018-01-25"

    def test_round_trip(self):
        for d in ("2018-01-25", "2020-02-29", "1999-12-31"):
            assert article_date_to_av_date(av_date_to_article_date(d)) == d

    def test_format_article_date_naive_is_utc(self):
        assert format_article_date(datetime(2018, 1, 25, 8, 0, 0)) == "2018-01-25T08:00:00Z"


class TestPriceMapToList:

    def test_sorted_ascending(self):
        pairs = price_map_to_list({"2018-01-30": 15, "2018-01-20": 10.0, "2018-01-25": "12"})
        assert [p.date for p in pairs] == ["2018-01-20", "2018-01-25", "2018-01-30"]
        assert [p.price for p in pairs] == [10.0, 12.0, 15.0]

    def test_empty(self):
        assert price_map_to_list({}) == []
        assert price_map_to_list(None) == []
