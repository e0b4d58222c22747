"""Tests for the Google News RSS feed."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from equipment_intel.news import GoogleNewsRSSFeed
from equipment_intel.news.google_rss import DEFAULT_SOURCE, EXCERPT_LENGTH, GOOGLE_NEWS_RSS_URL, parse_rss

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel>
<title>"BrahMos" - Google News</title>
<item>
  <title>BrahMos test-fired from Su-30MKI</title>
  <link>https://news.example/brahmos-su30</link>
  <pubDate>Mon, 02 Mar 2026 08:30:00 GMT</pubDate>
  <description>&lt;a href="https://news.example/brahmos-su30"&gt;BrahMos test-fired&lt;/a&gt;&amp;nbsp;&lt;font color="#6f6f6f"&gt;The Hindu&lt;/font&gt;</description>
  <source url="https://www.thehindu.com">The Hindu</source>
</item>
<item>
  <title>Philippines receives second battery</title>
  <link>https://news.example/philippines</link>
  <pubDate>Tue, 03 Mar 2026 10:00:00 +0530</pubDate>
</item>
<item>
  <title></title>
  <link>https://news.example/untitled</link>
</item>
<item>
  <title>Undated analysis</title>
  <link>https://news.example/analysis</link>
  <pubDate>sometime last week</pubDate>
</item>
</channel></rss>
"""


class TestParseRSS:
    def test_items_in_feed_order(self) -> None:
        articles = parse_rss(RSS, region="IN")

        assert [a.title for a in articles] == [
            "BrahMos test-fired from Su-30MKI",
            "Philippines receives second battery",
            "Undated analysis",
        ]
        assert all(a.region == "IN" for a in articles)

    def test_fields(self) -> None:
        first = parse_rss(RSS)[0]
        assert first.source == "The Hindu"
        assert first.link == "https://news.example/brahmos-su30"
        assert first.published_at == datetime(2026, 3, 2, 8, 30, tzinfo=UTC)
        assert first.excerpt.startswith("BrahMos test-fired")
        assert "<a" not in first.excerpt

    def test_missing_source_uses_default(self) -> None:
        second = parse_rss(RSS)[1]
        assert second.source == DEFAULT_SOURCE
        assert second.published_at == datetime(2026, 3, 3, 10, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        assert second.excerpt == ""

    def test_unparseable_date_is_none(self) -> None:
        assert parse_rss(RSS)[2].published_at is None

    def test_max_results(self) -> None:
        assert len(parse_rss(RSS, max_results=1)) == 1

    def test_excerpt_truncated(self) -> None:
        xml = f"<rss><channel><item><title>Long</title><description>{'word ' * 100}</description></item></channel></rss>"
        assert len(parse_rss(xml)[0].excerpt) == EXCERPT_LENGTH

    def test_empty_feed(self) -> None:
        assert parse_rss("<rss><channel></channel></rss>") == []


class TestGoogleNewsRSSFeed:
    def test_params_carry_region_and_language(self) -> None:
        params = GoogleNewsRSSFeed(lang="en").params("T-90 military", "in")
        assert params == {"q": "T-90 military", "hl": "en-IN", "gl": "IN", "ceid": "IN:en"}

    async def test_fetch(self, monkeypatch: pytest.MonkeyPatch) -> None:
        captured: dict = {}
        mock_response = MagicMock()
        mock_response.text = RSS
        mock_response.raise_for_status = MagicMock()

        async def mock_get(self, url, params=None):
            captured["url"] = url
            captured["params"] = params
            return mock_response

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        articles = await GoogleNewsRSSFeed().fetch("BrahMos", region="fr", max_results=2)

        assert captured["url"] == GOOGLE_NEWS_RSS_URL
        assert captured["params"]["gl"] == "FR"
        assert len(articles) == 2
        assert articles[0].region == "FR"

    async def test_fetch_raises_on_http_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        request = httpx.Request("GET", GOOGLE_NEWS_RSS_URL)

        async def mock_get(self, url, params=None):
            return httpx.Response(503, request=request)

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        with pytest.raises(httpx.HTTPStatusError):
            await GoogleNewsRSSFeed().fetch("BrahMos", region="US")
