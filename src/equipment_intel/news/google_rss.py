from __future__ import annotations

import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx
from bs4 import BeautifulSoup

from equipment_intel.data import NewsArticle

logger = logging.getLogger(__name__)

GOOGLE_NEWS_RSS_URL = "https://news.google.com/rss/search"
DEFAULT_SOURCE = "Google News"
EXCERPT_LENGTH = 200

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
}


class GoogleNewsRSSFeed:
    """Search news through the Google News RSS endpoint.

    No API key is needed. Region and language are passed through the
    ``hl``, ``gl`` and ``ceid`` parameters.

    Args:
        lang: Language code for results (default: "en").
        timeout_seconds: Per-request timeout.
    """

    def __init__(self, *, lang: str = "en", timeout_seconds: float = 10.0) -> None:
        self._lang = lang
        self._timeout = timeout_seconds

    def params(self, text: str, region: str) -> dict[str, str]:
        region = region.upper()
        return {
            "q": text,
            "hl": f"{self._lang}-{region}",
            "gl": region,
            "ceid": f"{region}:{self._lang}",
        }

    async def fetch(self, text: str, *, region: str, max_results: int = 5) -> list[NewsArticle]:
        async with httpx.AsyncClient(timeout=self._timeout, headers=_HEADERS) as client:
            response = await client.get(GOOGLE_NEWS_RSS_URL, params=self.params(text, region))
            response.raise_for_status()
        return parse_rss(response.text, region=region.upper(), max_results=max_results)


def parse_rss(xml: str, *, region: str | None = None, max_results: int | None = None) -> list[NewsArticle]:
    """Parse RSS ``<item>`` elements into articles, in feed order."""
    soup = BeautifulSoup(xml, "xml")
    articles: list[NewsArticle] = []
    for item in soup.find_all("item"):
        if max_results is not None and len(articles) >= max_results:
            break
        title = _child_text(item, "title")
        if not title:
            continue
        articles.append(
            NewsArticle(
                title=title,
                source=_child_text(item, "source") or DEFAULT_SOURCE,
                link=_child_text(item, "link"),
                published_at=_parse_pub_date(_child_text(item, "pubDate")),
                excerpt=_clean_description(_child_text(item, "description"))[:EXCERPT_LENGTH],
                region=region,
            )
        )
    return articles


def _child_text(item, name: str) -> str:
    child = item.find(name)
    return child.get_text().strip() if child else ""


def _parse_pub_date(value: str) -> datetime | None:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable pubDate %r", value)
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _clean_description(html: str) -> str:
    # Google wraps descriptions in an anchor plus a font tag naming the source.
    if not html:
        return ""
    return BeautifulSoup(html, "html.parser").get_text(" ", strip=True)
