from __future__ import annotations

import logging
import os
from datetime import UTC, datetime

import httpx

from equipment_intel.data import NewsArticle
from equipment_intel.url import extract_domain

logger = logging.getLogger(__name__)

GNEWS_API_URL = "https://gnews.io/api/v4/search"


class GNewsFeed:
    """Search for news articles using the GNews API.

    Args:
        api_key: GNews API key (defaults to GNEWS_API_KEY env var).
        lang: Language code for results (default: "en").
        timeout_seconds: Per-request timeout.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        lang: str = "en",
        timeout_seconds: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("GNEWS_API_KEY")
        if not self._api_key:
            raise ValueError("GNews API key required. Pass api_key or set GNEWS_API_KEY env var.")
        self._lang = lang
        self._timeout = timeout_seconds

    async def fetch(self, text: str, *, region: str, max_results: int = 5) -> list[NewsArticle]:
        params: dict[str, str | int] = {
            "q": text,
            "lang": self._lang,
            "country": region.lower(),
            "max": min(max_results, 100),  # GNews max is 100
            "apikey": self._api_key,  # type: ignore[dict-item]
        }

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(GNEWS_API_URL, params=params)
            response.raise_for_status()
            data = response.json()

        articles: list[NewsArticle] = []
        for item in data.get("articles", []):
            url = item.get("url", "")
            articles.append(
                NewsArticle(
                    title=item.get("title", ""),
                    link=url,
                    source=(item.get("source") or {}).get("name") or extract_domain(url),
                    published_at=_parse_timestamp(item.get("publishedAt")),
                    excerpt=(item.get("description") or "")[:200],
                    region=region.upper(),
                )
            )
        return articles


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        # GNews returns e.g. "2026-01-15T10:30:00Z"
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable publishedAt %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
