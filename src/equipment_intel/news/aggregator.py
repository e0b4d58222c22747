"""Concurrent, failure-isolated news aggregation for one query."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from equipment_intel.data import NewsArticle
from equipment_intel.errors import NewsFetchFailure
from equipment_intel.news.base import NewsFeed
from equipment_intel.run_logger import RunLogger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchRequest:
    """One feed call in the fetch plan."""

    text: str
    region: str


@dataclass
class NewsResult:
    """Aggregated articles plus fetch accounting."""

    articles: list[NewsArticle] = field(default_factory=list)
    fetches: int = 0
    failed_fetches: int = 0


@dataclass(frozen=True)
class NewsSummary:
    """Summary statistics over an article list."""

    total: int
    sources: tuple[str, ...]
    oldest: datetime | None
    newest: datetime | None
    by_source: dict[str, int]


class NewsAggregator:
    """Fan out news fetches for a query and merge the results.

    Flow:
    1. Build the fetch plan: one fetch per context phrase, one per region
    2. Run every fetch concurrently, bounded by a semaphore
    3. Deduplicate by article identity, newest first, cap the total

    Args:
        feed: News feed to query.
        context_phrases: Phrases appended to the query, e.g. "military".
        regions: Region codes searched with the bare query.
        default_region: Region for the context-phrase fetches when the
            caller gives none.
        max_concurrency: Maximum outstanding feed requests.
        results_per_fetch: Articles requested per fetch.
        max_results: Cap applied after sorting.
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        feed: NewsFeed,
        *,
        context_phrases: Sequence[str] = ("military", "defense", "weapon system"),
        regions: Sequence[str] = ("US", "IN", "GB", "AU", "FR"),
        default_region: str = "US",
        max_concurrency: int = 4,
        results_per_fetch: int = 5,
        max_results: int = 15,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._feed = feed
        self._phrases = list(context_phrases)
        self._regions = [r.upper() for r in regions]
        self._default_region = default_region.upper()
        self._max_concurrency = max(1, max_concurrency)
        self._per_fetch = results_per_fetch
        self._max_results = max_results
        self._run_logger = run_logger

    def plan(self, query: str, region: str | None = None) -> list[FetchRequest]:
        query = query.strip()
        scoped = (region or self._default_region).upper()
        requests = [FetchRequest(f"{query} {phrase}", scoped) for phrase in self._phrases]
        requests.extend(FetchRequest(query, r) for r in self._regions)
        return requests

    async def aggregate(self, query: str, region: str | None = None) -> NewsResult:
        """Fetch, deduplicate, and order news for ``query``.

        Never raises for a failed fetch: it is logged, counted, and
        contributes no articles.
        """
        requests = self.plan(query, region)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(request: FetchRequest) -> list[NewsArticle]:
            async with semaphore:
                return await self._feed.fetch(
                    request.text, region=request.region, max_results=self._per_fetch
                )

        t0 = time.monotonic()
        results = await asyncio.gather(*(bounded(r) for r in requests), return_exceptions=True)

        collected: list[NewsArticle] = []
        failed = 0
        for request, result in zip(requests, results, strict=True):
            if isinstance(result, BaseException):
                failed += 1
                failure = NewsFetchFailure(f"{request.text!r} [{request.region}]: {result}")
                logger.warning(f"Error fetching news: {failure}")
                continue
            collected.extend(result)

        articles = order_articles(dedupe_articles(collected))[: self._max_results]
        logger.info(
            "News: %d articles from %d/%d fetches",
            len(articles),
            len(requests) - failed,
            len(requests),
        )

        if self._run_logger:
            self._run_logger.log_stage(
                stage="news",
                component=type(self._feed).__name__,
                input_data=requests,
                output_data={"articles": articles, "failed_fetches": failed},
                duration_seconds=time.monotonic() - t0,
            )

        return NewsResult(articles=articles, fetches=len(requests), failed_fetches=failed)


def dedupe_articles(articles: Sequence[NewsArticle]) -> list[NewsArticle]:
    """Keep the first article seen for each identity."""
    seen: set[str] = set()
    unique: list[NewsArticle] = []
    for article in articles:
        if article.identity not in seen:
            seen.add(article.identity)
            unique.append(article)
    return unique


def order_articles(articles: Sequence[NewsArticle]) -> list[NewsArticle]:
    """Newest first; undated articles last, in their original order."""
    dated = [a for a in articles if a.published_at is not None]
    undated = [a for a in articles if a.published_at is None]
    dated.sort(key=lambda a: a.published_at, reverse=True)  # type: ignore[arg-type,return-value]
    return dated + undated


def summarize_news(articles: Sequence[NewsArticle]) -> NewsSummary:
    """Totals, distinct sources, date range, and per-source counts."""
    counts = Counter(a.source for a in articles)
    dates = sorted(a.published_at for a in articles if a.published_at is not None)
    return NewsSummary(
        total=len(articles),
        sources=tuple(counts),
        oldest=dates[0] if dates else None,
        newest=dates[-1] if dates else None,
        by_source=dict(counts),
    )
