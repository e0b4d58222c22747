"""Default pipeline: browser extraction and news in parallel, then fold."""

import asyncio
import logging
import time
from datetime import UTC, datetime

from equipment_intel.browser.scraper import EquipmentScraper, ScrapeResult
from equipment_intel.cache import CachedIntel, RecordCache, cache_key
from equipment_intel.data import CardOutcome, QueryResult, QueryStatus
from equipment_intel.errors import CardExtractionEmpty, ExtractionAborted, IntelError
from equipment_intel.news.aggregator import NewsAggregator, NewsResult
from equipment_intel.normalize.normalizer import RecordNormalizer
from equipment_intel.report.generator import generate_report
from equipment_intel.run_logger import RunLogger

logger = logging.getLogger(__name__)


class IntelligencePipeline:
    """Pipeline composed of a scraper, a normalizer, and a news aggregator.

    Flow:
    1. Return a cached record and news if present
    2. Scrape the target site and aggregate news concurrently
    3. Fold card outcomes into one record (or a query-only fallback)
    4. Optionally render the report

    Scraper errors never escape: they degrade the result and are reported
    through ``error`` and ``error_type``.

    Args:
        scraper: Browser extraction for one query.
        normalizer: Folds card outcomes into a record.
        aggregator: News fan-out for the same query.
        cache: Optional injected result cache.
        cache_ttl: Seconds a successful result stays cached.
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        scraper: EquipmentScraper,
        normalizer: RecordNormalizer,
        aggregator: NewsAggregator,
        *,
        cache: RecordCache | None = None,
        cache_ttl: float = 3600.0,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._scraper = scraper
        self._normalizer = normalizer
        self._aggregator = aggregator
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._run_logger = run_logger

    async def run(
        self,
        query: str,
        *,
        region: str | None = None,
        include_report: bool = False,
    ) -> QueryResult:
        region = region.upper() if region else None
        key = cache_key(query, region)

        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.info("Cache hit for %s", key)
                result = QueryResult(
                    query=query,
                    region=region,
                    status=QueryStatus.SUCCESS,
                    record=cached.record,
                    articles=list(cached.articles),
                    extraction_succeeded=True,
                    from_cache=True,
                )
                if include_report:
                    result.report = generate_report(
                        result.record, result.articles, generated_at=datetime.now(tz=UTC)
                    )
                return result

        if self._run_logger:
            self._run_logger.start_run(query, region)

        (scrape, scrape_error), news = await asyncio.gather(
            self._scrape(query),
            self._aggregator.aggregate(query, region),
        )

        t0 = time.monotonic()
        outcomes: list[CardOutcome] = scrape.outcomes if scrape else []
        if scrape is None:
            record = self._normalizer.fallback(query)
        else:
            record = self._normalizer.normalize(query, outcomes)
        extraction_succeeded = any(o.succeeded for o in outcomes)
        if scrape_error is None and not extraction_succeeded:
            scrape_error = CardExtractionEmpty(f"None of {len(outcomes)} cards yielded content")
        self._log("normalize", "RecordNormalizer", outcomes, record, t0)

        result = QueryResult(
            query=query,
            region=region,
            status=_status(extraction_succeeded, outcomes, news),
            record=record,
            articles=news.articles,
            extraction_succeeded=extraction_succeeded,
            card_outcomes=outcomes,
            news_fetches=news.fetches,
            failed_news_fetches=news.failed_fetches,
        )
        if scrape_error is not None:
            result.error = str(scrape_error)
            result.error_type = type(scrape_error).__name__

        if include_report:
            t0 = time.monotonic()
            result.report = generate_report(record, result.articles, generated_at=datetime.now(tz=UTC))
            self._log("report", "generate_report", None, result.report.section_keys, t0)

        if self._cache is not None and extraction_succeeded:
            self._cache.put(key, CachedIntel(record=record, articles=tuple(result.articles)), self._cache_ttl)

        logger.info(
            "Query %r finished: %s (%d cards, %d articles)",
            query,
            result.status,
            len(outcomes),
            len(result.articles),
        )
        if self._run_logger:
            self._run_logger.finish_run(
                status=result.status,
                card_count=len(outcomes),
                article_count=len(result.articles),
                error=result.error,
            )
        return result

    async def _scrape(self, query: str) -> tuple[ScrapeResult | None, IntelError | None]:
        try:
            return (await self._scraper.scrape(query), None)
        except IntelError as e:
            logger.warning(f"Extraction failed for {query!r}: {type(e).__name__}: {e}")
            return (None, e)
        except Exception as e:
            logger.exception(f"Extraction aborted for {query!r}")
            return (None, ExtractionAborted(f"{type(e).__name__}: {e}"))

    def _log(self, stage: str, component: str, input_data: object, output_data: object, t0: float) -> None:
        if self._run_logger:
            self._run_logger.log_stage(
                stage=stage,
                component=component,
                input_data=input_data,
                output_data=output_data,
                duration_seconds=time.monotonic() - t0,
            )


def _status(extraction_succeeded: bool, outcomes: list[CardOutcome], news: NewsResult) -> QueryStatus:
    card_failures = any(o.failures or not o.succeeded for o in outcomes)
    if extraction_succeeded and not card_failures and news.failed_fetches == 0:
        return QueryStatus.SUCCESS
    if extraction_succeeded or news.articles or outcomes:
        return QueryStatus.PARTIAL
    return QueryStatus.FAILED
