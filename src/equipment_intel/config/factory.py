"""Factory functions to create components from configuration."""

from pathlib import Path

from equipment_intel.browser.scraper import EquipmentScraper
from equipment_intel.browser.session import SessionController
from equipment_intel.cache import InMemoryRecordCache, NoOpRecordCache, RecordCache
from equipment_intel.config.models import (
    GNewsFeedConfig,
    GoogleNewsFeedConfig,
    IntelConfig,
    MemoryCacheConfig,
    NewsConfig,
    NoCacheConfig,
    NormalizerConfig,
)
from equipment_intel.news.aggregator import NewsAggregator
from equipment_intel.news.base import NewsFeed
from equipment_intel.news.gnews import GNewsFeed
from equipment_intel.news.google_rss import GoogleNewsRSSFeed
from equipment_intel.normalize.normalizer import RecordNormalizer
from equipment_intel.pipeline.intel import IntelligencePipeline
from equipment_intel.run_logger import RunLogger


def create_feed(config: GoogleNewsFeedConfig | GNewsFeedConfig) -> NewsFeed:
    """Create a news feed from config.

    Uses explicit type matching rather than getattr.
    """
    if isinstance(config, GoogleNewsFeedConfig):
        return GoogleNewsRSSFeed(lang=config.lang, timeout_seconds=config.timeout_seconds)
    if isinstance(config, GNewsFeedConfig):
        return GNewsFeed(lang=config.lang, timeout_seconds=config.timeout_seconds)
    msg = f"Unknown feed config type: {type(config)}"
    raise ValueError(msg)


def create_cache(config: MemoryCacheConfig | NoCacheConfig) -> RecordCache:
    """Create a result cache from config."""
    if isinstance(config, MemoryCacheConfig):
        return InMemoryRecordCache(max_entries=config.max_entries)
    if isinstance(config, NoCacheConfig):
        return NoOpRecordCache()
    msg = f"Unknown cache config type: {type(config)}"
    raise ValueError(msg)


def create_aggregator(config: NewsConfig, run_logger: RunLogger | None = None) -> NewsAggregator:
    """Create a news aggregator from config."""
    return NewsAggregator(
        create_feed(config.feed),
        context_phrases=config.context_phrases,
        regions=config.regions,
        default_region=config.default_region,
        max_concurrency=config.max_concurrency,
        results_per_fetch=config.results_per_fetch,
        max_results=config.max_results,
        run_logger=run_logger,
    )


def create_normalizer(config: NormalizerConfig) -> RecordNormalizer:
    """Create a record normalizer from config."""
    return RecordNormalizer(
        operator_nations=config.operator_nations,
        variant_label_words=config.variant_label_words,
        icon_url_patterns=config.icon_url_patterns,
        merge_all_cards=config.merge_all_cards,
    )


def create_scraper(config: IntelConfig, run_logger: RunLogger | None = None) -> EquipmentScraper:
    """Create the browser scraper from config."""
    return EquipmentScraper(SessionController(config.browser), config.scraper, run_logger=run_logger)


def create_pipeline(config: IntelConfig, run_logger: RunLogger | None = None) -> IntelligencePipeline:
    """Create a pipeline from config."""
    ttl = config.cache.ttl_seconds if isinstance(config.cache, MemoryCacheConfig) else 0.0
    return IntelligencePipeline(
        scraper=create_scraper(config, run_logger=run_logger),
        normalizer=create_normalizer(config.normalizer),
        aggregator=create_aggregator(config.news, run_logger=run_logger),
        cache=create_cache(config.cache),
        cache_ttl=ttl,
        run_logger=run_logger,
    )


def create_from_config(
    config: IntelConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[IntelligencePipeline, RunLogger | None]:
    """Create a complete pipeline from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (pipeline, run_logger).
        run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    pipeline = create_pipeline(config, run_logger=run_logger)
    return (pipeline, run_logger)
