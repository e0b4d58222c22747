"""News feeds and aggregation."""

from equipment_intel.news.aggregator import (
    FetchRequest,
    NewsAggregator,
    NewsResult,
    NewsSummary,
    dedupe_articles,
    order_articles,
    summarize_news,
)
from equipment_intel.news.base import NewsFeed
from equipment_intel.news.gnews import GNewsFeed
from equipment_intel.news.google_rss import GoogleNewsRSSFeed, parse_rss

__all__ = [
    "FetchRequest",
    "GNewsFeed",
    "GoogleNewsRSSFeed",
    "NewsAggregator",
    "NewsFeed",
    "NewsResult",
    "NewsSummary",
    "dedupe_articles",
    "order_articles",
    "parse_rss",
    "summarize_news",
]
