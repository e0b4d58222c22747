"""Configuration module for equipment intelligence.

Component factories live in ``equipment_intel.config.factory``; they import
the browser and pipeline layers, which themselves depend on these models.
"""

from equipment_intel.config.loader import get_default_config_path, load_config, load_selector_profile
from equipment_intel.config.models import (
    BrowserConfig,
    BrowserIdentity,
    CacheConfig,
    GateSelectors,
    GNewsFeedConfig,
    GoogleNewsFeedConfig,
    IntelConfig,
    LoggingConfig,
    MemoryCacheConfig,
    NewsConfig,
    NewsFeedConfig,
    NoCacheConfig,
    NormalizerConfig,
    ScraperConfig,
    SelectorProfile,
    TimingConfig,
    Viewport,
)

__all__ = [
    "BrowserConfig",
    "BrowserIdentity",
    "CacheConfig",
    "GNewsFeedConfig",
    "GateSelectors",
    "GoogleNewsFeedConfig",
    "IntelConfig",
    "LoggingConfig",
    "MemoryCacheConfig",
    "NewsConfig",
    "NewsFeedConfig",
    "NoCacheConfig",
    "NormalizerConfig",
    "ScraperConfig",
    "SelectorProfile",
    "TimingConfig",
    "Viewport",
    "get_default_config_path",
    "load_config",
    "load_selector_profile",
]
