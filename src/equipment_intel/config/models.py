"""Pydantic configuration models for equipment intelligence components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from equipment_intel.normalize import reference

# ============================================================
# Target-site selectors
# ============================================================


class GateSelectors(BaseModel):
    """Selectors for the disclaimer gate, in dismissal-strategy order."""

    root: str = ".disclaimer-modal"
    confirm_button: str = ".disclaimer-modal .button-area button"
    id_pattern: str = '.disclaimer-modal button[id*="disclaimer"]'
    class_pattern: str = ".disclaimer-modal button.btn.disclaimer-button"
    affirmative_labels: list[str] = Field(default_factory=lambda: ["CONFIRM", "I AGREE", "ACCEPT"])

    model_config = {"frozen": True}


class SelectorProfile(BaseModel):
    """Versioned structural selectors for one revision of the target site's markup.

    Every list is in priority order. Profiles live in ``configs/selectors/``
    and can be swapped without touching the state machines.
    """

    version: str = "odin-2025-12"
    search_url_template: str = "https://odin.tradoc.army.mil/Search/WEG/{query}"
    gate: GateSelectors = Field(default_factory=GateSelectors)

    results_container: list[str] = Field(
        default_factory=lambda: [".weg-search-results", ".search-results", ".asset-card", ".weg-card"]
    )
    cards: list[str] = Field(default_factory=lambda: [".weg-card", ".asset-card", '[class*="card"]'])
    card_title: list[str] = Field(default_factory=lambda: [".asset-title", "h3", ".title", ".card-title"])
    card_category: list[str] = Field(default_factory=lambda: [".asset-type", ".type", ".category"])
    card_preview: list[str] = Field(default_factory=lambda: [".description", ".preview", "p"])
    card_image: list[str] = Field(default_factory=lambda: ["img"])
    card_activation: list[str] = Field(
        default_factory=lambda: ["button", "a", ".card-link", '[class*="clickable"]']
    )

    overlay_root: str = ".asset-detail-modal"
    overlay_title: list[str] = Field(
        default_factory=lambda: [".section-header h1", ".section-header h2", "h1", "h2"]
    )
    overlay_hero_image: list[str] = Field(default_factory=lambda: [".left img", "img"])
    overlay_notes: list[str] = Field(default_factory=lambda: [".notes"])
    overlay_close: list[str] = Field(
        default_factory=lambda: [
            ".asset-detail-modal .section-header button",
            '.modal button[data-dismiss="modal"]',
            ".modal .close",
            ".modal-close",
            "button.close",
            '[aria-label="Close"]',
        ]
    )
    overlay_backdrop: list[str] = Field(
        default_factory=lambda: [".modal-backdrop", ".cdk-overlay-backdrop", ".asset-detail-modal"]
    )

    tab_buttons: list[str] = Field(
        default_factory=lambda: [
            ".asset-detail .right .asset-tabs .container > div button",
            ".asset-tabs button",
            '[role="tab"]',
        ]
    )
    tab_content: list[str] = Field(
        default_factory=lambda: [
            ".asset-detail .right .details.element .content",
            ".details.element .content",
            '[role="tabpanel"]',
        ]
    )
    kv_row: list[str] = Field(
        default_factory=lambda: [".flex-grid-row", '[class*="grid-row"]', ".specification-row", ".spec-item"]
    )
    kv_label: list[str] = Field(default_factory=lambda: [".label", "dt", ".spec-label"])
    kv_value: list[str] = Field(default_factory=lambda: [".value", "dd", ".spec-value"])

    model_config = {"frozen": True}


# ============================================================
# Browser Configs
# ============================================================


class Viewport(BaseModel):
    """Fixed viewport for every page."""

    width: int = 1920
    height: int = 1080

    model_config = {"frozen": True}


class BrowserIdentity(BaseModel):
    """Identity presented to the target site."""

    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    locale: str = "en-US"
    extra_headers: dict[str, str] = Field(
        default_factory=lambda: {"Accept-Language": "en-US,en;q=0.9"}
    )

    model_config = {"frozen": True}


class BrowserConfig(BaseModel):
    """Configuration for the browser session controller."""

    headless: bool = True
    launch_args: list[str] = Field(
        default_factory=lambda: [
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-blink-features=AutomationControlled",
        ]
    )
    viewport: Viewport = Field(default_factory=Viewport)
    identity: BrowserIdentity = Field(default_factory=BrowserIdentity)
    default_timeout_ms: int = 30000

    model_config = {"frozen": True}


# ============================================================
# Scraper Configs
# ============================================================


class TimingConfig(BaseModel):
    """Bounded waits and settle intervals, in milliseconds."""

    navigation_timeout_ms: int = 30000
    post_navigation_settle_ms: int = 2000
    gate_timeout_ms: int = 5000
    gate_settle_ms: int = 1500
    results_timeout_ms: int = 10000
    overlay_timeout_ms: int = 5000
    overlay_settle_ms: int = 1500
    tab_settle_ms: int = 2000
    close_settle_ms: int = 1000

    model_config = {"frozen": True}


class ScraperConfig(BaseModel):
    """Configuration for the browser extraction half of a query."""

    max_cards: int = 10
    selectors: SelectorProfile = Field(default_factory=SelectorProfile)
    timing: TimingConfig = Field(default_factory=TimingConfig)

    model_config = {"frozen": True}


# ============================================================
# Normalizer Config
# ============================================================


class NormalizerConfig(BaseModel):
    """Reference data and merge policy for the record normalizer."""

    merge_all_cards: bool = False
    operator_nations: list[str] = Field(default_factory=lambda: list(reference.OPERATOR_NATIONS))
    variant_label_words: list[str] = Field(
        default_factory=lambda: list(reference.VARIANT_LABEL_WORDS)
    )
    icon_url_patterns: list[str] = Field(default_factory=lambda: list(reference.ICON_URL_PATTERNS))

    model_config = {"frozen": True}


# ============================================================
# News Configs
# ============================================================


class GoogleNewsFeedConfig(BaseModel):
    """Configuration for the Google News RSS feed."""

    type: Literal["google_rss"] = "google_rss"
    lang: str = "en"
    timeout_seconds: float = 10.0

    model_config = {"frozen": True}


class GNewsFeedConfig(BaseModel):
    """Configuration for the GNews API feed."""

    type: Literal["gnews"] = "gnews"
    lang: str = "en"
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


NewsFeedConfig = Annotated[
    GoogleNewsFeedConfig | GNewsFeedConfig,
    Field(discriminator="type"),
]


class NewsConfig(BaseModel):
    """Configuration for the news aggregator."""

    feed: GoogleNewsFeedConfig | GNewsFeedConfig = Field(
        default_factory=GoogleNewsFeedConfig, discriminator="type"
    )
    context_phrases: list[str] = Field(
        default_factory=lambda: ["military", "defense", "weapon system"]
    )
    regions: list[str] = Field(default_factory=lambda: ["US", "IN", "GB", "AU", "FR"])
    default_region: str = "US"
    max_concurrency: int = 4
    results_per_fetch: int = 5
    max_results: int = 15

    model_config = {"frozen": True}


# ============================================================
# Cache Configs
# ============================================================


class MemoryCacheConfig(BaseModel):
    """In-process TTL cache for query results."""

    type: Literal["memory"] = "memory"
    ttl_seconds: float = 3600.0
    max_entries: int = 256

    model_config = {"frozen": True}


class NoCacheConfig(BaseModel):
    """Disable result caching."""

    type: Literal["none"] = "none"

    model_config = {"frozen": True}


CacheConfig = Annotated[
    MemoryCacheConfig | NoCacheConfig,
    Field(discriminator="type"),
]


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for per-query run logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class IntelConfig(BaseModel):
    """Root configuration for equipment intelligence."""

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    news: NewsConfig = Field(default_factory=NewsConfig)
    cache: MemoryCacheConfig | NoCacheConfig = Field(
        default_factory=MemoryCacheConfig, discriminator="type"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
