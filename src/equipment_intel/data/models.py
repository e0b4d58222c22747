"""Core data models for equipment intelligence."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from equipment_intel.report.generator import IntelligenceReport

UNKNOWN = "Unknown"
DEFAULT_EQUIPMENT_TYPE = "Military Equipment"


def normalize_query(query: str) -> str:
    """Case- and whitespace-insensitive form of a query, used for cache keys."""
    return re.sub(r"\s+", " ", query).strip().casefold()


# ============================================================
# State machines
# ============================================================


class GateState(StrEnum):
    """States of the one-shot disclaimer gate protocol."""

    UNKNOWN = "unknown"
    GATE_PRESENT = "gate_present"
    DISMISSED = "dismissed"
    ABSENT = "absent"


class ModalState(StrEnum):
    """States of a single card's detail overlay."""

    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    EXTRACTING = "extracting"
    CLOSING = "closing"
    CLOSED_VERIFIED = "closed_verified"
    STUCK = "stuck"


class DerivationStatus(StrEnum):
    """Whether a derived list (variants, operators) was searched for.

    ``NOT_SEARCHED`` means no source text was available (degraded record),
    ``NONE_FOUND`` means the text was searched and the list holds only the
    ``UNKNOWN`` sentinel.
    """

    NOT_SEARCHED = "not_searched"
    FOUND = "found"
    NONE_FOUND = "none_found"


class QueryStatus(StrEnum):
    """Overall outcome of one query."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


# ============================================================
# Extraction
# ============================================================


@dataclass(frozen=True)
class CardPreview:
    """Fields visible on a search-result card without opening it."""

    title: str = ""
    category: str = ""
    preview_text: str = ""
    preview_image_url: str = ""


@dataclass(frozen=True)
class TabContent:
    """Content extracted from one tab of a detail overlay."""

    tab_label: str
    free_text: str = ""
    raw_text: str = ""
    key_value_rows: tuple[tuple[str, str], ...] = ()
    tables: tuple[tuple[tuple[str, ...], ...], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.free_text or self.raw_text or self.key_value_rows or self.tables)

    @property
    def text(self) -> str:
        """Free text, falling back to the unmodified full text."""
        return self.free_text or self.raw_text


@dataclass(frozen=True)
class DetailExtraction:
    """Everything read from one opened detail overlay."""

    title: str = ""
    hero_image_url: str = ""
    notes: str = ""
    tabs: dict[str, TabContent] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.notes) and all(t.is_empty for t in self.tabs.values())


@dataclass(frozen=True)
class CardFailure:
    """A failure scoped to one card; ``kind`` is the error class name."""

    kind: str
    message: str


@dataclass(frozen=True)
class CardOutcome:
    """Result of driving one card through the detail overlay state machine."""

    index: int
    preview: CardPreview
    final_state: ModalState
    extraction: DetailExtraction | None = None
    transitions: tuple[ModalState, ...] = ()
    failures: tuple[CardFailure, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.extraction is not None and not self.extraction.is_empty


# ============================================================
# Canonical outputs
# ============================================================


@dataclass(frozen=True)
class EquipmentRecord:
    """Canonical record for one query."""

    name: str
    type: str = DEFAULT_EQUIPMENT_TYPE
    description: str = ""
    specifications: dict[str, str] = field(default_factory=dict)
    images: tuple[str, ...] = ()
    variants: tuple[str, ...] = ()
    operators: tuple[str, ...] = ()
    notes: str = ""
    variants_status: DerivationStatus = DerivationStatus.NOT_SEARCHED
    operators_status: DerivationStatus = DerivationStatus.NOT_SEARCHED


@dataclass(frozen=True)
class NewsArticle:
    """A news article returned by a feed."""

    title: str
    source: str
    link: str = ""
    published_at: datetime | None = None
    excerpt: str = ""
    region: str | None = None

    @property
    def identity(self) -> str:
        """Deduplication key: the link when present, else the exact title."""
        return self.link or self.title


@dataclass
class QueryResult:
    """What the caller receives for one query, in every outcome."""

    query: str
    region: str | None
    status: QueryStatus
    record: EquipmentRecord
    articles: list[NewsArticle] = field(default_factory=list)
    extraction_succeeded: bool = False
    error: str | None = None
    error_type: str | None = None
    card_outcomes: list[CardOutcome] = field(default_factory=list)
    news_fetches: int = 0
    failed_news_fetches: int = 0
    report: IntelligenceReport | None = None
    from_cache: bool = False
