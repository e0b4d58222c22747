"""Data models for equipment intelligence."""

from equipment_intel.data.models import (
    DEFAULT_EQUIPMENT_TYPE,
    UNKNOWN,
    CardFailure,
    CardOutcome,
    CardPreview,
    DerivationStatus,
    DetailExtraction,
    EquipmentRecord,
    GateState,
    ModalState,
    NewsArticle,
    QueryResult,
    QueryStatus,
    TabContent,
    normalize_query,
)

__all__ = [
    "DEFAULT_EQUIPMENT_TYPE",
    "UNKNOWN",
    "CardFailure",
    "CardOutcome",
    "CardPreview",
    "DerivationStatus",
    "DetailExtraction",
    "EquipmentRecord",
    "GateState",
    "ModalState",
    "NewsArticle",
    "QueryResult",
    "QueryStatus",
    "TabContent",
    "normalize_query",
]
