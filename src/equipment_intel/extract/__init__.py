from equipment_intel.extract.parsing import parse_card_preview, parse_overlay_header, parse_tab_content
from equipment_intel.extract.strategies import (
    FieldStrategy,
    attr_of,
    first_match,
    image_strategies,
    parse_fragment,
    text_of,
    text_strategies,
)

__all__ = [
    "FieldStrategy",
    "attr_of",
    "first_match",
    "image_strategies",
    "parse_card_preview",
    "parse_fragment",
    "parse_overlay_header",
    "parse_tab_content",
    "text_of",
    "text_strategies",
]
