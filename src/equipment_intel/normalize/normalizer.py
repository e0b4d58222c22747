"""Fold per-card extractions into one canonical EquipmentRecord."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from equipment_intel.data import (
    DEFAULT_EQUIPMENT_TYPE,
    UNKNOWN,
    CardOutcome,
    DerivationStatus,
    DetailExtraction,
    EquipmentRecord,
)
from equipment_intel.normalize import reference

logger = logging.getLogger(__name__)


class RecordNormalizer:
    """Convert raw card outcomes into an EquipmentRecord.

    The first card with a non-empty extraction is the primary card. Other
    cards contribute their preview images always, and their extractions only
    when ``merge_all_cards`` is set.

    Args:
        operator_nations: Nation names searched for as operators.
        variant_label_words: Words that introduce a variant clause.
        icon_url_patterns: URL substrings marking decorative images.
        merge_all_cards: Fold every successful extraction, not just the primary.
    """

    def __init__(
        self,
        *,
        operator_nations: Sequence[str] = reference.OPERATOR_NATIONS,
        variant_label_words: Sequence[str] = reference.VARIANT_LABEL_WORDS,
        icon_url_patterns: Sequence[str] = reference.ICON_URL_PATTERNS,
        merge_all_cards: bool = False,
    ) -> None:
        self._nations = tuple(operator_nations)
        self._icon_patterns = tuple(p.lower() for p in icon_url_patterns)
        self._merge_all = merge_all_cards

        words = "|".join(re.escape(w) for w in variant_label_words)
        self._variant_re = re.compile(rf"\b(?:{words})s?:?\s*([^.\n]+)", re.IGNORECASE)
        self._nation_res = [(n, re.compile(rf"\b{re.escape(n)}\b")) for n in self._nations]

    def normalize(self, query: str, outcomes: Sequence[CardOutcome]) -> EquipmentRecord:
        """Build the record for ``query`` from the card outcomes, in card order."""
        successful = [o for o in outcomes if o.succeeded]
        if not successful:
            logger.info("No card yielded content for %r; building record from previews", query)
            return self._from_previews(query, outcomes)

        primary = successful[0]
        included = successful if self._merge_all else [primary]
        extractions = [o.extraction for o in included if o.extraction is not None]
        main = extractions[0]

        text = self._source_text(extractions)
        variants, variants_status = _with_sentinel(self.derive_variants(text))
        operators, operators_status = _with_sentinel(self.derive_operators(text))

        return EquipmentRecord(
            name=main.title or _first_preview_title(outcomes) or query.strip(),
            type=primary.preview.category or DEFAULT_EQUIPMENT_TYPE,
            description=_describe(main) or primary.preview.preview_text,
            specifications=fold_specifications(extractions),
            images=self._collect_images(
                [e.hero_image_url for e in extractions] + [o.preview.preview_image_url for o in outcomes]
            ),
            variants=variants,
            operators=operators,
            notes=main.notes,
            variants_status=variants_status,
            operators_status=operators_status,
        )

    def fallback(self, query: str) -> EquipmentRecord:
        """Record populated only from the query string."""
        return EquipmentRecord(name=query.strip())

    def derive_variants(self, text: str) -> list[str]:
        """Variant clauses in first-seen order, deduplicated case-insensitively."""
        seen: set[str] = set()
        variants: list[str] = []
        for match in self._variant_re.finditer(text):
            clause = match.group(1).strip()
            if not reference.VARIANT_CLAUSE_MIN < len(clause) < reference.VARIANT_CLAUSE_MAX:
                continue
            key = clause.casefold()
            if key not in seen:
                seen.add(key)
                variants.append(clause)
        return variants

    def derive_operators(self, text: str) -> list[str]:
        """Reference nations found as whole words, ordered by first occurrence."""
        found: list[tuple[int, int, str]] = []
        for order, (nation, pattern) in enumerate(self._nation_res):
            match = pattern.search(text)
            if match:
                found.append((match.start(), order, nation))
        found.sort()
        return list(dict.fromkeys(nation for _, _, nation in found))

    def _source_text(self, extractions: Iterable[DetailExtraction]) -> str:
        parts: list[str] = []
        for extraction in extractions:
            if extraction.notes:
                parts.append(extraction.notes)
            parts.extend(tab.text for tab in extraction.tabs.values() if tab.text)
        return "\n".join(parts)

    def _collect_images(self, urls: Iterable[str]) -> tuple[str, ...]:
        images: list[str] = []
        for url in urls:
            if not url or url in images:
                continue
            if any(p in url.lower() for p in self._icon_patterns):
                logger.debug("Dropping decorative image %s", url)
                continue
            images.append(url)
        return tuple(images)

    def _from_previews(self, query: str, outcomes: Sequence[CardOutcome]) -> EquipmentRecord:
        if not outcomes:
            return self.fallback(query)
        first = outcomes[0].preview
        return EquipmentRecord(
            name=_first_preview_title(outcomes) or query.strip(),
            type=first.category or DEFAULT_EQUIPMENT_TYPE,
            description=first.preview_text,
            images=self._collect_images(o.preview.preview_image_url for o in outcomes),
        )


def fold_specifications(extractions: Iterable[DetailExtraction]) -> dict[str, str]:
    """Merge key/value rows and two-cell table rows from every tab.

    Keys and values are trimmed, empty keys are dropped, and a later row
    overwrites an earlier one with the same key.
    """
    specs: dict[str, str] = {}
    for extraction in extractions:
        for tab in extraction.tabs.values():
            rows = list(tab.key_value_rows)
            for table in tab.tables:
                rows.extend((row[0], row[1]) for row in table if len(row) >= 2)
            for key, value in rows:
                key = key.strip()
                if key:
                    specs[key] = value.strip()
    return specs


def _with_sentinel(values: list[str]) -> tuple[tuple[str, ...], DerivationStatus]:
    if values:
        return (tuple(values), DerivationStatus.FOUND)
    return ((UNKNOWN,), DerivationStatus.NONE_FOUND)


def _describe(extraction: DetailExtraction) -> str:
    parts: list[str] = []
    if extraction.notes:
        parts.append(extraction.notes)
    for label, tab in extraction.tabs.items():
        if tab.text:
            parts.append(f"### {label}\n{tab.text}")
    return "\n\n".join(parts)


def _first_preview_title(outcomes: Iterable[CardOutcome]) -> str:
    return next((o.preview.title for o in outcomes if o.preview.title), "")
