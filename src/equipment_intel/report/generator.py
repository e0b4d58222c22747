"""Render an EquipmentRecord and its news coverage as a sectioned report.

``generate_report`` is pure: identical inputs give an identical report. The
only time-dependent content is ``generated_at``, which renders on its own
line so golden-output comparisons can mask it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from equipment_intel.data import DerivationStatus, EquipmentRecord, NewsArticle
from equipment_intel.news.aggregator import summarize_news

GENERATED_PREFIX = "Generated: "
DISCLAIMER = (
    "This report is compiled from open sources and should be verified "
    "independently before operational use."
)
PRIMARY_SOURCE = "ODIN Worldwide Equipment Guide"


class SpecBucket(StrEnum):
    DIMENSIONS = "dimensions"
    PERFORMANCE = "performance"
    ARMAMENT = "armament"
    OTHER = "other"


# Checked in this order; the first bucket with a keyword in the key wins.
BUCKET_KEYWORDS: tuple[tuple[SpecBucket, tuple[str, ...]], ...] = (
    (
        SpecBucket.ARMAMENT,
        (
            "armament", "weapon", "gun", "cannon", "missile", "warhead", "ammunition",
            "caliber", "calibre", "rocket", "munition", "payload", "launcher", "torpedo", "bomb",
        ),
    ),
    (
        SpecBucket.PERFORMANCE,
        (
            "speed", "range", "altitude", "ceiling", "endurance", "engine", "power",
            "thrust", "climb", "fuel", "mobility", "radius", "acceleration",
        ),
    ),
    (
        SpecBucket.DIMENSIONS,
        (
            "length", "width", "height", "weight", "mass", "diameter", "wingspan",
            "span", "dimension", "draft", "beam", "displacement",
        ),
    ),
)

BUCKET_ORDER = (SpecBucket.DIMENSIONS, SpecBucket.PERFORMANCE, SpecBucket.ARMAMENT, SpecBucket.OTHER)


@dataclass(frozen=True)
class ReportSection:
    """One titled section; ``lines`` are rendered Markdown lines."""

    key: str
    title: str
    lines: tuple[str, ...]


@dataclass(frozen=True)
class IntelligenceReport:
    """Ordered report sections plus an isolated generation timestamp."""

    title: str
    sections: tuple[ReportSection, ...]
    generated_at: datetime | None = None

    @property
    def section_keys(self) -> list[str]:
        return [s.key for s in self.sections]

    def section(self, key: str) -> ReportSection | None:
        return next((s for s in self.sections if s.key == key), None)

    def render(self) -> str:
        """Render as Markdown."""
        out = [f"# {self.title}", ""]
        if self.generated_at is not None:
            out += [f"{GENERATED_PREFIX}{self.generated_at.isoformat()}", ""]
        for section in self.sections:
            out += [f"## {section.title}", "", *section.lines, ""]
        return "\n".join(out).rstrip() + "\n"


def bucket_for(key: str) -> SpecBucket:
    lowered = key.lower()
    for bucket, keywords in BUCKET_KEYWORDS:
        if any(word in lowered for word in keywords):
            return bucket
    return SpecBucket.OTHER


def bucket_specifications(specs: dict[str, str]) -> dict[SpecBucket, list[tuple[str, str]]]:
    """Group entries by bucket, in ``BUCKET_ORDER``, dropping empty buckets."""
    grouped: dict[SpecBucket, list[tuple[str, str]]] = {b: [] for b in BUCKET_ORDER}
    for key, value in specs.items():
        grouped[bucket_for(key)].append((key, value))
    return {b: rows for b, rows in grouped.items() if rows}


def generate_report(
    record: EquipmentRecord,
    articles: Sequence[NewsArticle],
    *,
    generated_at: datetime | None = None,
) -> IntelligenceReport:
    """Build the report for one record and its news coverage."""
    builders = (
        ("overview", "Overview", _overview),
        ("operational_intelligence", "Operational Intelligence", _operational),
        ("specifications", "Specifications", _specifications),
        ("capabilities", "Capabilities", _capabilities),
        ("assessment", "Assessment", _assessment),
        ("notes", "Notes", _notes),
        ("sources", "Sources", _sources),
    )
    sections = []
    for key, title, build in builders:
        lines = build(record, articles)
        if lines:
            sections.append(ReportSection(key=key, title=title, lines=tuple(lines)))
    return IntelligenceReport(
        title=f"Intelligence Report: {record.name}",
        sections=tuple(sections),
        generated_at=generated_at,
    )


# ---- sections ----------------------------------------------------------------


def _overview(record: EquipmentRecord, articles: Sequence[NewsArticle]) -> list[str]:
    lines = [f"- **Name:** {record.name}", f"- **Type:** {record.type}"]
    if record.images:
        lines.append(f"- **Image:** {record.images[0]}")
    if record.description:
        lines += ["", record.description]
    return lines


def _operational(record: EquipmentRecord, articles: Sequence[NewsArticle]) -> list[str]:
    lines: list[str] = []
    if record.operators_status is DerivationStatus.FOUND:
        lines.append(f"- **Operators:** {', '.join(record.operators)}")
    if record.variants_status is DerivationStatus.FOUND:
        lines.append("- **Variants:**")
        lines += [f"  - {v}" for v in record.variants]
    return lines


def _specifications(record: EquipmentRecord, articles: Sequence[NewsArticle]) -> list[str]:
    lines: list[str] = []
    for bucket, rows in bucket_specifications(record.specifications).items():
        if lines:
            lines.append("")
        lines += [f"### {bucket.value.title()}", ""]
        lines += [f"- **{key}:** {value}" for key, value in rows]
    return lines


def _capabilities(record: EquipmentRecord, articles: Sequence[NewsArticle]) -> list[str]:
    grouped = bucket_specifications(record.specifications)
    rows = grouped.get(SpecBucket.PERFORMANCE, []) + grouped.get(SpecBucket.ARMAMENT, [])
    return [f"- {key}: {value}" for key, value in rows]


def _assessment(record: EquipmentRecord, articles: Sequence[NewsArticle]) -> list[str]:
    if not articles:
        return []
    summary = summarize_news(articles)
    lines = [
        f"- Articles analysed: {summary.total}",
        f"- Distinct sources: {len(summary.sources)}",
        f"- Specifications extracted: {len(record.specifications)}",
    ]
    if record.operators_status is DerivationStatus.FOUND:
        lines.append(f"- Operators identified: {len(record.operators)}")
    if record.variants_status is DerivationStatus.FOUND:
        lines.append(f"- Variants identified: {len(record.variants)}")
    if summary.oldest and summary.newest:
        lines.append(f"- Coverage: {summary.oldest.date().isoformat()} to {summary.newest.date().isoformat()}")
    lines += ["", "### Recent Coverage", ""]
    for article in articles:
        date = article.published_at.date().isoformat() if article.published_at else "undated"
        lines.append(f"- {article.title} ({article.source}, {date})")
    return lines


def _notes(record: EquipmentRecord, articles: Sequence[NewsArticle]) -> list[str]:
    return [record.notes] if record.notes else []


def _sources(record: EquipmentRecord, articles: Sequence[NewsArticle]) -> list[str]:
    lines: list[str] = []
    if record.specifications or record.notes or record.description:
        lines.append(f"- {PRIMARY_SOURCE}")
    lines += [f"- [{a.title}]({a.link})" for a in articles if a.link]
    if not lines:
        return []
    return lines + ["", f"_{DISCLAIMER}_"]
