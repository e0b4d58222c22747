"""Report generation."""

from equipment_intel.report.generator import (
    DISCLAIMER,
    GENERATED_PREFIX,
    PRIMARY_SOURCE,
    IntelligenceReport,
    ReportSection,
    SpecBucket,
    bucket_for,
    bucket_specifications,
    generate_report,
)

__all__ = [
    "DISCLAIMER",
    "GENERATED_PREFIX",
    "PRIMARY_SOURCE",
    "IntelligenceReport",
    "ReportSection",
    "SpecBucket",
    "bucket_for",
    "bucket_specifications",
    "generate_report",
]
