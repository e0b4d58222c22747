"""Record normalization."""

from equipment_intel.normalize.normalizer import RecordNormalizer, fold_specifications

__all__ = ["RecordNormalizer", "fold_specifications"]
