"""Pipeline implementations for equipment intelligence."""

from equipment_intel.pipeline.base import Pipeline
from equipment_intel.pipeline.intel import IntelligencePipeline

__all__ = ["IntelligencePipeline", "Pipeline"]
