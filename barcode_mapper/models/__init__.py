"""Domain models for the barcode mapping tool."""

from .config_models import AppConfig, DatabaseConfig, MappingOptions, OutputMode
from .mapping_result import MappingResult, MatchKind, Row
from .pipeline_state import PipelineOutcome, PipelineStage, PipelineState

__all__ = [
    # Configuration models
    "AppConfig",
    "DatabaseConfig",
    "MappingOptions",
    "OutputMode",
    # Processing models
    "MappingResult",
    "MatchKind",
    "Row",
    "PipelineOutcome",
    "PipelineStage",
    "PipelineState",
]
