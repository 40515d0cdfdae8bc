"""Column impact analysis for layered Java backends."""

from .analyzers import (
    AnalysisResult, ColumnImpactAnalyzer, LayerRole, SourceUnit,
    UsageKind, UsageRecord, analyze
)
from .config import AnalysisConfiguration
from .exceptions import (
    ColumnImpactError, FileParseError, FileReadError, InvalidInput, ReportGenerationError
)

__version__ = "0.1.0"

__all__ = [
    "analyze", "AnalysisResult", "ColumnImpactAnalyzer", "AnalysisConfiguration",
    "LayerRole", "SourceUnit", "UsageKind", "UsageRecord",
    "ColumnImpactError", "InvalidInput", "FileParseError", "FileReadError",
    "ReportGenerationError",
]
