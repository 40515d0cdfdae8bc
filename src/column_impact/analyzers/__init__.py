"""Layer classification, column usage detection and impact propagation."""

from .naming import (
    to_camel_case, to_pascal_case, to_snake_case,
    is_column_match, contains_column, method_name_references
)
from .class_classifier import ClassClassifier, LayerRole, SourceUnit, CLASSIFICATION_RULES
from .usage_detector import UsageDetector, UsageKind, UsageRecord
from .impact_propagator import ImpactPropagator, AnalysisResult
from .column_impact_analyzer import ColumnImpactAnalyzer, analyze

__all__ = [
    "to_camel_case", "to_pascal_case", "to_snake_case",
    "is_column_match", "contains_column", "method_name_references",
    "ClassClassifier", "LayerRole", "SourceUnit", "CLASSIFICATION_RULES",
    "UsageDetector", "UsageKind", "UsageRecord",
    "ImpactPropagator", "AnalysisResult",
    "ColumnImpactAnalyzer", "analyze",
]
