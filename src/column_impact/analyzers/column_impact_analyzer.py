"""Column Impact Analyzer - Entry point that validates input and orchestrates analysis and reporting."""

import logging
import os
import re
from datetime import datetime
from typing import Optional

from ..config import AnalysisConfiguration
from ..exceptions import InvalidInput, ReportGenerationError
from .impact_propagator import AnalysisResult, ImpactPropagator

logger = logging.getLogger(__name__)

REPORT_EXTENSION = ".xlsx"
_UNSAFE_FILE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def validate_project_path(project_path: Optional[str]):
    if project_path is None or not str(project_path).strip():
        raise InvalidInput("Project path cannot be empty")
    if not os.path.exists(project_path):
        raise InvalidInput(f"Project path does not exist: {project_path}")
    if not os.path.isdir(project_path):
        raise InvalidInput(f"Project path is not a directory: {project_path}")


def validate_column_name(column_name: Optional[str]):
    if column_name is None or not column_name.strip():
        raise InvalidInput("Column name cannot be empty")


def validate_output_file(output_file: Optional[str]):
    if output_file is None or not str(output_file).strip():
        raise InvalidInput("Output file path cannot be empty")
    if not str(output_file).lower().endswith(REPORT_EXTENSION):
        raise InvalidInput(f"Output file must have {REPORT_EXTENSION} extension")
    parent = os.path.dirname(os.path.abspath(output_file))
    if not os.path.isdir(parent):
        raise InvalidInput(f"Output directory does not exist: {parent}")


class ColumnImpactAnalyzer:
    """Main orchestrator for column impact analysis."""

    def __init__(self, configuration: Optional[AnalysisConfiguration] = None):
        self.config = configuration or AnalysisConfiguration()
        self.propagator = ImpactPropagator(self.config)

    def analyze(self, project_path: str, column_name: str) -> AnalysisResult:
        """Analyze without writing a report. Raises ``InvalidInput`` for bad arguments."""
        validate_project_path(project_path)
        validate_column_name(column_name)
        return self.propagator.analyze(str(project_path), column_name.strip())

    def analyze_and_report(self, project_path: str, column_name: str,
                           output_file: str) -> AnalysisResult:
        """Analyze and write the Excel report to ``output_file``.

        Raises ``InvalidInput`` before any work starts, and
        ``ReportGenerationError`` if the report cannot be written; in that
        case the analysis result is still attached to the exception.
        """
        from ..report.excel_report import ExcelReportGenerator

        validate_project_path(project_path)
        validate_column_name(column_name)
        validate_output_file(output_file)

        logger.info("Project Path: %s", project_path)
        logger.info("Column Name: %s", column_name)
        logger.info("Output File: %s", output_file)

        result = self.propagator.analyze(str(project_path), column_name.strip())
        try:
            ExcelReportGenerator().generate_report(result, str(output_file))
        except ReportGenerationError as e:
            e.result = result
            raise
        return result

    @staticmethod
    def default_output_file_name(column_name: str, now: Optional[datetime] = None) -> str:
        """``impact-analysis-<column>-<yyyyMMdd-HHmmss>.xlsx``"""
        timestamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
        safe_column = _UNSAFE_FILE_CHARS.sub("_", column_name)
        return f"impact-analysis-{safe_column}-{timestamp}{REPORT_EXTENSION}"


def analyze(project_path: str, column_name: str,
            configuration: Optional[AnalysisConfiguration] = None) -> AnalysisResult:
    """Trace which classes are impacted if ``column_name`` changes."""
    return ColumnImpactAnalyzer(configuration).analyze(project_path, column_name)
