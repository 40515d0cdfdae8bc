"""Report writers."""

from .excel_report import ExcelReportGenerator

__all__ = ["ExcelReportGenerator"]
