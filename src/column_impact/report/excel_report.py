"""Excel report generation for column impact results."""

import logging
from typing import Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError
from openpyxl.worksheet.worksheet import Worksheet

from ..analyzers.class_classifier import SourceUnit
from ..analyzers.impact_propagator import AnalysisResult
from ..analyzers.usage_detector import UsageRecord
from ..exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

CLASS_HEADERS = ["Class Name", "Package", "File Path", "Class Type", "Impact Reason",
                 "Usage Count", "Methods", "Fields", "Annotations"]
USAGE_HEADERS = ["Class Name", "Method/Field", "Usage Type", "Context", "Line #", "File Path"]
ENDPOINT_HEADERS = ["Controller", "Package", "API Endpoint", "Impact Reason"]

NO_ENDPOINTS = "No explicit endpoints found"
CONTEXT_LIMIT = 100
MAX_COLUMN_WIDTH = 60

_THIN = Side(style="thin")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
HEADER_FONT = Font(bold=True, color="FFFFFF", size=12)
HEADER_FILL = PatternFill(fill_type="solid", start_color="1F3864", end_color="1F3864")
TITLE_FONT = Font(bold=True, size=16, color="1F3864")


def join_limited(items: Sequence[str], max_items: int) -> str:
    """``a, b, c... (+2 more)``"""
    if not items:
        return ""
    text = ", ".join(items[:max_items])
    if len(items) > max_items:
        text += f"... (+{len(items) - max_items} more)"
    return text


def cell_value(value):
    """Strings with the control characters openpyxl refuses removed."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def truncate(text: Optional[str], max_length: int = CONTEXT_LIMIT) -> str:
    if text is None:
        return ""
    text = cell_value(text)
    return text[:max_length] + "..." if len(text) > max_length else text


class ExcelReportGenerator:
    """Writes an ``AnalysisResult`` as a multi-sheet workbook. Never mutates the result."""

    def generate_report(self, result: AnalysisResult, output_path: str):
        logger.info("Generating Excel report: %s", output_path)

        try:
            workbook = self.build_workbook(result)
            workbook.save(output_path)
        except (OSError, IllegalCharacterError) as e:
            logger.error("Error generating Excel report: %s", e)
            raise ReportGenerationError(f"Failed to generate Excel report: {e}", result) from e

        logger.info("Excel report generated successfully: %s", output_path)

    def build_workbook(self, result: AnalysisResult) -> Workbook:
        workbook = Workbook()
        workbook.remove(workbook.active)

        self._summary_sheet(workbook, result)
        self._class_sheet(workbook, f"Repositories ({len(result.repositories)})", result.repositories)
        self._class_sheet(workbook, f"Entities ({len(result.entities)})", result.entities)
        self._class_sheet(workbook, f"Services ({len(result.services)})", result.services)
        self._class_sheet(workbook, f"Controllers ({len(result.controllers)})", result.controllers)
        self._usage_sheet(workbook, result.usages)
        self._endpoint_sheet(workbook, result.controllers)
        return workbook

    def _summary_sheet(self, workbook: Workbook, result: AnalysisResult):
        ws = workbook.create_sheet("Summary")

        ws.append(["Code Impact Analysis Report"])
        ws["A1"].font = TITLE_FONT
        ws.merge_cells("A1:D1")
        ws.append([])

        self._section(ws, "Analysis Details")
        self._info_rows(ws, [
            ("Analysis Date:", result.timestamp.strftime("%Y-%m-%d %H:%M:%S")),
            ("Project Path:", result.project_path),
            ("Column Analyzed:", result.column_name),
            ("Analysis Time:", f"{result.elapsed_millis} ms"),
        ])
        ws.append([])

        self._section(ws, "Impact Summary")
        self._info_rows(ws, [
            ("Repositories", len(result.repositories)),
            ("Entities", len(result.entities)),
            ("Services", len(result.services)),
            ("Controllers", len(result.controllers)),
            ("Total Usages", result.total_usages),
            ("Total Classes", result.total_impacted_classes),
        ])

        if result.classes_by_role:
            ws.append([])
            self._section(ws, "Classes Scanned")
            self._info_rows(ws, sorted(result.classes_by_role.items()))

        self._autosize(ws, min_row=2)

    def _class_sheet(self, workbook: Workbook, title: str, units: List[SourceUnit]):
        rows = [
            [
                unit.name,
                unit.package_path,
                unit.short_file_path,
                unit.role.value,
                unit.impact_reason or "",
                unit.usage_count,
                join_limited(unit.methods, 3),
                join_limited(unit.fields, 3),
                join_limited(unit.annotations, 5),
            ]
            for unit in units
        ]
        self._table(workbook.create_sheet(title), CLASS_HEADERS, rows)

    def _usage_sheet(self, workbook: Workbook, usages: List[UsageRecord]):
        rows = [
            [
                usage.unit_name,
                usage.member_name,
                usage.usage_kind.value,
                truncate(usage.context_text),
                usage.line_number,
                usage.file_path,
            ]
            for usage in usages
        ]
        self._table(workbook.create_sheet(f"Usage Details ({len(usages)})"), USAGE_HEADERS, rows)

    def _endpoint_sheet(self, workbook: Workbook, controllers: List[SourceUnit]):
        rows = []
        for controller in controllers:
            reason = controller.impact_reason or ""
            if not controller.routes:
                rows.append([controller.name, controller.package_path, NO_ENDPOINTS, reason])
            for route in controller.routes:
                rows.append([controller.name, controller.package_path, route, reason])
        self._table(workbook.create_sheet("API Endpoints"), ENDPOINT_HEADERS, rows)

    def _table(self, ws: Worksheet, headers: List[str], rows: List[list]):
        ws.append(headers)
        for cell in ws[1]:
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.border = _BORDER
            cell.alignment = Alignment(horizontal="center", vertical="center")

        for row in rows:
            ws.append([cell_value(value) for value in row])
        for row in ws.iter_rows(min_row=2):
            for cell in row:
                cell.border = _BORDER
                cell.alignment = Alignment(vertical="top", wrap_text=True)

        ws.freeze_panes = "A2"
        self._autosize(ws)

    def _section(self, ws: Worksheet, title: str):
        ws.append([title])
        cell = ws.cell(row=ws.max_row, column=1)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL

    def _info_rows(self, ws: Worksheet, pairs):
        for label, value in pairs:
            ws.append([label, cell_value(value)])
            for cell in ws[ws.max_row]:
                cell.border = _BORDER
                cell.alignment = Alignment(vertical="top", wrap_text=True)

    def _autosize(self, ws: Worksheet, min_row: int = 1):
        widths: Dict[int, int] = {}
        for row in ws.iter_rows(min_row=min_row, values_only=True):
            for i, value in enumerate(row, start=1):
                text = "" if value is None else str(value)
                widths[i] = max(widths.get(i, 0), len(text))
        for i, width in widths.items():
            ws.column_dimensions[get_column_letter(i)].width = min(max(10, width + 2), MAX_COLUMN_WIDTH)
