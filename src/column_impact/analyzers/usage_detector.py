"""Usage Detector - Finds references to a database column inside one Java file."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..exceptions import ColumnImpactError
from ..parsers.java_parser import JavaSourceFile, JavaSourceParser
from .naming import contains_column, is_column_match, method_name_references

logger = logging.getLogger(__name__)


class UsageKind(Enum):
    """Where a column reference was found."""
    FIELD = "FIELD"
    QUERY = "QUERY"
    PARAMETER = "PARAMETER"
    METHOD = "METHOD"
    METHOD_NAME = "METHOD_NAME"
    STRING = "STRING"
    COLUMN_ANNOTATION = "COLUMN_ANNOTATION"


@dataclass(frozen=True)
class UsageRecord:
    """A single located reference to the column."""
    unit_name: str
    member_name: str  # method or field name, or 'query' / 'annotation' / 'string-literal'
    usage_kind: UsageKind
    context_text: str
    line_number: int  # 1-based, 0 if unknown
    file_path: str

    @property
    def description(self) -> str:
        return f"{self.unit_name}:{self.line_number} - {self.usage_kind.value} in {self.member_name}"

    def to_dict(self) -> dict:
        return {
            'unit_name': self.unit_name,
            'member_name': self.member_name,
            'usage_kind': self.usage_kind.value,
            'context': self.context_text,
            'line_number': self.line_number,
            'file_path': self.file_path,
        }


COLUMN_ANNOTATION = "Column"
QUERY_ANNOTATIONS = ("Query", "NamedQuery", "Modifying")
QUERY_ARGUMENT_KEYS = ("value", "nativeQuery", "query")
# Lines carrying these are already reported by the query scan.
QUERY_LINE_MARKERS = ("@Query", "@NamedQuery")
UNKNOWN_UNIT = "Unknown"


class UsageDetector:
    """Scans a Java file's declarations and text for references to a column."""

    def __init__(self, parser: Optional[JavaSourceParser] = None, encoding: str = "utf-8"):
        self.parser = parser or JavaSourceParser()
        self.encoding = encoding

    def find_usages(self, file_path: str, column_name: str) -> List[UsageRecord]:
        """Read, parse and scan one file. Never raises; bad files yield no usages."""
        try:
            source = Path(file_path).read_bytes()
            parsed = self.parser.parse(source, str(file_path))
            text = source.decode(self.encoding, errors="replace")
        except (OSError, ColumnImpactError) as e:
            logger.debug("Error analyzing file: %s - %s", file_path, e)
            return []

        return self.detect(parsed, text, column_name)

    def detect(self, parsed: JavaSourceFile, text: str, column_name: str) -> List[UsageRecord]:
        """Scan an already parsed file together with its raw text."""
        unit_name = parsed.primary_type.name or UNKNOWN_UNIT
        file_path = parsed.file_path

        usages: List[UsageRecord] = []
        usages.extend(self._scan_fields(parsed, unit_name, column_name))
        usages.extend(self._scan_queries(parsed, unit_name, column_name))
        usages.extend(self._scan_methods(parsed, unit_name, column_name))
        usages.extend(self._scan_strings(text, unit_name, column_name, file_path))
        return usages

    def _scan_fields(self, parsed: JavaSourceFile, unit_name: str,
                     column_name: str) -> List[UsageRecord]:
        usages = []
        for declared in parsed.all_fields:
            for annotation in declared.annotations:
                if annotation.name != COLUMN_ANNOTATION:
                    continue
                mapped_name = annotation.string_arguments.get("name")
                if mapped_name is not None and is_column_match(mapped_name, column_name):
                    usages.append(UsageRecord(
                        unit_name=unit_name,
                        member_name="annotation",
                        usage_kind=UsageKind.COLUMN_ANNOTATION,
                        context_text=f'@Column(name="{mapped_name}")',
                        line_number=declared.start_line,
                        file_path=parsed.file_path,
                    ))

            for field_name in declared.names:
                if is_column_match(field_name, column_name):
                    usages.append(UsageRecord(
                        unit_name=unit_name,
                        member_name=field_name,
                        usage_kind=UsageKind.FIELD,
                        context_text=f"Field declaration: {field_name}",
                        line_number=declared.start_line,
                        file_path=parsed.file_path,
                    ))
        return usages

    def _scan_queries(self, parsed: JavaSourceFile, unit_name: str,
                      column_name: str) -> List[UsageRecord]:
        usages = []
        for annotation in parsed.all_annotations:
            if annotation.name not in QUERY_ANNOTATIONS:
                continue
            query = annotation.string_argument(*QUERY_ARGUMENT_KEYS)
            if query is not None and contains_column(query, column_name):
                usages.append(UsageRecord(
                    unit_name=unit_name,
                    member_name="query",
                    usage_kind=UsageKind.QUERY,
                    context_text=query.strip() or "SQL Query contains column",
                    line_number=annotation.start_line,
                    file_path=parsed.file_path,
                ))
        return usages

    def _scan_methods(self, parsed: JavaSourceFile, unit_name: str,
                      column_name: str) -> List[UsageRecord]:
        usages = []
        for method in parsed.all_methods:
            if contains_column(method.text, column_name):
                usages.append(UsageRecord(
                    unit_name=unit_name,
                    member_name=method.name,
                    usage_kind=UsageKind.METHOD,
                    context_text="Method contains column reference",
                    line_number=method.start_line,
                    file_path=parsed.file_path,
                ))

            for parameter in method.parameters:
                if is_column_match(parameter.name, column_name):
                    usages.append(UsageRecord(
                        unit_name=unit_name,
                        member_name=method.name,
                        usage_kind=UsageKind.PARAMETER,
                        context_text=f"Method parameter: {parameter.name}",
                        line_number=method.start_line,
                        file_path=parsed.file_path,
                    ))

            if method_name_references(method.name, column_name):
                usages.append(UsageRecord(
                    unit_name=unit_name,
                    member_name=method.name,
                    usage_kind=UsageKind.METHOD_NAME,
                    context_text="Method name references column",
                    line_number=method.start_line,
                    file_path=parsed.file_path,
                ))
        return usages

    def _scan_strings(self, text: str, unit_name: str, column_name: str,
                      file_path: str) -> List[UsageRecord]:
        usages = []
        for index, raw_line in enumerate(text.split("\n")):
            line = raw_line.strip()
            if '"' not in line or not contains_column(line, column_name):
                continue
            if any(marker in line for marker in QUERY_LINE_MARKERS):
                continue
            usages.append(UsageRecord(
                unit_name=unit_name,
                member_name="string-literal",
                usage_kind=UsageKind.STRING,
                context_text=line,
                line_number=index + 1,
                file_path=file_path,
            ))
        return usages
