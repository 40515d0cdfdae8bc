"""Tests for input validation and the analyzer entry points."""

from datetime import datetime

import pytest

from column_impact import analyze
from column_impact.analyzers.column_impact_analyzer import ColumnImpactAnalyzer
from column_impact.exceptions import InvalidInput, ReportGenerationError


@pytest.fixture
def analyzer():
    return ColumnImpactAnalyzer()


class TestValidation:

    @pytest.mark.parametrize("column", ["", "   ", None])
    def test_blank_column(self, analyzer, java_project, column):
        with pytest.raises(InvalidInput, match="Column name cannot be empty"):
            analyzer.analyze(str(java_project), column)

    def test_empty_project_path(self, analyzer):
        with pytest.raises(InvalidInput, match="Project path cannot be empty"):
            analyzer.analyze("", "user_email")

    def test_missing_project_path(self, analyzer, tmp_path):
        with pytest.raises(InvalidInput, match="does not exist"):
            analyzer.analyze(str(tmp_path / "missing"), "user_email")

    def test_project_path_is_a_file(self, analyzer, tmp_path):
        path = tmp_path / "pom.xml"
        path.write_text("<project/>")

        with pytest.raises(InvalidInput, match="not a directory"):
            analyzer.analyze(str(path), "user_email")

    def test_invalid_input_is_a_value_error(self, analyzer):
        with pytest.raises(ValueError):
            analyzer.analyze("", "user_email")

    def test_report_extension(self, analyzer, java_project, tmp_path):
        with pytest.raises(InvalidInput, match=r"\.xlsx"):
            analyzer.analyze_and_report(str(java_project), "user_email", str(tmp_path / "report.csv"))

    def test_report_directory_must_exist(self, analyzer, java_project, tmp_path):
        output = tmp_path / "missing" / "report.xlsx"

        with pytest.raises(InvalidInput, match="Output directory does not exist"):
            analyzer.analyze_and_report(str(java_project), "user_email", str(output))

    def test_blank_report_path(self, analyzer, java_project):
        with pytest.raises(InvalidInput, match="Output file path cannot be empty"):
            analyzer.analyze_and_report(str(java_project), "user_email", "  ")


class TestAnalyze:

    def test_column_name_is_stripped(self, analyzer, java_project):
        result = analyzer.analyze(str(java_project), "  user_email ")

        assert result.column_name == "user_email"
        assert result.total_usages == 10

    def test_module_level_analyze(self, java_project):
        result = analyze(str(java_project), "user_email")

        assert [unit.name for unit in result.controllers] == ["UserController"]

    def test_analyze_and_report_writes_file(self, analyzer, java_project, tmp_path):
        output = tmp_path / "impact.xlsx"
        result = analyzer.analyze_and_report(str(java_project), "user_email", str(output))

        assert output.exists()
        assert result.total_impacted_classes == 4

    def test_report_failure_carries_result(self, analyzer, java_project, tmp_path):
        # A directory named like a workbook cannot be written as a file
        output = tmp_path / "taken.xlsx"
        output.mkdir()

        with pytest.raises(ReportGenerationError) as exc_info:
            analyzer.analyze_and_report(str(java_project), "user_email", str(output))

        assert exc_info.value.result is not None
        assert exc_info.value.result.total_usages == 10


class TestDefaultOutputFileName:

    def test_format(self):
        now = datetime(2024, 1, 2, 3, 4, 5)

        name = ColumnImpactAnalyzer.default_output_file_name("user_email", now)
        assert name == "impact-analysis-user_email-20240102-030405.xlsx"

    def test_unsafe_characters_replaced(self):
        now = datetime(2024, 1, 2, 3, 4, 5)

        name = ColumnImpactAnalyzer.default_output_file_name("users.email/x", now)
        assert name == "impact-analysis-users_email_x-20240102-030405.xlsx"
