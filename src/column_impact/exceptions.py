"""Error types raised by the column impact engine."""


class ColumnImpactError(Exception):
    """Base class for every error raised by this package."""


class InvalidInput(ColumnImpactError, ValueError):
    """Bad project path, column name or output file. Raised before any work starts."""


class FileReadError(ColumnImpactError):
    """A source file could not be read."""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Could not read {file_path}: {reason}")


class FileParseError(ColumnImpactError):
    """A source file could not be parsed into a class or interface declaration."""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Could not parse {file_path}: {reason}")


class ReportGenerationError(ColumnImpactError):
    """Writing the spreadsheet report failed.

    ``result`` carries the already computed analysis when one exists.
    """

    def __init__(self, message: str, result=None):
        self.result = result
        super().__init__(message)
