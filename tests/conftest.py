"""Pytest configuration and fixtures for column impact tests."""

import shutil
import textwrap
from pathlib import Path

import pytest

from column_impact.parsers.java_parser import JavaSourceParser

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_PROJECT = FIXTURES_DIR / "spring_project"
SAMPLE_SOURCES = SAMPLE_PROJECT / "src" / "main" / "java" / "com" / "example"


@pytest.fixture
def java_parser() -> JavaSourceParser:
    return JavaSourceParser()


@pytest.fixture
def parse_java(java_parser):
    """Parse a Java source string as if it were ``file_path``."""
    def _parse(source: str, file_path: str = "Sample.java"):
        return java_parser.parse(textwrap.dedent(source).encode("utf-8"), file_path)
    return _parse


@pytest.fixture
def sample_source():
    """Read one file of the sample project, e.g. ``sample_source("entity/User.java")``."""
    def _read(relative_path: str) -> str:
        return (SAMPLE_SOURCES / relative_path).read_text(encoding="utf-8")
    return _read


@pytest.fixture
def write_java():
    """Write a Java file below a root directory, creating directories as needed."""
    def _write(root: Path, relative_path: str, source: str) -> Path:
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def java_project(tmp_path: Path) -> Path:
    """A copy of the layered Spring sample project that uses ``user_email``.

    Impacted: User (entity), UserRepository, UserService (indirect) and
    UserController (indirect). AppConfig mentions the column but is not a
    tracked layer; Broken.java does not parse.
    """
    root = tmp_path / "project"
    shutil.copytree(SAMPLE_PROJECT, root)
    return root


@pytest.fixture
def empty_project(tmp_path: Path) -> Path:
    root = tmp_path / "empty"
    root.mkdir()
    return root
