"""Analysis configuration."""

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple


DEFAULT_SKIP_DIRS = frozenset({
    ".git", ".svn", ".hg", ".idea", ".vscode", ".gradle", ".mvn",
    "node_modules", "target", "build", "out",
})


@dataclass
class AnalysisConfiguration:
    """Configuration for column impact analysis."""
    file_extensions: Tuple[str, ...] = (".java",)
    skip_dirs: FrozenSet[str] = field(default_factory=lambda: DEFAULT_SKIP_DIRS)
    encoding: str = "utf-8"
    max_workers: int = 1  # >1 classifies and scans files on a thread pool
    known_base_repositories: FrozenSet[str] = field(
        default_factory=lambda: frozenset({"JpaRepository", "CrudRepository"})
    )

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
