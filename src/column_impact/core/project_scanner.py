"""Project tree walking and per-file fan-out."""

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, List, Optional, TypeVar

from ..config import AnalysisConfiguration

T = TypeVar("T")
R = TypeVar("R")


class ProjectScanner:
    """Finds the source files of a project and runs per-file work over them."""

    def __init__(self, config: Optional[AnalysisConfiguration] = None):
        self.config = config or AnalysisConfiguration()
        self.max_workers = self.config.max_workers

    def find_source_files(self, project_root: str) -> List[str]:
        """All matching files under ``project_root`` in a stable walk order."""
        root = Path(project_root)
        found = []
        for dirpath, dirnames, filenames in os.walk(root):
            # Prune in place so os.walk never descends into skipped dirs
            dirnames[:] = sorted(d for d in dirnames if d not in self.config.skip_dirs)
            for filename in sorted(filenames):
                if filename.endswith(self.config.file_extensions):
                    found.append(os.path.join(dirpath, filename))
        return found

    def map_files(self, func: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """Apply ``func`` to every item, returning results in input order."""
        items = list(items)
        if self.max_workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(func, items))
