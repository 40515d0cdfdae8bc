"""Core project traversal."""

from .project_scanner import ProjectScanner

__all__ = ["ProjectScanner"]
