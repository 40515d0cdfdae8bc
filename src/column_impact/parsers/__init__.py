"""Java source parsing."""

from .java_parser import JavaSourceParser, JavaSourceFile, TypeDeclaration

__all__ = ["JavaSourceParser", "JavaSourceFile", "TypeDeclaration"]
