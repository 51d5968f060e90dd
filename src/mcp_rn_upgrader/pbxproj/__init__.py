"""Xcode project manifest (project.pbxproj) graph editor.

Pure computation, no I/O:
    graph = parse(text)
    result = add(graph, "MyApp/NewFile.swift")
    outcome = remove(graph, "MyApp/OldFile.m")
    text = serialize(graph)
"""

from .classifier import FileKind, classify_path
from .errors import (
    DuplicateFileError,
    ManifestError,
    NotFoundError,
    StructureError,
    UnsupportedOperationError,
)
from .model import ProjectGraph
from .mutation import AddResult, RemoveOutcome, add, apply_operation, remove
from .parser import parse
from .serializer import serialize

__all__ = [
    "AddResult",
    "DuplicateFileError",
    "FileKind",
    "ManifestError",
    "NotFoundError",
    "ProjectGraph",
    "RemoveOutcome",
    "StructureError",
    "UnsupportedOperationError",
    "add",
    "apply_operation",
    "classify_path",
    "parse",
    "remove",
    "serialize",
]
