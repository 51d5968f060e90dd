"""Resolve a caller-supplied path to an existing file record.

Matching is heuristic. Four passes run in a fixed order over all file
records and the first hit wins, ties going to table order:

1. stored path equals the normalized path
2. stored path equals the normalized path's basename
3. stored path ends with ``/<normalized path>``
4. stored path ends with ``/<basename>``, or the normalized path ends
   with ``/<stored path>``

When several records share a basename in different directories the first
one in table order is chosen.
"""

from __future__ import annotations

from collections.abc import Callable

from .errors import NotFoundError
from .model import FileRecord, ProjectGraph

DEFAULT_STRIP_PREFIX = "ios/"
MAX_CANDIDATES = 10


def normalize_path(path: str, strip_prefix: str | None = DEFAULT_STRIP_PREFIX) -> str:
    """Strip surrounding whitespace/quotes and one leading project directory."""
    normalized = path.strip().strip('"').replace("\\", "/")
    if strip_prefix and normalized.startswith(strip_prefix):
        normalized = normalized[len(strip_prefix) :]
    return normalized


def stored_path(record: FileRecord) -> str:
    """The path a record is matched on: its path, else its name, unquoted."""
    value = record.attributes.get("path") or record.attributes.get("name") or ""
    return str(value).replace('"', "")


def _passes(normalized: str, basename: str) -> list[Callable[[str], bool]]:
    return [
        lambda ref: ref == normalized,
        lambda ref: ref == basename,
        lambda ref: ref.endswith("/" + normalized),
        lambda ref: ref.endswith("/" + basename) or normalized.endswith("/" + ref),
    ]


def match_path(graph: ProjectGraph, path: str, strip_prefix: str | None = DEFAULT_STRIP_PREFIX) -> str:
    """Return the id of the file record ``path`` refers to.

    Raises:
        NotFoundError: If no pass matches; carries up to 10 known paths
    """
    normalized = normalize_path(path, strip_prefix)
    basename = normalized.rsplit("/", 1)[-1]
    records = [(record, stored_path(record)) for record in graph.file_records()]
    records = [(record, ref) for record, ref in records if ref]

    if normalized:
        for matches in _passes(normalized, basename):
            for record, ref in records:
                if matches(ref):
                    return record.id

    known = [ref for _, ref in records]
    raise NotFoundError(normalized or path, known[:MAX_CANDIDATES], len(known))
