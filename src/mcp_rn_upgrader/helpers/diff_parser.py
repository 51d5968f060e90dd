"""Split a multi-file unified diff (``git diff`` format) into per-file pieces."""

import re

_HEADER_PREFIX = "diff --git"
_HEADER_RE = re.compile(r"diff --git a/(.+?) b/(.+)")


def _header_path(line: str) -> str | None:
    """Return the a/ path of a ``diff --git`` header line, or None."""
    if not line.startswith(_HEADER_PREFIX):
        return None
    match = _HEADER_RE.match(line)
    return match.group(1) if match else None


def parse_files_from_diff(diff_content: str) -> list[str]:
    """List the files touched by a diff, in order, without duplicates."""
    files: list[str] = []
    seen: set[str] = set()
    for line in diff_content.split("\n"):
        path = _header_path(line)
        if path is not None and path not in seen:
            seen.add(path)
            files.append(path)
    return files


def extract_file_diff(diff_content: str, file_name: str) -> str:
    """Return the diff fragment for exactly ``file_name``.

    The fragment runs from the file's ``diff --git`` header up to (not
    including) the next header. Returns an empty string if the file is absent.
    """
    fragment: list[str] = []
    in_file = False

    for line in diff_content.split("\n"):
        if line.startswith(_HEADER_PREFIX):
            if in_file:
                break
            if _header_path(line) == file_name:
                in_file = True
                fragment.append(line)
            continue
        if in_file:
            fragment.append(line)

    return "\n".join(fragment)
