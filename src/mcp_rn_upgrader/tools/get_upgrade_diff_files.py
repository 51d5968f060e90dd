"""List the files changed between two React Native versions."""

__all__ = ["get_upgrade_diff_files"]

from typing import Any

from ..helpers.diff_parser import parse_files_from_diff
from ..helpers.diff_source import DiffFetchError, fetch_diff


def get_upgrade_diff_files(
    from_version: str,
    to_version: str,
    config: dict[str, Any] | None = None,
) -> dict:
    """Return every file touched by the upgrade diff.

    Args:
        from_version: Current React Native version
        to_version: Target React Native version
        config: Server configuration (diff URL and timeout)

    Returns:
        dict with:
        - from_version / to_version
        - files: File paths in diff order, without duplicates
        - count: Number of files
        - recommendation: Todo-list suggestion for the agent
        - error: Error message if the diff could not be fetched
    """
    try:
        diff_content = fetch_diff(from_version, to_version, config)
    except DiffFetchError as e:
        return {"error": f"Error fetching diff: {e}"}

    files = parse_files_from_diff(diff_content)
    return {
        "from_version": from_version,
        "to_version": to_version,
        "files": files,
        "count": len(files),
        "recommendation": (
            f"Create a todo list with these {len(files)} files to track upgrade progress. "
            "Each file should be a separate todo item, processed sequentially with "
            "get_file_specific_diff."
        ),
    }
