"""Diff fragment for a single file of the upgrade."""

__all__ = ["get_file_specific_diff"]

from typing import Any

from ..helpers.diff_parser import extract_file_diff
from ..helpers.diff_source import DiffFetchError, fetch_diff


def get_file_specific_diff(
    file_name: str,
    from_version: str,
    to_version: str,
    config: dict[str, Any] | None = None,
) -> dict:
    """Return the part of the upgrade diff that belongs to one file.

    Args:
        file_name: Path exactly as listed by get_upgrade_diff_files
        from_version: Current React Native version
        to_version: Target React Native version
        config: Server configuration (diff URL and timeout)

    Returns:
        dict with:
        - file_name
        - changed: False when the diff has no fragment for this file
        - diff: The fragment, starting at its 'diff --git' header
        - error: Error message if the diff could not be fetched
    """
    try:
        diff_content = fetch_diff(from_version, to_version, config)
    except DiffFetchError as e:
        return {"error": f"Error fetching file diff: {e}"}

    fragment = extract_file_diff(diff_content, file_name)
    if not fragment:
        return {
            "file_name": file_name,
            "changed": False,
            "message": f"No changes found for file: {file_name}",
        }

    return {"file_name": file_name, "changed": True, "diff": fragment}
