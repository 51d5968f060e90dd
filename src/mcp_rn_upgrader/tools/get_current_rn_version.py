"""Current React Native version detection from package.json."""

__all__ = ["get_current_rn_version"]

import json
import logging
from pathlib import Path

from ..file_helpers import read_text_file

logger = logging.getLogger(__name__)


def _clean_version(spec: str) -> str:
    """Drop a leading range operator ('^0.72.4' -> '0.72.4')."""
    return spec.lstrip("^~")


def get_current_rn_version(project_path: str) -> dict:
    """Read the react-native version declared in the project's package.json.

    Args:
        project_path: Path to the React Native project root

    Returns:
        dict with:
        - version: Declared version with ^/~ stripped
        - declared: Raw declared version specifier
        - source: 'dependencies' or 'devDependencies'
        - error: Error message if package.json or the dependency is missing
    """
    package_json = Path(project_path).expanduser() / "package.json"
    if not package_json.exists():
        return {"error": f"package.json not found at {package_json}"}

    read_result = read_text_file(package_json)
    if "error" in read_result:
        return read_result

    try:
        data = json.loads(read_result["content"])
    except json.JSONDecodeError as e:
        return {"error": f"Invalid JSON in {package_json}: {e}"}

    for section in ("dependencies", "devDependencies"):
        deps = data.get(section) if isinstance(data, dict) else None
        if isinstance(deps, dict) and deps.get("react-native"):
            declared = str(deps["react-native"])
            logger.debug("Found react-native %s in %s", declared, section)
            return {
                "version": _clean_version(declared),
                "declared": declared,
                "source": section,
                "message": f"Current React Native version: {_clean_version(declared)}",
            }

    return {"error": "react-native not found in dependencies"}
