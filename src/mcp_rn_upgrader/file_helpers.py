"""File helper utilities for MCP tools.

Locating React Native project files and reading/writing them as UTF-8 text.
Helpers return either a value or an error dict with an 'error' key.
"""

from pathlib import Path


def read_text_file(file_path: Path) -> dict[str, str]:
    """Attempt to read file and return content or error.

    Returns:
        dict with either 'content' or 'error' key

    """
    try:
        content = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return {"error": f"File is not valid UTF-8: {file_path}"}
    except FileNotFoundError:
        return {"error": f"File not found: {file_path}"}
    except PermissionError:
        return {"error": f"Permission denied: {file_path}"}
    except OSError as e:
        return {"error": f"Failed to read file: {e}"}
    else:
        return {"content": content}


def write_text_file(file_path: Path, content: str) -> dict | None:
    """Write content to file in a single write.

    Newlines are written as given (no platform translation).

    Returns:
        None if successful, or error dict with 'error' key

    """
    try:
        file_path.write_bytes(content.encode("utf-8"))
    except PermissionError:
        return {"error": f"Permission denied: {file_path}"}
    except OSError as e:
        return {"error": f"Failed to write file: {e}"}

    return None


def resolve_ios_dir(project_path: str, ios_dir: str = "ios") -> Path | dict:
    """Resolve the iOS directory of a React Native project.

    Returns:
        Resolved Path if it exists, or error dict with 'error' key

    """
    try:
        path = (Path(project_path).expanduser() / ios_dir).resolve()
    except (OSError, RuntimeError) as e:
        return {"error": f"Failed to resolve path: {e}"}

    if not path.is_dir():
        return {"error": f"iOS directory not found at {path}"}
    return path


def find_pbxproj(ios_path: Path) -> Path | dict:
    """Find ``<name>.xcodeproj/project.pbxproj`` inside the iOS directory.

    The first .xcodeproj in name order is used (Pods.xcodeproj lives under
    Pods/, not here).

    Returns:
        Path to project.pbxproj, or error dict with 'error' key

    """
    projects = sorted(p for p in ios_path.iterdir() if p.name.endswith(".xcodeproj"))
    if not projects:
        return {"error": f"No .xcodeproj found in {ios_path}"}

    pbxproj = projects[0] / "project.pbxproj"
    if not pbxproj.is_file():
        return {"error": f"project.pbxproj not found at {pbxproj}"}
    return pbxproj


def resolve_within(base: Path, relative_path: str) -> Path | dict:
    """Resolve a path relative to base, refusing paths that escape it.

    Returns:
        Resolved Path, or error dict with 'error' key

    """
    try:
        path = (base / relative_path).resolve()
    except (OSError, RuntimeError) as e:
        return {"error": f"Failed to resolve path: {e}"}

    try:
        path.relative_to(base)
    except ValueError:
        return {"error": f"Path is outside {base}: {relative_path}"}
    return path
