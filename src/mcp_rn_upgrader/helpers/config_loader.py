"""Configuration loader for the RN upgrader MCP server.

Loads and validates configuration from the workspace with smart defaults.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "upgrade": {
        "diff_url_template": (
            "https://raw.githubusercontent.com/react-native-community/"
            "rn-diff-purge/diffs/diffs/{from_version}..{to_version}.diff"
        ),
        "request_timeout": 10,
    },
    "xcode": {
        "ios_dir": "ios",
        "strip_prefix": "ios/",
    },
    "tools": {
        "disabled": [],
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries.

    Override values replace base values. Lists are replaced entirely (not merged).

    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def find_config_file(workspace_root: Path) -> Path | None:
    """Find config file in workspace.

    Search order:
    1. mcp_config.json
    2. .mcp/config.json

    """
    candidates = [
        workspace_root / "mcp_config.json",
        workspace_root / ".mcp" / "config.json",
    ]

    for path in candidates:
        if path.exists():
            return path

    return None


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load and parse config file."""
    try:
        with config_path.open(encoding="utf-8") as f:
            result: dict[str, Any] = json.load(f)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in config file {config_path}: {e}"
        raise ValueError(msg) from e
    except OSError as e:
        msg = f"Failed to read config file {config_path}: {e}"
        raise ValueError(msg) from e

    if not isinstance(result, dict):
        msg = f"Config file {config_path} must contain a JSON object"
        raise ValueError(msg)
    return result


def _validate_config(config: dict) -> list[str]:
    """Validate config against expected structure.

    Returns list of warning messages (empty if valid).

    """
    warnings = []

    known_keys = {"upgrade", "xcode", "tools", "$schema"}
    unknown = set(config.keys()) - known_keys
    if unknown:
        warnings.append(f"Unknown config keys: {', '.join(sorted(unknown))}")

    for section in ("upgrade", "xcode", "tools"):
        if section in config and not isinstance(config[section], dict):
            warnings.append(f"'{section}' must be an object")

    upgrade = config.get("upgrade")
    if isinstance(upgrade, dict):
        timeout = upgrade.get("request_timeout")
        if timeout is not None and (
            not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0
        ):
            warnings.append("'upgrade.request_timeout' must be a positive number")
        template = upgrade.get("diff_url_template")
        if template is not None and (
            not isinstance(template, str)
            or "{from_version}" not in template
            or "{to_version}" not in template
        ):
            warnings.append(
                "'upgrade.diff_url_template' must contain {from_version} and {to_version}"
            )

    return warnings


def load_config(workspace_root: Path | None = None) -> dict:
    """Load configuration with smart defaults.

    Args:
        workspace_root: Path to workspace root (defaults to current directory)

    Returns:
        Merged configuration dict

    Raises:
        ValueError: If config file is invalid

    """
    if workspace_root is None:
        workspace_root = Path.cwd()

    config = copy.deepcopy(DEFAULT_CONFIG)

    config_path = find_config_file(workspace_root)
    if config_path:
        user_config = _load_config_file(config_path)

        warnings = _validate_config(user_config)
        if warnings:
            logger.warning("Config warnings from %s:", config_path)
            for warning in warnings:
                logger.warning("  - %s", warning)

        config = _deep_merge(config, user_config)

    return config


def get_upgrade_config(config: dict[str, Any] | None) -> dict[str, Any]:
    """Extract upgrade-diff config, falling back to defaults per key."""
    section = (config or {}).get("upgrade", {})
    return _deep_merge(DEFAULT_CONFIG["upgrade"], section if isinstance(section, dict) else {})


def get_xcode_config(config: dict[str, Any] | None) -> dict[str, Any]:
    """Extract Xcode project config, falling back to defaults per key."""
    section = (config or {}).get("xcode", {})
    return _deep_merge(DEFAULT_CONFIG["xcode"], section if isinstance(section, dict) else {})


def is_tool_disabled(config: dict, tool_name: str) -> bool:
    """Check if a tool is disabled in config."""
    disabled = config.get("tools", {}).get("disabled", [])
    return tool_name in disabled
