#!/usr/bin/env python3
"""RN Upgrader MCP Server.

Guides AI agents through a React Native upgrade, one file at a time.
All tools return structured JSON.

Workflow:
- get_upgrade_workflow: Step-by-step sequence (call this first)
- get_current_rn_version: Read the react-native version from package.json
- get_target_version: Confirm the version to upgrade to

Upgrade diff:
- get_upgrade_diff_files: List every file changed between two versions
- get_file_specific_diff: Diff fragment for a single file
- analyze_file_type: patchable / binary_manual / complex_migration
- create_upgrade_todo_list: Checklist with one item per file

iOS project:
- sync_xcode_project: Add or remove a file in ios/<App>.xcodeproj (single atomic write)

Usage:
    rn-upgrader-mcp
    python -m mcp_rn_upgrader.server
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

from mcp.server.fastmcp import FastMCP

from .helpers.config_loader import find_config_file, is_tool_disabled, load_config

# Import tool implementations with _impl suffix to avoid name collision
# with MCP-decorated wrapper functions defined below
from .tools.analyze_file_type import analyze_file_type as analyze_file_type_impl
from .tools.create_upgrade_todo_list import (
    create_upgrade_todo_list as create_upgrade_todo_list_impl,
)
from .tools.get_current_rn_version import get_current_rn_version as get_current_rn_version_impl
from .tools.get_file_specific_diff import get_file_specific_diff as get_file_specific_diff_impl
from .tools.get_target_version import get_target_version as get_target_version_impl
from .tools.get_upgrade_diff_files import get_upgrade_diff_files as get_upgrade_diff_files_impl
from .tools.get_upgrade_workflow import get_upgrade_workflow as get_upgrade_workflow_impl
from .tools.sync_xcode_project import sync_xcode_project as sync_xcode_project_impl

# Tool registry for programmatic access
TOOL_IMPLS: dict[str, object] = {
    "get_upgrade_workflow": get_upgrade_workflow_impl,
    "get_current_rn_version": get_current_rn_version_impl,
    "get_target_version": get_target_version_impl,
    "get_upgrade_diff_files": get_upgrade_diff_files_impl,
    "get_file_specific_diff": get_file_specific_diff_impl,
    "analyze_file_type": analyze_file_type_impl,
    "create_upgrade_todo_list": create_upgrade_todo_list_impl,
    "sync_xcode_project": sync_xcode_project_impl,
}

# ──────────────────────────────────────────────────────────────────────
# Early Setup: Configure logging to stderr (NEVER stdout for MCP stdio)
# ──────────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.WARNING,
    format="%(name)s: %(message)s",
    stream=sys.stderr,  # Critical: MCP uses stdout for JSON-RPC
)

# Suppress noisy loggers that might write to handlers
for noisy_logger in ["asyncio", "urllib3", "requests", "httpcore", "httpx"]:
    logging.getLogger(noisy_logger).setLevel(logging.ERROR)

# Workspace root - determined from current working directory
ROOT = Path.cwd()

logger = logging.getLogger(__name__)


def _validate_config_on_startup() -> dict:
    """Load and validate the server configuration.

    Logs warnings for invalid config but does not block startup, so tools
    keep working with defaults.

    Returns:
        The loaded configuration dict, or empty dict if loading fails.
    """
    try:
        config = load_config(ROOT)
    except Exception as e:
        logger.warning(f"⚠ Configuration validation error: {type(e).__name__}: {e}")
        logger.warning("  Proceeding with default configuration")
        return {}

    config_file = find_config_file(ROOT)
    if config_file:
        logger.info(f"  Using config: {config_file}")
    else:
        logger.info("  Using default configuration (no mcp_config.json found)")

    logger.debug(f"  Diff source: {config['upgrade']['diff_url_template']}")
    logger.debug(f"  iOS directory: {config['xcode']['ios_dir']}")
    return config


def _disabled(tool_name: str) -> dict | None:
    if is_tool_disabled(_config, tool_name):
        return {"error": f"Tool '{tool_name}' is disabled in configuration"}
    return None


# Initialize MCP server
mcp = FastMCP(
    name="rn-upgrader",
    instructions=(
        "Guides React Native upgrades. ALWAYS call get_upgrade_workflow first. "
        "Tool order: get_current_rn_version → get_target_version → "
        "get_upgrade_diff_files → create_upgrade_todo_list → for each file: "
        "analyze_file_type → get_file_specific_diff → (sync_xcode_project for added or "
        "removed iOS files) → apply the diff. Process files one at a time."
    ),
)

# Validate configuration on startup and store globally for tools
_config = _validate_config_on_startup()


# ──────────────────────────────────────────────────────────────────────
# Workflow Tools
# ──────────────────────────────────────────────────────────────────────


@mcp.tool()
def get_upgrade_workflow() -> dict:
    """Get the complete step-by-step workflow for React Native upgrades.

    ALWAYS call this first to understand the proper sequence.
    """
    return _disabled("get_upgrade_workflow") or get_upgrade_workflow_impl()


@mcp.tool()
def get_current_rn_version(
    project_path: Annotated[str, "Path to the React Native project"],
) -> dict:
    """Detect the current React Native version from package.json."""
    return _disabled("get_current_rn_version") or get_current_rn_version_impl(project_path)


@mcp.tool()
def get_target_version(
    target_version: Annotated[str, "Target React Native version to upgrade to"],
) -> dict:
    """Get the target React Native version from user input."""
    return _disabled("get_target_version") or get_target_version_impl(target_version)


# ──────────────────────────────────────────────────────────────────────
# Upgrade Diff Tools
# ──────────────────────────────────────────────────────────────────────


@mcp.tool()
def get_upgrade_diff_files(
    from_version: Annotated[str, "Current React Native version"],
    to_version: Annotated[str, "Target React Native version"],
) -> dict:
    """Get all file names from the full upgrade diff between two RN versions.

    Call this ONCE to get the complete list of files, then iterate through each
    file individually using get_file_specific_diff. Do not process all files at once.
    """
    return _disabled("get_upgrade_diff_files") or get_upgrade_diff_files_impl(
        from_version, to_version, config=_config
    )


@mcp.tool()
def get_file_specific_diff(
    file_name: Annotated[
        str, "Name of the file to get diff for (as listed by get_upgrade_diff_files)"
    ],
    from_version: Annotated[str, "Current React Native version"],
    to_version: Annotated[str, "Target React Native version"],
) -> dict:
    """Get the specific diff for a single file between two RN versions.

    Process files ONE AT A TIME: call this for a file, apply the diff, then move
    to the next file. Do not batch process multiple files.
    """
    return _disabled("get_file_specific_diff") or get_file_specific_diff_impl(
        file_name, from_version, to_version, config=_config
    )


@mcp.tool()
def analyze_file_type(
    file_name: Annotated[str, "Name of the file to analyze"],
) -> dict:
    """Determine if a file is binary, requires migration, or can be patched normally.

    Use this before processing each file.
    """
    return _disabled("analyze_file_type") or analyze_file_type_impl(file_name)


@mcp.tool()
def create_upgrade_todo_list(
    files: Annotated[list[str], "Array of file names from get_upgrade_diff_files"],
    from_version: Annotated[str, "Current React Native version"],
    to_version: Annotated[str, "Target React Native version"],
) -> dict:
    """Generate a structured todo list for React Native upgrade files.

    Call this after get_upgrade_diff_files to create a trackable task list.
    """
    return _disabled("create_upgrade_todo_list") or create_upgrade_todo_list_impl(
        files, from_version, to_version
    )


# ──────────────────────────────────────────────────────────────────────
# iOS Project Tools
# ──────────────────────────────────────────────────────────────────────


@mcp.tool()
def sync_xcode_project(
    project_path: Annotated[str, "Path to the React Native project root"],
    operation: Annotated[str, "Whether to add or remove the file: 'add' or 'remove'"],
    file_path: Annotated[
        str, "Path to the file relative to ios/ directory (e.g., 'MyApp/NewFile.swift')"
    ],
    category: Annotated[
        str | None,
        "Optional file kind for add: source, header, framework or resource. "
        "Default: detected from the extension.",
    ] = None,
) -> dict:
    """Add or remove a file from the Xcode project.

    Call this after adding/removing iOS native files.
    Keeps file references, build files, groups and build phases consistent.
    The project file is written once, only if the whole operation succeeds.
    """
    return _disabled("sync_xcode_project") or sync_xcode_project_impl(
        project_path, operation, file_path, category=category, config=_config
    )


def main() -> None:
    """Run the MCP server."""
    logger.info("RN Upgrader MCP Server started (stdio)")
    mcp.run()


# ──────────────────────────────────────────────────────────────────────
# Main Entry Point
# ──────────────────────────────────────────────────────────────────────


if __name__ == "__main__":
    main()
