"""Tests for the MCP server wrappers."""

from pathlib import Path

import pytest

from mcp_rn_upgrader import server


def test_registry_lists_every_tool() -> None:
    assert set(server.TOOL_IMPLS) == {
        "get_upgrade_workflow",
        "get_current_rn_version",
        "get_target_version",
        "get_upgrade_diff_files",
        "get_file_specific_diff",
        "analyze_file_type",
        "create_upgrade_todo_list",
        "sync_xcode_project",
    }


def test_wrapper_delegates(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(server, "_config", {"tools": {"disabled": []}})

    assert server.analyze_file_type("android/gradlew")["file_type"] == "patchable"


def test_disabled_tool(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(server, "_config", {"tools": {"disabled": ["sync_xcode_project"]}})

    result = server.sync_xcode_project("/nowhere", "add", "HelloWorld/A.swift")

    assert result == {"error": "Tool 'sync_xcode_project' is disabled in configuration"}


def test_sync_wrapper_uses_server_config(
    monkeypatch: pytest.MonkeyPatch, rn_project: Path
) -> None:
    (rn_project / "ios").rename(rn_project / "apple")
    monkeypatch.setattr(
        server,
        "_config",
        {"xcode": {"ios_dir": "apple", "strip_prefix": "apple/"}, "tools": {"disabled": []}},
    )

    result = server.sync_xcode_project(
        str(rn_project), "remove", "apple/HelloWorld/AppDelegate.swift"
    )

    assert result["status"] == "applied"


def test_startup_survives_invalid_config(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    (tmp_path / "mcp_config.json").write_text("{broken")
    monkeypatch.setattr(server, "ROOT", tmp_path)

    assert server._validate_config_on_startup() == {}
