"""Shared fixtures for the RN upgrader tests."""

from pathlib import Path

import pytest

from mcp_rn_upgrader.helpers import diff_source
from mcp_rn_upgrader.pbxproj import ProjectGraph, parse

FIXTURES = Path(__file__).parent / "fixtures"

# Identifiers from fixtures/HelloWorld.pbxproj
APP_DELEGATE_FILE = "761780EC2CA45674006654EE"
APP_DELEGATE_BUILD_FILE = "761780ED2CA45674006654EE"
INFO_PLIST_FILE = "13B07FB61A68108700A75B9A"
HELLO_WORLD_GROUP = "13B07FAE1A68108700A75B9A"
MAIN_GROUP = "83CBB9F61A601CBA00E9B192"
SOURCES_PHASE = "13B07F871A680F5B00A75B9A"
FRAMEWORKS_PHASE = "13B07F8C1A680F5B00A75B9A"
RESOURCES_PHASE = "13B07F8E1A680F5B00A75B9A"
NATIVE_TARGET = "13B07F861A680F5B00A75B9A"


@pytest.fixture
def hello_world_text() -> str:
    """Manifest of a React Native app created from the default template."""
    return (FIXTURES / "HelloWorld.pbxproj").read_text(encoding="utf-8")


@pytest.fixture
def hello_world(hello_world_text: str) -> ProjectGraph:
    return parse(hello_world_text)


@pytest.fixture
def no_sources_text() -> str:
    """Manifest with no source files, no build files and only a Sources phase."""
    return (FIXTURES / "NoSources.pbxproj").read_text(encoding="utf-8")


@pytest.fixture
def no_sources(no_sources_text: str) -> ProjectGraph:
    return parse(no_sources_text)


@pytest.fixture
def rn_project(tmp_path: Path, hello_world_text: str) -> Path:
    """Create a React Native project tree with package.json and an iOS project."""
    project = tmp_path / "HelloWorld"
    xcodeproj = project / "ios" / "HelloWorld.xcodeproj"
    xcodeproj.mkdir(parents=True)
    (xcodeproj / "project.pbxproj").write_text(hello_world_text, encoding="utf-8")
    (project / "ios" / "HelloWorld").mkdir()
    (project / "ios" / "HelloWorld" / "AppDelegate.swift").write_text("import UIKit\n")
    (project / "package.json").write_text(
        '{"name": "HelloWorld", "dependencies": {"react": "18.3.1", "react-native": "^0.74.5"}}'
    )
    return project


@pytest.fixture(autouse=True)
def _empty_diff_cache():
    """Every test starts without cached upgrade diffs."""
    diff_source.clear_cache()
    yield
    diff_source.clear_cache()
