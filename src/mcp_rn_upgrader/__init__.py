"""MCP RN Upgrader - React Native upgrade assistant for AI agents.

This package exposes upgrade tools via MCP (Model Context Protocol), including
an in-place editor for the iOS Xcode project manifest.

The main entry point is the server module:
    from mcp_rn_upgrader.server import main, mcp, TOOL_IMPLS

The manifest editor has no I/O and can be used on its own:
    from mcp_rn_upgrader.pbxproj import parse, add, remove, serialize

Note: tool functions are not re-exported here; import them from their
modules under mcp_rn_upgrader.tools.
"""

__version__ = "0.1.0"
