"""Scanner and value writer for the OpenStep property list syntax used by Xcode.

Values are dictionaries ``{ key = value; }``, arrays ``( a, b, )`` and strings,
either bare (``[A-Za-z0-9_$/:.-]+``) or double-quoted with backslash escapes.
Comments (``/* ... */`` and ``// ...``) may appear between tokens; a block
comment directly after a string is recorded as that string's annotation.
"""

from __future__ import annotations

import re
from typing import Any

from .errors import StructureError

_BARE_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_$/:.-")
_UNQUOTED_RE = re.compile(r"^[A-Za-z0-9_$/:.]+$")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


class Scanner:
    """Cursor over manifest text with a recursive-descent value reader."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos
        self.annotations: dict[str, str] = {}

    def error(self, message: str) -> StructureError:
        line = self.text.count("\n", 0, self.pos) + 1
        return StructureError(f"{message} (line {line})")

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def skip_trivia(self) -> list[str]:
        """Skip whitespace and comments; return the text of block comments skipped."""
        comments: list[str] = []
        while True:
            self.skip_whitespace()
            if self.text.startswith("/*", self.pos):
                end = self.text.find("*/", self.pos + 2)
                if end == -1:
                    raise self.error("Unterminated comment")
                comments.append(self.text[self.pos + 2 : end].strip())
                self.pos = end + 2
            elif self.text.startswith("//", self.pos):
                end = self.text.find("\n", self.pos)
                self.pos = len(self.text) if end == -1 else end + 1
            else:
                return comments

    def expect(self, char: str) -> None:
        self.skip_trivia()
        if self.peek() != char:
            found = self.peek() or "end of input"
            raise self.error(f"Expected '{char}', found '{found}'")
        self.pos += 1

    def read_string(self) -> str:
        """Read a bare or quoted string and record a trailing annotation comment."""
        self.skip_trivia()
        if self.peek() == '"':
            value = self._read_quoted()
        else:
            start = self.pos
            while self.pos < len(self.text) and self.text[self.pos] in _BARE_CHARS:
                self.pos += 1
            if self.pos == start:
                found = self.peek() or "end of input"
                raise self.error(f"Expected a string, found '{found}'")
            value = self.text[start : self.pos]

        comments = self.skip_trivia()
        if comments:
            self.annotations.setdefault(value, comments[0])
        return value

    def _read_quoted(self) -> str:
        self.pos += 1
        chars: list[str] = []
        while True:
            if self.pos >= len(self.text):
                raise self.error("Unterminated quoted string")
            char = self.text[self.pos]
            if char == '"':
                self.pos += 1
                return "".join(chars)
            if char == "\\" and self.pos + 1 < len(self.text):
                nxt = self.text[self.pos + 1]
                chars.append(_ESCAPES.get(nxt, nxt))
                self.pos += 2
                continue
            chars.append(char)
            self.pos += 1

    def read_value(self) -> Any:
        self.skip_trivia()
        char = self.peek()
        if char == "{":
            return self.read_dict()
        if char == "(":
            return self.read_array()
        return self.read_string()

    def read_dict(self) -> dict[str, Any]:
        self.expect("{")
        result: dict[str, Any] = {}
        while True:
            self.skip_trivia()
            if self.peek() == "}":
                self.pos += 1
                return result
            key = self.read_string()
            self.expect("=")
            result[key] = self.read_value()
            self.expect(";")

    def read_array(self) -> list[Any]:
        self.expect("(")
        result: list[Any] = []
        while True:
            self.skip_trivia()
            if self.peek() == ")":
                self.pos += 1
                return result
            result.append(self.read_value())
            self.skip_trivia()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != ")":
                raise self.error(f"Expected ',' or ')', found '{self.peek() or 'end of input'}'")


def quote(value: str) -> str:
    """Render a string, quoting it when it contains characters Xcode quotes."""
    if _UNQUOTED_RE.match(value):
        return value
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def format_string(value: str, annotations: dict[str, str]) -> str:
    """Render a string followed by its ``/* annotation */`` when it has one."""
    comment = annotations.get(value)
    if comment:
        return f"{quote(value)} /* {comment} */"
    return quote(value)


def format_value(value: Any, annotations: dict[str, str], indent: int, *, inline: bool) -> str:
    """Render a value in Xcode's layout.

    Args:
        value: dict, list or str
        annotations: id -> comment map used for ``/* ... */`` annotations
        indent: Tab depth of the line the value starts on
        inline: Render on one line (PBXBuildFile / PBXFileReference style)
    """
    if isinstance(value, dict):
        if inline:
            body = "".join(
                f"{format_string(k, annotations)} = "
                f"{format_value(v, annotations, indent, inline=True)}; "
                for k, v in value.items()
            )
            return "{" + body + "}"
        pad = "\t" * (indent + 1)
        lines = [
            f"{pad}{format_string(k, annotations)} = "
            f"{format_value(v, annotations, indent + 1, inline=False)};\n"
            for k, v in value.items()
        ]
        return "{\n" + "".join(lines) + "\t" * indent + "}"

    if isinstance(value, list):
        if inline:
            body = "".join(
                f"{format_value(item, annotations, indent, inline=True)}, " for item in value
            )
            return "(" + body + ")"
        pad = "\t" * (indent + 1)
        lines = [
            f"{pad}{format_value(item, annotations, indent + 1, inline=False)},\n"
            for item in value
        ]
        return "(\n" + "".join(lines) + "\t" * indent + ")"

    return format_string(str(value), annotations)
