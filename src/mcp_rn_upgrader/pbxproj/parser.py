"""Manifest parser: project.pbxproj text -> ProjectGraph.

Top-level keys other than ``objects`` are never edited, so the text before
the objects table (``prefix``) and after it (``suffix``) is kept verbatim.
Inside the objects table every entry's exact source text and its section
placement are captured so untouched records serialize byte for byte.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .errors import StructureError
from .model import (
    BUILD_PHASE_ISAS,
    BuildMembership,
    BuildPhase,
    ChildKind,
    ChildRef,
    FileRecord,
    Group,
    OpaqueRecord,
    ProjectGraph,
    Record,
    Section,
)
from .plist import Scanner

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^(Begin|End) (\w+) section$")


def parse(text: str) -> ProjectGraph:
    """Parse manifest text into a ProjectGraph.

    Raises:
        StructureError: If the text is not a property list, has no objects
            table, or lacks file reference, group or build phase records
    """
    scanner = Scanner(text)
    scanner.expect("{")

    root_object_id: str | None = None
    graph: ProjectGraph | None = None

    while True:
        scanner.skip_trivia()
        if scanner.peek() == "}":
            scanner.pos += 1
            break
        if scanner.at_end():
            raise scanner.error("Unterminated top-level dictionary")

        key = scanner.read_string()
        scanner.expect("=")
        if key == "objects":
            scanner.skip_trivia()
            if scanner.peek() != "{":
                raise scanner.error("'objects' must be a dictionary")
            scanner.pos += 1
            graph = _parse_objects(scanner)
        else:
            value = scanner.read_value()
            if key == "rootObject" and isinstance(value, str):
                root_object_id = value
        scanner.expect(";")

    if graph is None:
        raise StructureError("Manifest has no 'objects' table")

    graph.root_object_id = root_object_id
    graph.annotations = scanner.annotations
    _check_required_tables(graph)
    _resolve_child_kinds(graph)

    logger.debug(
        "Parsed manifest: %d objects, %d files, %d groups, %d build phases",
        len(graph.objects),
        len(graph.file_records()),
        len(graph.groups()),
        len(graph.build_phases()),
    )
    return graph


def _line_end(text: str, pos: int) -> int:
    """Extend pos past trailing spaces and one newline, if only whitespace remains on the line."""
    end = pos
    while end < len(text) and text[end] in " \t":
        end += 1
    if end < len(text) and text[end] == "\n":
        return end + 1
    if end < len(text) and text.startswith("\r\n", end):
        return end + 2
    return pos


def _parse_objects(scanner: Scanner) -> ProjectGraph:
    """Parse the body of ``objects = { ... }``; scanner starts just after '{'."""
    text = scanner.text
    prefix = text[: scanner.pos]
    layout: list[Section | str] = []
    objects: dict[str, Record] = {}
    section: Section | None = None
    cursor = scanner.pos

    while True:
        scanner.skip_whitespace()
        token_start = scanner.pos

        if scanner.at_end():
            raise scanner.error("Unterminated objects table")

        if scanner.peek() == "}":
            tail = text[cursor:token_start]
            if section is not None and section.isa is not None:
                # Section never closed; keep the text with it
                section.footer = tail
            elif tail:
                layout.append(tail)
            break

        if text.startswith("//", token_start):
            newline = text.find("\n", token_start)
            scanner.pos = len(text) if newline == -1 else newline + 1
            continue

        if text.startswith("/*", token_start):
            end = text.find("*/", token_start + 2)
            if end == -1:
                raise scanner.error("Unterminated comment")
            match = _SECTION_RE.match(text[token_start + 2 : end].strip())
            line_end = _line_end(text, end + 2)
            if match and match.group(1) == "Begin":
                if section is not None and section.isa is None:
                    section = None
                if text[cursor:token_start]:
                    layout.append(text[cursor:token_start])
                section = Section(isa=match.group(2), header=text[token_start:line_end])
                layout.append(section)
                cursor = line_end
            elif match and section is not None and section.isa is not None:
                section.footer = text[cursor:line_end]
                section = None
                cursor = line_end
            # Any other comment stays in the surrounding text
            scanner.pos = end + 2
            continue

        if section is None:
            # Records written outside any section markers
            if text[cursor:token_start]:
                layout.append(text[cursor:token_start])
                cursor = token_start
            section = Section(isa=None)
            layout.append(section)

        record_id = scanner.read_string()
        scanner.expect("=")
        scanner.skip_trivia()
        if scanner.peek() != "{":
            raise scanner.error(f"Object {record_id} is not a dictionary")
        attributes = scanner.read_dict()
        scanner.expect(";")
        entry_end = _line_end(text, scanner.pos)

        record = _build_record(record_id, attributes, scanner)
        record.source_text = text[cursor:entry_end]
        if record_id in objects:
            logger.warning("Duplicate object id %s; keeping the last definition", record_id)
            for item in layout:
                if isinstance(item, Section) and record_id in item.ids:
                    item.ids.remove(record_id)
        objects[record_id] = record
        section.ids.append(record_id)
        cursor = entry_end
        scanner.pos = entry_end

    # Closing brace of the objects table starts the suffix
    suffix = text[scanner.pos :]
    scanner.pos += 1
    return ProjectGraph(objects=objects, prefix=prefix, suffix=suffix, layout=layout)


def _build_record(record_id: str, attributes: dict[str, Any], scanner: Scanner) -> Record:
    isa = attributes.pop("isa", None)
    if not isinstance(isa, str):
        raise scanner.error(f"Object {record_id} has no isa")

    if isa == "PBXFileReference":
        record: Record = FileRecord.from_attributes(record_id, attributes)
    elif isa == "PBXBuildFile":
        file_ref = attributes.pop("fileRef", None)
        record = BuildMembership(
            id=record_id,
            isa=isa,
            attributes=attributes,
            file_record_id=file_ref if isinstance(file_ref, str) else None,
        )
    elif isa == "PBXGroup":
        children = attributes.pop("children", [])
        name = attributes.get("name") or attributes.get("path") or ""
        record = Group(
            id=record_id,
            isa=isa,
            attributes=attributes,
            display_name=str(name),
            # kinds are resolved once every record is known
            children=[ChildRef(id=str(child), kind=ChildKind.OTHER) for child in children],
        )
    elif isa in BUILD_PHASE_ISAS:
        files = attributes.pop("files", [])
        record = BuildPhase(
            id=record_id,
            isa=isa,
            attributes=attributes,
            role=BUILD_PHASE_ISAS[isa],
            members=[str(member) for member in files],
        )
    else:
        record = OpaqueRecord(id=record_id, isa=isa, attributes=attributes)
    return record


def _check_required_tables(graph: ProjectGraph) -> None:
    """Require each table to exist, as a record or as a (possibly empty) section."""
    present = {record.isa for record in graph.objects.values()}
    present.update(
        item.isa for item in graph.layout if isinstance(item, Section) and item.isa is not None
    )
    missing = []
    if "PBXFileReference" not in present:
        missing.append("PBXFileReference")
    if "PBXGroup" not in present:
        missing.append("PBXGroup")
    if present.isdisjoint(BUILD_PHASE_ISAS):
        missing.append("build phase")
    if missing:
        msg = f"Manifest is missing required tables: {', '.join(missing)}"
        raise StructureError(msg)


def _resolve_child_kinds(graph: ProjectGraph) -> None:
    for group in graph.groups():
        for child in group.children:
            child.kind = graph.child_kind(child.id)
