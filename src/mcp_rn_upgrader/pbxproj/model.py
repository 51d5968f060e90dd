"""In-memory graph model of an Xcode project manifest.

The graph is an arena: every record lives in ``ProjectGraph.objects`` keyed by
its identifier, and every relationship (group children, build phase members,
build file references) is stored as an identifier, never as an object link.
Invariant checks and cascading deletes are therefore plain table scans.

Each parsed record keeps the exact text it was parsed from. The serializer
re-emits that text for untouched records; ``Record.touch()`` drops it so the
record is rendered from its attributes instead.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .classifier import FileKind, classify_record

__all__ = [
    "BUILD_PHASE_ISAS",
    "BuildMembership",
    "BuildPhase",
    "ChildKind",
    "ChildRef",
    "FileRecord",
    "Group",
    "OpaqueRecord",
    "ProjectGraph",
    "Record",
    "Section",
]

# isa -> role name written in annotations ("AppDelegate.mm in Sources")
BUILD_PHASE_ISAS: dict[str, str] = {
    "PBXSourcesBuildPhase": "Sources",
    "PBXResourcesBuildPhase": "Resources",
    "PBXFrameworksBuildPhase": "Frameworks",
    "PBXHeadersBuildPhase": "Headers",
    "PBXCopyFilesBuildPhase": "CopyFiles",
    "PBXShellScriptBuildPhase": "ShellScript",
}

# Records other than PBXFileReference that a PBXBuildFile may point at
FILE_LIKE_ISAS = frozenset({"PBXVariantGroup", "PBXReferenceProxy", "XCVersionGroup"})

_OBJECT_ID_RE = re.compile(r"^[0-9A-F]{24}$")


class ChildKind(str, Enum):
    """What a group child identifier refers to."""

    FILE = "file"
    GROUP = "group"
    OTHER = "other"


@dataclass
class ChildRef:
    """One entry of a group's ordered children list."""

    id: str
    kind: ChildKind


@dataclass
class Record:
    """Base record: identifier, isa and the attributes not modelled by a subclass."""

    id: str
    isa: str
    attributes: dict[str, Any] = field(default_factory=dict)
    source_text: str | None = field(default=None, compare=False, repr=False)

    def touch(self) -> None:
        """Mark the record as modified so it is re-rendered on serialization."""
        self.source_text = None

    def to_attributes(self) -> dict[str, Any]:
        """Return the full attribute dictionary (without isa)."""
        return dict(self.attributes)


@dataclass
class FileRecord(Record):
    """A PBXFileReference."""

    path: str = ""
    display_name: str = ""
    kind: FileKind = FileKind.RESOURCE

    @classmethod
    def from_attributes(cls, record_id: str, attributes: dict[str, Any]) -> FileRecord:
        path = str(attributes.get("path", ""))
        name = str(attributes.get("name", ""))
        display_name = name or path.rsplit("/", 1)[-1]
        file_type = attributes.get("lastKnownFileType") or attributes.get("explicitFileType")
        return cls(
            id=record_id,
            isa="PBXFileReference",
            attributes=attributes,
            path=path,
            display_name=display_name,
            kind=classify_record(path or name, str(file_type) if file_type else None),
        )


@dataclass
class BuildMembership(Record):
    """A PBXBuildFile: one file participating in one build phase."""

    file_record_id: str | None = None

    def to_attributes(self) -> dict[str, Any]:
        attributes = dict(self.attributes)
        if self.file_record_id is not None:
            attributes["fileRef"] = self.file_record_id
        return attributes


@dataclass
class Group(Record):
    """A PBXGroup with its ordered children."""

    display_name: str = ""
    children: list[ChildRef] = field(default_factory=list)

    def to_attributes(self) -> dict[str, Any]:
        attributes = dict(self.attributes)
        attributes["children"] = [child.id for child in self.children]
        return attributes

    def child_ids(self) -> list[str]:
        return [child.id for child in self.children]


@dataclass
class BuildPhase(Record):
    """A PBX*BuildPhase listing build membership identifiers."""

    role: str = ""
    members: list[str] = field(default_factory=list)

    def to_attributes(self) -> dict[str, Any]:
        attributes = dict(self.attributes)
        attributes["files"] = list(self.members)
        return attributes


@dataclass
class OpaqueRecord(Record):
    """Any record type the editor does not model; passed through unchanged."""


@dataclass
class Section:
    """A ``/* Begin <isa> section */`` block of the objects table.

    ``header`` and ``footer`` hold the exact surrounding text; an anonymous
    section (``isa is None``) holds records written outside any section markers.
    """

    isa: str | None
    header: str = ""
    footer: str = ""
    ids: list[str] = field(default_factory=list)

    @classmethod
    def for_isa(cls, isa: str) -> Section:
        return cls(isa=isa, header=f"/* Begin {isa} section */\n", footer=f"/* End {isa} section */\n")


@dataclass(eq=False)
class ProjectGraph:
    """Arena of manifest records plus the text layout needed to re-emit them."""

    objects: dict[str, Record]
    root_object_id: str | None = None
    annotations: dict[str, str] = field(default_factory=dict)
    prefix: str = ""
    suffix: str = ""
    layout: list[Section | str] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProjectGraph):
            return NotImplemented
        return self.root_object_id == other.root_object_id and self.objects == other.objects

    # ------------------------------------------------------------------
    # Table views (table order = order of appearance in the manifest)
    # ------------------------------------------------------------------

    def get(self, record_id: str) -> Record | None:
        return self.objects.get(record_id)

    def file_records(self) -> list[FileRecord]:
        return [r for r in self.objects.values() if isinstance(r, FileRecord)]

    def memberships(self) -> list[BuildMembership]:
        return [r for r in self.objects.values() if isinstance(r, BuildMembership)]

    def groups(self) -> list[Group]:
        return [r for r in self.objects.values() if isinstance(r, Group)]

    def build_phases(self) -> list[BuildPhase]:
        return [r for r in self.objects.values() if isinstance(r, BuildPhase)]

    def records_of(self, isa: str) -> list[Record]:
        return [r for r in self.objects.values() if r.isa == isa]

    def child_kind(self, record_id: str) -> ChildKind:
        """Classify a group child identifier."""
        record = self.objects.get(record_id)
        if isinstance(record, FileRecord):
            return ChildKind.FILE
        if isinstance(record, Group):
            return ChildKind.GROUP
        return ChildKind.OTHER

    def root_group_id(self) -> str | None:
        """Return the project's main group.

        Falls back to the first group that is nobody's child when the
        PBXProject record is missing or does not name one.
        """
        project = self.objects.get(self.root_object_id or "")
        if project is not None:
            main_group = project.attributes.get("mainGroup")
            if isinstance(main_group, str) and isinstance(self.objects.get(main_group), Group):
                return main_group

        nested = {child.id for group in self.groups() for child in group.children}
        for group in self.groups():
            if group.id not in nested:
                return group.id
        return None

    def first_native_target(self) -> Record | None:
        targets = self.records_of("PBXNativeTarget")
        return targets[0] if targets else None

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def used_ids(self) -> set[str]:
        """Every object identifier present in the graph, defined or referenced."""
        used = set(self.objects)
        if self.root_object_id:
            used.add(self.root_object_id)
        for record in self.objects.values():
            _collect_ids(record.to_attributes(), used)
        return used

    def new_id(self, reserved: set[str] | None = None) -> str:
        """Generate an identifier distinct from every id in the graph and ``reserved``."""
        used = self.used_ids() if reserved is None else reserved
        while True:
            candidate = uuid.uuid4().hex[:24].upper()
            if candidate not in used:
                return candidate

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------

    def insert(self, record: Record, annotation: str | None = None) -> None:
        """Add a new record to the table and to its isa section."""
        self.objects[record.id] = record
        if annotation:
            self.annotations[record.id] = annotation
        self._section_for(record.isa).ids.append(record.id)

    def delete(self, record_id: str) -> None:
        """Remove a record from the table, the layout and the annotations."""
        self.objects.pop(record_id, None)
        self.annotations.pop(record_id, None)
        for item in self.layout:
            if isinstance(item, Section) and record_id in item.ids:
                item.ids.remove(record_id)

    def _section_for(self, isa: str) -> Section:
        sections = [item for item in self.layout if isinstance(item, Section)]
        for section in reversed(sections):
            if section.isa == isa:
                return section

        # Xcode orders sections alphabetically by isa
        section = Section.for_isa(isa)
        for index, item in enumerate(self.layout):
            if isinstance(item, Section) and item.isa is not None and item.isa > isa:
                self.layout[index:index] = [section, "\n"]
                return section

        last_section = max(
            (i for i, item in enumerate(self.layout) if isinstance(item, Section)),
            default=None,
        )
        if last_section is None:
            self.layout.extend(["\n", section])
        else:
            self.layout[last_section + 1 : last_section + 1] = ["\n", section]
        return section

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    def check_invariants(self) -> list[str]:
        """Return a description of every violated invariant (empty if consistent)."""
        problems: list[str] = []

        for membership in self.memberships():
            ref = membership.file_record_id
            if ref is None:
                continue
            target = self.objects.get(ref)
            if not isinstance(target, FileRecord) and (
                target is None or target.isa not in FILE_LIKE_ISAS
            ):
                problems.append(f"build file {membership.id} references missing file {ref}")

        for phase in self.build_phases():
            for member in phase.members:
                if not isinstance(self.objects.get(member), BuildMembership):
                    problems.append(f"build phase {phase.id} lists missing build file {member}")

        owners: dict[str, str] = {}
        for group in self.groups():
            for child in group.children:
                if child.id not in self.objects:
                    problems.append(f"group {group.id} lists missing child {child.id}")
                elif child.kind is ChildKind.FILE:
                    if child.id in owners:
                        problems.append(
                            f"file {child.id} appears in groups {owners[child.id]} and {group.id}"
                        )
                    owners[child.id] = group.id

        return problems


def is_object_id(value: str) -> bool:
    """Whether a string has the shape of an Xcode object identifier."""
    return bool(_OBJECT_ID_RE.match(value))


def _collect_ids(value: Any, found: set[str]) -> None:
    if isinstance(value, str):
        if is_object_id(value):
            found.add(value)
    elif isinstance(value, dict):
        for key, item in value.items():
            _collect_ids(key, found)
            _collect_ids(item, found)
    elif isinstance(value, list):
        for item in value:
            _collect_ids(item, found)
