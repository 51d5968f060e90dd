"""Group selection for newly added files."""

from __future__ import annotations

from dataclasses import dataclass

from .classifier import GROUP_NAMES, FileKind
from .model import ChildKind, FileRecord, Group, ProjectGraph


@dataclass(frozen=True)
class GroupChoice:
    """Where a new file goes.

    ``group`` is an existing group, or a new one not yet inserted in the graph
    (``created`` is True) that must be attached under ``parent_id``.
    """

    group: Group
    created: bool
    parent_id: str | None = None


def find_code_group(graph: ProjectGraph) -> Group | None:
    """Return the first group (table order) holding at least one source file."""
    for group in graph.groups():
        for child in group.children:
            if child.kind is not ChildKind.FILE:
                continue
            record = graph.get(child.id)
            if isinstance(record, FileRecord) and record.kind is FileKind.SOURCE:
                return group
    return None


def locate_group(graph: ProjectGraph, kind: FileKind, reserved: set[str]) -> GroupChoice:
    """Pick the container group for a new file of ``kind``.

    Uses the first code-holding group regardless of ``kind``, so new files do
    not land in auxiliary groups (Pods, generated code). Falls back to a new
    group named after the kind, to be attached to the project's root group.

    Args:
        graph: Parsed project graph (not modified)
        kind: Kind of the file being added
        reserved: Identifiers already taken, including ones planned by the caller
    """
    existing = find_code_group(graph)
    if existing is not None:
        return GroupChoice(group=existing, created=False)

    group_id = graph.new_id(reserved)
    reserved.add(group_id)
    group = Group(
        id=group_id,
        isa="PBXGroup",
        attributes={"name": GROUP_NAMES[kind], "sourceTree": "<group>"},
        display_name=GROUP_NAMES[kind],
    )
    return GroupChoice(group=group, created=True, parent_id=graph.root_group_id())
