"""Add and remove file entries while keeping the manifest tables consistent.

Both operations plan every new record and every affected container first and
only then touch the graph. A failure during planning (bad category, empty
path, unresolved removal target) leaves the graph exactly as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from .classifier import FileKind, classify_path, file_type_for, parse_kind
from .errors import DuplicateFileError, NotFoundError, UnsupportedOperationError
from .locator import locate_group
from .matcher import DEFAULT_STRIP_PREFIX, match_path
from .model import (
    BuildMembership,
    BuildPhase,
    ChildKind,
    ChildRef,
    FileRecord,
    Group,
    ProjectGraph,
    Record,
)

logger = logging.getLogger(__name__)

# Build phase role receiving each kind; headers get no build file
PHASE_ROLES: dict[FileKind, str] = {
    FileKind.SOURCE: "Sources",
    FileKind.RESOURCE: "Resources",
    FileKind.FRAMEWORK: "Frameworks",
}
_PHASE_ISAS: dict[str, str] = {
    "Sources": "PBXSourcesBuildPhase",
    "Resources": "PBXResourcesBuildPhase",
    "Frameworks": "PBXFrameworksBuildPhase",
}


@dataclass(frozen=True)
class AddResult:
    """Outcome of a successful add."""

    file_id: str
    path: str
    kind: FileKind
    group_id: str
    membership_id: str | None = None
    phase_id: str | None = None
    created_group: bool = False
    created_phase: bool = False


@dataclass(frozen=True)
class RemoveOutcome:
    """Outcome of a remove: either the removed ids or diagnostic candidates."""

    status: Literal["removed", "not_found"]
    path: str
    file_id: str | None = None
    membership_ids: tuple[str, ...] = ()
    candidates: tuple[str, ...] = ()
    total_files: int = 0
    touched: tuple[str, ...] = field(default=(), compare=False)

    @property
    def removed(self) -> bool:
        return self.status == "removed"


def _select_phase(graph: ProjectGraph, role: str) -> BuildPhase | None:
    """First phase of ``role`` in the first native target, else first in table order."""
    target = graph.first_native_target()
    if target is not None:
        for phase_id in target.attributes.get("buildPhases", []):
            phase = graph.get(phase_id)
            if isinstance(phase, BuildPhase) and phase.role == role:
                return phase
    for phase in graph.build_phases():
        if phase.role == role:
            return phase
    return None


def add(
    graph: ProjectGraph,
    path: str,
    category: FileKind | str | None = None,
) -> AddResult:
    """Add a file entry to the graph.

    Args:
        graph: Graph to mutate
        path: File path as it should be stored (relative to the project directory)
        category: Explicit kind overriding classification by extension

    Returns:
        AddResult carrying the new file record id

    Raises:
        ValueError: If the path is empty or the category is unknown
        DuplicateFileError: If a file record already stores this exact path
    """
    path = path.strip()
    if not path:
        msg = "File path must not be empty"
        raise ValueError(msg)

    if category is None:
        kind = classify_path(path)
    elif isinstance(category, FileKind):
        kind = category
    else:
        kind = parse_kind(category)

    for existing in graph.file_records():
        if existing.path == path:
            raise DuplicateFileError(path, existing.id)

    # ---- plan -------------------------------------------------------
    reserved = graph.used_ids()
    file_id = graph.new_id(reserved)
    reserved.add(file_id)

    basename = path.rsplit("/", 1)[-1]
    file_attributes: dict = {"lastKnownFileType": file_type_for(path, kind), "path": path}
    if basename != path:
        file_attributes["name"] = basename
    if kind in (FileKind.SOURCE, FileKind.HEADER):
        file_attributes["fileEncoding"] = "4"
    file_attributes["sourceTree"] = "<group>"
    file_record = FileRecord.from_attributes(file_id, file_attributes)

    membership: BuildMembership | None = None
    phase: BuildPhase | None = None
    created_phase = False
    role = PHASE_ROLES.get(kind)
    if role is not None:
        membership = BuildMembership(
            id=graph.new_id(reserved), isa="PBXBuildFile", file_record_id=file_id
        )
        reserved.add(membership.id)
        phase = _select_phase(graph, role)
        if phase is None:
            phase = BuildPhase(
                id=graph.new_id(reserved),
                isa=_PHASE_ISAS[role],
                attributes={
                    "buildActionMask": "2147483647",
                    "runOnlyForDeploymentPostprocessing": "0",
                },
                role=role,
            )
            reserved.add(phase.id)
            created_phase = True

    choice = locate_group(graph, kind, reserved)

    # ---- commit -----------------------------------------------------
    graph.insert(file_record, file_record.display_name)

    if membership is not None and phase is not None:
        graph.insert(membership, f"{file_record.display_name} in {phase.role}")
        if created_phase:
            graph.insert(phase, phase.role)
            target = graph.first_native_target()
            if target is not None:
                target.attributes.setdefault("buildPhases", []).append(phase.id)
                target.touch()
        phase.members.append(membership.id)
        phase.touch()

    group = choice.group
    if choice.created:
        graph.insert(group, group.display_name)
        parent = graph.get(choice.parent_id) if choice.parent_id else None
        if isinstance(parent, Group):
            parent.children.append(ChildRef(id=group.id, kind=ChildKind.GROUP))
            parent.touch()
        else:
            logger.warning("No root group found; new group %s is not attached", group.id)
    group.children.append(ChildRef(id=file_id, kind=ChildKind.FILE))
    group.touch()

    logger.info(
        "Added %s (%s) as %s to group %s",
        path,
        kind.value,
        file_id,
        group.display_name or group.id,
    )
    return AddResult(
        file_id=file_id,
        path=path,
        kind=kind,
        group_id=group.id,
        membership_id=membership.id if membership else None,
        phase_id=phase.id if phase else None,
        created_group=choice.created,
        created_phase=created_phase,
    )


def remove(
    graph: ProjectGraph,
    path: str,
    strip_prefix: str | None = DEFAULT_STRIP_PREFIX,
) -> RemoveOutcome:
    """Remove a file entry and every reference to it.

    Every build phase and every record with a children list is scanned, not
    just the ones that should hold the file, so stray references left by
    other tools are cleared too.
    """
    try:
        file_id = match_path(graph, path, strip_prefix)
    except NotFoundError as e:
        logger.info("Remove target not found: %s", e.path)
        return RemoveOutcome(
            status="not_found",
            path=e.path,
            candidates=tuple(e.candidates),
            total_files=e.total,
        )

    # ---- plan -------------------------------------------------------
    membership_ids = tuple(
        m.id for m in graph.memberships() if m.file_record_id == file_id
    )
    doomed = {file_id, *membership_ids}

    # ---- commit -----------------------------------------------------
    touched: list[str] = []
    for record in graph.objects.values():
        if _drop_references(record, doomed):
            touched.append(record.id)

    for membership_id in membership_ids:
        graph.delete(membership_id)
    graph.delete(file_id)

    logger.info(
        "Removed %s (%s) with %d build file(s)", path, file_id, len(membership_ids)
    )
    return RemoveOutcome(
        status="removed",
        path=path,
        file_id=file_id,
        membership_ids=membership_ids,
        touched=tuple(t for t in touched if t not in doomed),
    )


def _drop_references(record: Record, doomed: set[str]) -> bool:
    """Remove doomed ids from a record's member or children list."""
    if isinstance(record, BuildPhase):
        kept = [m for m in record.members if m not in doomed]
        if len(kept) != len(record.members):
            record.members = kept
            record.touch()
            return True
    elif isinstance(record, Group):
        kept_children = [c for c in record.children if c.id not in doomed]
        if len(kept_children) != len(record.children):
            record.children = kept_children
            record.touch()
            return True
    else:
        children = record.attributes.get("children")
        if isinstance(children, list) and any(c in doomed for c in children):
            record.attributes["children"] = [c for c in children if c not in doomed]
            record.touch()
            return True
    return False


def apply_operation(
    graph: ProjectGraph,
    operation: str,
    path: str,
    category: FileKind | str | None = None,
    strip_prefix: str | None = DEFAULT_STRIP_PREFIX,
) -> AddResult | RemoveOutcome:
    """Dispatch a named operation.

    Raises:
        UnsupportedOperationError: If ``operation`` is not 'add' or 'remove'
    """
    if operation == "add":
        return add(graph, path, category)
    if operation == "remove":
        return remove(graph, path, strip_prefix)
    raise UnsupportedOperationError(operation)
