"""Add or remove a file in the iOS Xcode project of a React Native app.

Reads ios/<App>.xcodeproj/project.pbxproj once, applies the change to the
in-memory graph, and writes the manifest back once. Nothing is written when
any step fails, so the file on disk is either fully updated or untouched.
"""

__all__ = ["sync_xcode_project"]

import logging
from pathlib import Path
from typing import Any

from ..file_helpers import (
    find_pbxproj,
    read_text_file,
    resolve_ios_dir,
    resolve_within,
    write_text_file,
)
from ..helpers.config_loader import get_xcode_config
from ..pbxproj import (
    AddResult,
    ManifestError,
    RemoveOutcome,
    UnsupportedOperationError,
    apply_operation,
    parse,
    serialize,
)
from ..response_models import NEXT_STEPS, SyncResponse, SyncResult

logger = logging.getLogger(__name__)

_SUPPORTED_OPERATIONS = ("add", "remove")

_ADDED_LABELS = {
    "source": "source file",
    "header": "header file",
    "framework": "framework",
    "resource": "resource file",
}


def _failed(reason: str, project_file: Path | None = None, **extra: Any) -> dict:
    response = SyncResponse(
        status="failed",
        reason=reason,
        project_file=str(project_file) if project_file else None,
        **extra,
    )
    return response.model_dump(exclude_none=True)


def _add_result(result: AddResult) -> SyncResult:
    return SyncResult(
        operation="add",
        file_path=result.path,
        file_id=result.file_id,
        kind=result.kind.value,
        group_id=result.group_id,
        created_group=result.created_group,
        build_phase_id=result.phase_id,
        message=f"Added {_ADDED_LABELS[result.kind.value]}: {result.path}",
    )


def _remove_result(outcome: RemoveOutcome) -> SyncResult:
    assert outcome.file_id is not None  # Type narrowing for mypy
    return SyncResult(
        operation="remove",
        file_path=outcome.path,
        file_id=outcome.file_id,
        removed_build_files=list(outcome.membership_ids),
        message=f"Removed file: {outcome.path}",
    )


def sync_xcode_project(
    project_path: str,
    operation: str,
    file_path: str,
    category: str | None = None,
    config: dict[str, Any] | None = None,
) -> dict:
    """Add or remove a file entry in the Xcode project.

    Args:
        project_path: Path to the React Native project root
        operation: 'add' or 'remove'
        file_path: Path relative to the ios/ directory (e.g. 'MyApp/NewFile.swift').
            For remove, a leading 'ios/' is stripped and fuzzy matching applies.
        category: Optional explicit kind for add (source, header, framework, resource)
        config: Server configuration ('xcode' section)

    Returns:
        SyncResponse as a dict:
        - status: 'applied' or 'failed'
        - project_file: Path of the project.pbxproj involved
        - result: operation details when applied
        - reason: error message when failed
        - candidates/total_files: known project paths when remove finds no match
        - next_steps: pod install / rebuild reminders when applied
    """
    if operation not in _SUPPORTED_OPERATIONS:
        return _failed(str(UnsupportedOperationError(operation)))

    xcode = get_xcode_config(config)

    ios_path = resolve_ios_dir(project_path, xcode["ios_dir"])
    if isinstance(ios_path, dict):
        return _failed(ios_path["error"])

    pbxproj_path = find_pbxproj(ios_path)
    if isinstance(pbxproj_path, dict):
        return _failed(pbxproj_path["error"])

    if operation == "add":
        target = resolve_within(ios_path, file_path)
        if isinstance(target, dict):
            return _failed(target["error"], pbxproj_path)
        if not target.exists():
            return _failed(f"File does not exist: {target}", pbxproj_path)

    read_result = read_text_file(pbxproj_path)
    if "error" in read_result:
        return _failed(read_result["error"], pbxproj_path)

    try:
        graph = parse(read_result["content"])
        pre_existing = set(graph.check_invariants())
        outcome = apply_operation(
            graph,
            operation,
            file_path,
            category=category,
            strip_prefix=xcode["strip_prefix"],
        )
    except (ManifestError, ValueError) as e:
        logger.warning("sync_xcode_project %s %s failed: %s", operation, file_path, e)
        return _failed(str(e), pbxproj_path)

    if isinstance(outcome, RemoveOutcome) and not outcome.removed:
        return _failed(
            f"File not found in project: {outcome.path}",
            pbxproj_path,
            candidates=list(outcome.candidates),
            total_files=outcome.total_files,
        )

    warnings = [p for p in graph.check_invariants() if p not in pre_existing]
    for problem in warnings:
        logger.warning("Invariant violated after %s: %s", operation, problem)

    write_error = write_text_file(pbxproj_path, serialize(graph))
    if write_error:
        return _failed(write_error["error"], pbxproj_path)

    result = _add_result(outcome) if isinstance(outcome, AddResult) else _remove_result(outcome)
    response = SyncResponse(
        status="applied",
        project_file=str(pbxproj_path),
        result=result,
        next_steps=NEXT_STEPS,
        warnings=warnings or None,
    )
    return response.model_dump(exclude_none=True)
