"""Response models for the sync_xcode_project MCP tool.

Every response is either 'applied' (the manifest was rewritten once) or
'failed' (the manifest on disk is untouched).
"""

from pydantic import BaseModel, Field

NEXT_STEPS = [
    "Run 'cd ios && pod install'",
    "Open .xcworkspace in Xcode",
    "Clean and rebuild (Cmd+Shift+K, then Cmd+B)",
]


class SyncResult(BaseModel):
    """Details of a successfully applied add or remove."""

    operation: str = Field(description="'add' or 'remove'")
    file_path: str = Field(description="Path as stored in (or matched against) the project")
    file_id: str = Field(description="Identifier of the file reference added or removed")
    kind: str | None = Field(
        default=None, description="File kind: source, header, framework or resource (add only)"
    )
    group_id: str | None = Field(default=None, description="Group that received the file (add)")
    created_group: bool | None = Field(
        default=None, description="Whether a new group had to be created (add)"
    )
    build_phase_id: str | None = Field(
        default=None, description="Build phase the file was added to (add, non-headers)"
    )
    removed_build_files: list[str] | None = Field(
        default=None, description="Build file identifiers deleted with the file (remove)"
    )
    message: str = Field(description="Human-readable summary, e.g. 'Added source file: X'")


class SyncResponse(BaseModel):
    """Standard response for sync_xcode_project."""

    status: str = Field(description="'applied' if the project was updated, 'failed' otherwise")
    project_file: str | None = Field(default=None, description="Absolute path to project.pbxproj")
    result: SyncResult | None = Field(default=None, description="Present when status='applied'")
    reason: str | None = Field(default=None, description="Error message when status='failed'")
    candidates: list[str] | None = Field(
        default=None, description="Sample of file paths in the project (remove not found)"
    )
    total_files: int | None = Field(
        default=None, description="Number of file references in the project (remove not found)"
    )
    next_steps: list[str] = Field(default_factory=list, description="What to do after syncing")
    warnings: list[str] | None = Field(
        default=None, description="Non-fatal warnings (e.g. pre-existing inconsistencies)"
    )

    def model_post_init(self, __context, /) -> None:
        """Validate response invariants."""
        if self.status not in ("applied", "failed"):
            msg = f"status must be 'applied' or 'failed', got {self.status!r}"
            raise ValueError(msg)
        if self.status == "applied" and (self.result is None or self.reason):
            msg = "status='applied' requires a result and no reason"
            raise ValueError(msg)
        if self.status == "failed" and (not self.reason or self.result is not None):
            msg = "status='failed' requires a reason and no result"
            raise ValueError(msg)
