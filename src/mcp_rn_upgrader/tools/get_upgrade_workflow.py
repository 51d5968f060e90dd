"""Upgrade workflow tool.

Returns the fixed sequence an agent should follow for a React Native upgrade.
Agents are expected to call this first.
"""

__all__ = ["get_upgrade_workflow"]

WORKFLOW_STEPS: list[dict] = [
    {
        "step": 1,
        "title": "Get Current Version",
        "actions": ["Call get_current_rn_version with the project path"],
    },
    {
        "step": 2,
        "title": "Confirm Target Version",
        "actions": ["Call get_target_version with the desired version"],
    },
    {
        "step": 3,
        "title": "Get File List",
        "actions": [
            "Call get_upgrade_diff_files with from_version and to_version",
            "The 'files' list holds every file that needs changes",
        ],
    },
    {
        "step": 4,
        "title": "Create Todo List (recommended)",
        "actions": [
            "Call create_upgrade_todo_list with the files from step 3",
            "Create a todo item per file to track progress",
        ],
    },
    {
        "step": 5,
        "title": "Process Files ONE BY ONE",
        "actions": [
            "Call get_file_specific_diff for a single file",
            "If the file is under ios/ and is being added or removed, call sync_xcode_project first",
            "Apply the diff to the project file",
            "Verify the change, then move to the next file",
            "Do not process several files at once",
        ],
    },
]

SPECIAL_HANDLING: dict[str, str] = {
    "script_files": (
        "gradlew and gradlew.bat are executable text files: patch them normally with the diff."
    ),
    "binary_files": (
        "True binary files (.jar, .png, .so, fonts, native libraries) cannot be patched. "
        "The user must download or replace them from the React Native template; "
        "give clear download instructions for each."
    ),
    "complex_migrations": (
        "Never skip migrations such as AppDelegate.mm -> AppDelegate.swift. Parse the existing "
        "file for custom logic (Firebase, Google Maps, ...), generate the new file from the "
        "template structure and port ALL customizations."
    ),
    "ios_project_sync": (
        "After adding or removing iOS native files call sync_xcode_project with operation "
        "'add' or 'remove' and a path relative to ios/ (e.g. 'MyApp/NewFile.swift'). "
        "The file kind is detected from the extension. Afterwards run 'cd ios && pod install' "
        "and open the .xcworkspace, not the .xcodeproj."
    ),
}


def get_upgrade_workflow() -> dict:
    """Return the step-by-step upgrade workflow.

    Returns:
        dict with:
        - steps: Ordered list of {step, title, actions}
        - special_handling: Guidance keyed by file category
        - important: Reminder to process files sequentially
    """
    return {
        "steps": WORKFLOW_STEPS,
        "special_handling": SPECIAL_HANDLING,
        "important": (
            "Process files sequentially, not in parallel. This keeps dependency handling "
            "and conflict resolution predictable."
        ),
    }
