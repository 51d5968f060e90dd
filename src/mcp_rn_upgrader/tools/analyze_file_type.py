"""Classify an upgrade file by how it should be handled.

Categories:
- patchable: normal diff patching (includes script files like gradlew)
- binary_manual: user must download/replace manually (JAR, images, native libs)
- complex_migration: language migration that must carry over custom logic
"""

__all__ = ["analyze_file_type"]

_SCRIPT_FILES = frozenset({"gradlew", "gradlew.bat"})

_BINARY_EXTENSIONS = frozenset(
    {"jar", "png", "jpg", "jpeg", "gif", "ico", "ttf", "otf", "so", "a", "dylib"}
)

_COMPLEX_MIGRATIONS: list[tuple[str, str]] = [
    ("AppDelegate.mm", "AppDelegate.swift"),
    ("AppDelegate.m", "AppDelegate.swift"),
    ("MainActivity.java", "MainActivity.kt"),
]

CATEGORY_DESCRIPTIONS: dict[str, str] = {
    "patchable": "Normal diff patching (includes script files like gradlew)",
    "binary_manual": "User must download manually (JAR, images, native libs)",
    "complex_migration": "Requires custom logic migration",
}


def analyze_file_type(file_name: str) -> dict:
    """Determine whether a file is patchable, binary, or a complex migration.

    Migration detection wins over the extension check.

    Returns:
        dict with file_name, file_type, instructions and the category legend
    """
    basename = file_name.rsplit("/", 1)[-1].lower()
    extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""

    file_type = "patchable"
    instructions = "This file can be patched normally with diff."

    if extension in _BINARY_EXTENSIONS:
        file_type = "binary_manual"
        instructions = (
            f"Binary file ({extension}): User must manually download/replace from React Native "
            "template. Provide download instructions to user."
        )
    elif basename in _SCRIPT_FILES:
        instructions = (
            "Script file: Apply diff normally. These are text files that can be patched "
            "despite being executables."
        )

    for source, target in _COMPLEX_MIGRATIONS:
        if source in file_name or target in file_name:
            file_type = "complex_migration"
            instructions = (
                f"Complex migration detected ({source} -> {target}). Parse existing file for "
                "custom logic (Firebase, Google Maps, etc.) and migrate ALL customizations. "
                "DO NOT skip this migration."
            )
            break

    return {
        "file_name": file_name,
        "file_type": file_type,
        "instructions": instructions,
        "categories": CATEGORY_DESCRIPTIONS,
    }
