"""File kind classification by extension and Xcode file type.

Every path maps to exactly one FileKind; unknown extensions fall back to
RESOURCE so that no input is ever rejected. Parsed records also consult
their stored file type, which is how an explicit category is persisted.
"""

from enum import Enum


class FileKind(str, Enum):
    """Semantic category of a file in the project manifest."""

    SOURCE = "source"
    HEADER = "header"
    FRAMEWORK = "framework"
    RESOURCE = "resource"


_SOURCE_EXTENSIONS = frozenset({"swift", "m", "mm", "cpp", "c"})
_HEADER_EXTENSIONS = frozenset({"h", "hpp"})
_FRAMEWORK_EXTENSIONS = frozenset({"framework", "a", "dylib"})

# Xcode's lastKnownFileType for common extensions; "file" otherwise
_LAST_KNOWN_FILE_TYPES: dict[str, str] = {
    "swift": "sourcecode.swift",
    "m": "sourcecode.c.objc",
    "mm": "sourcecode.cpp.objcpp",
    "cpp": "sourcecode.cpp.cpp",
    "c": "sourcecode.c.c",
    "h": "sourcecode.c.h",
    "hpp": "sourcecode.cpp.h",
    "framework": "wrapper.framework",
    "a": "archive.ar",
    "dylib": "compiled.mach-o.dylib",
    "storyboard": "file.storyboard",
    "xib": "file.xib",
    "xcassets": "folder.assetcatalog",
    "xcprivacy": "text.xml",
    "plist": "text.plist.xml",
    "strings": "text.plist.strings",
    "json": "text.json",
    "png": "image.png",
    "jpg": "image.jpeg",
    "jpeg": "image.jpeg",
    "bundle": "wrapper.plug-in",
    "xcconfig": "text.xcconfig",
}

# File types that pin a record's kind regardless of its extension; any other
# type (and a missing one) defers to the extension
_KINDS_BY_FILE_TYPE: dict[str, FileKind] = {
    "sourcecode.swift": FileKind.SOURCE,
    "sourcecode.c.objc": FileKind.SOURCE,
    "sourcecode.cpp.objcpp": FileKind.SOURCE,
    "sourcecode.cpp.cpp": FileKind.SOURCE,
    "sourcecode.c.c": FileKind.SOURCE,
    "sourcecode.c.h": FileKind.HEADER,
    "sourcecode.cpp.h": FileKind.HEADER,
    "wrapper.framework": FileKind.FRAMEWORK,
    "archive.ar": FileKind.FRAMEWORK,
    "compiled.mach-o.dylib": FileKind.FRAMEWORK,
    "file": FileKind.RESOURCE,
}

# Written when the extension's own file type would imply another kind
_FILE_TYPES_BY_KIND: dict[FileKind, str] = {
    FileKind.SOURCE: "sourcecode.c.c",
    FileKind.HEADER: "sourcecode.c.h",
    FileKind.FRAMEWORK: "wrapper.framework",
    FileKind.RESOURCE: "file",
}

# Group created by the locator when no code-holding group exists
GROUP_NAMES: dict[FileKind, str] = {
    FileKind.SOURCE: "Sources",
    FileKind.HEADER: "Headers",
    FileKind.FRAMEWORK: "Frameworks",
    FileKind.RESOURCE: "Resources",
}


def file_extension(path: str) -> str:
    """Return the lower-cased extension of the last path segment ('' if none)."""
    basename = path.rstrip("/").rsplit("/", 1)[-1]
    if "." not in basename:
        return ""
    return basename.rsplit(".", 1)[-1].lower()


def classify_path(path: str) -> FileKind:
    """Map a file path to its kind by extension."""
    ext = file_extension(path)
    if ext in _SOURCE_EXTENSIONS:
        return FileKind.SOURCE
    if ext in _HEADER_EXTENSIONS:
        return FileKind.HEADER
    if ext in _FRAMEWORK_EXTENSIONS:
        return FileKind.FRAMEWORK
    return FileKind.RESOURCE


def last_known_file_type(path: str) -> str:
    """Return the Xcode file type identifier written for a new file record."""
    return _LAST_KNOWN_FILE_TYPES.get(file_extension(path), "file")


def parse_kind(value: str) -> FileKind:
    """Parse an explicit category name.

    Accepts the enum values plus 'framework-or-library' and 'library'.

    Raises:
        ValueError: If the name is not a known category
    """
    normalized = value.strip().lower()
    if normalized in ("framework-or-library", "library"):
        return FileKind.FRAMEWORK
    try:
        return FileKind(normalized)
    except ValueError:
        valid = ", ".join(kind.value for kind in FileKind)
        msg = f"Unknown file category '{value}'. Expected one of: {valid}"
        raise ValueError(msg) from None


def classify_record(path: str, file_type: str | None = None) -> FileKind:
    """Kind of an existing file record.

    A known ``lastKnownFileType``/``explicitFileType`` wins over the
    extension, so an explicit category chosen on add survives a reload.
    """
    if file_type:
        kind = _KINDS_BY_FILE_TYPE.get(file_type)
        if kind is not None:
            return kind
    return classify_path(path)


def file_type_for(path: str, kind: FileKind) -> str:
    """File type to write for a new record of ``kind`` at ``path``.

    The extension's own type is used unless it would classify the record
    as a different kind.
    """
    file_type = last_known_file_type(path)
    if classify_record(path, file_type) is kind:
        return file_type
    return _FILE_TYPES_BY_KIND[kind]
