"""Manifest serializer: ProjectGraph -> project.pbxproj text.

Records that still carry their parsed source text are emitted verbatim.
Everything else is rendered the way Xcode writes it: build files and file
references on one line, other records spread over tab-indented lines,
``isa`` first and the remaining keys in sorted order.
"""

from __future__ import annotations

from .model import ProjectGraph, Record, Section
from .plist import format_string, format_value

# Xcode writes these record types on a single line
_INLINE_ISAS = frozenset({"PBXBuildFile", "PBXFileReference"})


def serialize(graph: ProjectGraph) -> str:
    """Render the graph back to manifest text."""
    parts: list[str] = [graph.prefix]
    for item in graph.layout:
        if isinstance(item, Section):
            parts.append(_render_section(graph, item))
        else:
            parts.append(item)
    parts.append(graph.suffix)
    return "".join(parts)


def _render_section(graph: ProjectGraph, section: Section) -> str:
    parts = [section.header]
    for record_id in section.ids:
        record = graph.objects.get(record_id)
        if record is None:
            continue
        if record.source_text is not None:
            parts.append(record.source_text)
        else:
            parts.append(render_record(graph, record))
    parts.append(section.footer)
    return "".join(parts)


def render_record(graph: ProjectGraph, record: Record) -> str:
    """Render one objects-table entry, including indentation and trailing newline."""
    attributes = record.to_attributes()
    ordered = {"isa": record.isa}
    for key in sorted(attributes):
        ordered[key] = attributes[key]

    inline = record.isa in _INLINE_ISAS
    body = format_value(ordered, graph.annotations, 2, inline=inline)
    return f"\t\t{format_string(record.id, graph.annotations)} = {body};\n"
