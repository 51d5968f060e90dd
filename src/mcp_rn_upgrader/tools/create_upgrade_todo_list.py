"""Render a trackable todo list for the upgrade files."""

__all__ = ["create_upgrade_todo_list"]


def create_upgrade_todo_list(files: list[str], from_version: str, to_version: str) -> dict:
    """Build a markdown checklist with one item per file.

    Returns:
        dict with:
        - title: 'React Native Upgrade Todo List (<from> -> <to>)'
        - items: Checklist lines '- [ ] Process file: <file>'
        - markdown: Title and items joined for display
        - instructions: How the IDE should use the list
    """
    items = [f"- [ ] Process file: {file}" for file in files]
    title = f"React Native Upgrade Todo List ({from_version} -> {to_version})"

    return {
        "title": title,
        "count": len(items),
        "items": items,
        "markdown": "\n".join([title, "", *items]),
        "instructions": [
            f"Create a todo list with these {len(items)} items",
            "Process files sequentially, one at a time",
            "Mark each item complete after successful processing",
            "Use analyze_file_type before processing each file",
        ],
    }
