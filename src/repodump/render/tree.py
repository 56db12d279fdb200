from collections import defaultdict
from pathlib import PurePath
from typing import Iterable

from repodump.patterns import to_posix

TREE_HEADER = "Directory Structure:"

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


def build_children(files: Iterable[str | PurePath]) -> dict[str, set[str]]:
    """
    Maps each directory path to the full paths of its immediate children.
    The root is the empty string. Only directories ever become keys, so a
    path is a directory exactly when it is in the mapping.
    """
    children = defaultdict(set)
    for file in files:
        parent = ""
        # Empty segments ("a//b", leading "/") are dropped
        for part in (p for p in to_posix(file).split("/") if p):
            current = f"{parent}/{part}" if parent else part
            children[parent].add(current)
            parent = current
    return dict(children)


def render_tree(root_name: str, files: Iterable[str | PurePath]) -> str:
    """
    Renders relative file paths as an indented tree below `root_name`.

    Directories are derived from the file paths, each shown once with a
    trailing slash. Siblings are ordered by path, whatever the input order.
    """
    lines = [TREE_HEADER, f"{root_name}/"]
    children = build_children(files)

    def _render(directory: str, prefix: str):
        entries = sorted(children.get(directory, ()))
        for i, child in enumerate(entries):
            is_last = i == len(entries) - 1
            is_dir = child in children
            name = child.rsplit("/", 1)[-1]

            connector = LAST_BRANCH if is_last else BRANCH
            lines.append(f"{prefix}{connector}{name}{'/' if is_dir else ''}")

            if is_dir:
                _render(child, prefix + (SPACE if is_last else PIPE))

    _render("", "")
    return "\n".join(lines) + "\n"
