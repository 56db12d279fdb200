from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from repodump.collector import collect_files
from repodump.errors import OutputWriteError
from repodump.policy import SelectionPolicy
from repodump.render import render_contents, render_tree

DEFAULT_OUTPUT = "repodump.txt"


def estimate_tokens(text: str) -> int:
    """Rough LLM token count: one token per four characters."""
    return len(text) // 4


def display_name(path: Path | str, default: str) -> str:
    name = Path(path).name
    return default if name in ("", ".", "..") else name


@dataclass
class DumpResult:
    text: str
    structure_file_count: int = 0
    content_file_count: int = 0

    @property
    def size(self) -> int:
        """Size in bytes of the text once written as UTF-8."""
        return len(self.text.encode("utf-8"))

    @property
    def tokens(self) -> int:
        return estimate_tokens(self.text)


class RepoDumper:
    """
    Builds the dump text for a directory: an optional tree section, an
    optional contents section and an optional prompt line.

    The contents section is selected by `content_policy`. The tree section
    uses `tree_policy`, or the contents file list when it is None.
    """
    def __init__(self, content_policy: SelectionPolicy, tree_policy: Optional[SelectionPolicy] = None,
                 respect_ignore_files: bool = True):
        self.content_policy = content_policy
        self.tree_policy = tree_policy
        self.respect_ignore_files = respect_ignore_files

    @classmethod
    def from_patterns(cls, filter: Iterable[str] = (), exclude: Iterable[str] = (),
                      include: Iterable[str] = (), prune_tree: bool = False,
                      respect_ignore_files: bool = True) -> "RepoDumper":
        """
        Compiles the user's patterns. Without `prune_tree` the tree ignores
        the filter and exclude patterns and keeps only the standing .git
        exclusion and the include patterns.

        :raises InvalidPatternError: before any filesystem access.
        """
        include = list(include)
        content_policy = SelectionPolicy.from_patterns(filter, exclude, include)
        tree_policy = None if prune_tree else SelectionPolicy.from_patterns(include=include)
        return cls(content_policy, tree_policy, respect_ignore_files=respect_ignore_files)

    def dump(self, root_path: Path | str, tree: bool = True, contents: bool = True,
             prompt: Optional[str] = None, show_progress: bool = False,
             on_unreadable: Optional[Callable[[str], None]] = None) -> DumpResult:
        root_path = Path(root_path)

        content_files = collect_files(root_path, self.content_policy, self.respect_ignore_files)
        if self.tree_policy is None:
            tree_files = content_files
        else:
            tree_files = collect_files(root_path, self.tree_policy, self.respect_ignore_files)

        result = DumpResult(text="")
        parts = []

        if tree:
            parts.append(render_tree(display_name(root_path, "root"), tree_files))
            parts.append("\n")
            result.structure_file_count = len(tree_files)

        if contents:
            parts.append(render_contents(root_path, content_files, show_progress=show_progress,
                                         on_unreadable=on_unreadable))
            result.content_file_count = len(content_files)

        if prompt is not None:
            parts.append(f"\nPrompt: {prompt}\n")

        result.text = "".join(parts)
        return result


def write_output(output_path: Path | str, text: str):
    """Writes the dump in one go. A write that fails partway leaves no file behind."""
    output_path = Path(output_path)
    opened = False
    try:
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            opened = True
            f.write(text)
    except OSError as e:
        if opened:
            output_path.unlink(missing_ok=True)
        raise OutputWriteError(output_path, e) from e


def format_summary(root_path: Path | str, result: DumpResult) -> str:
    return "\n".join([
        f"Repository: {display_name(root_path, 'unknown')}",
        f"Files in structure: {result.structure_file_count}",
        f"Files in contents: {result.content_file_count}",
        f"Output size: {result.size} bytes",
        f"Estimated tokens: {result.tokens}",
    ])
