from pathlib import Path
from typing import Callable, Optional, Sequence

from tqdm import tqdm

BANNER = "=" * 48
BINARY_PLACEHOLDER = "[Binary file or read error]"


def read_text(path: Path) -> Optional[str]:
    """Returns the file's text, or None if it cannot be read or is not UTF-8."""
    try:
        # Bytes first so line endings come through untouched
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def render_contents(root_path: Path | str, files: Sequence[str], show_progress: bool = False,
                    on_unreadable: Optional[Callable[[str], None]] = None) -> str:
    """
    Concatenates the selected files, each under a FILE banner.

    A file that cannot be read as text gets a placeholder instead of its
    body; `on_unreadable` is called with its relative path.
    """
    root_path = Path(root_path)
    blocks = []

    for relative_path in tqdm(files, desc="Reading files", unit="file", disable=not show_progress):
        block = f"{BANNER}\nFILE: {relative_path}\n{BANNER}\n"

        text = read_text(root_path / relative_path)
        if text is None:
            if on_unreadable is not None:
                on_unreadable(relative_path)
            block += f"{BINARY_PLACEHOLDER}\n"
        else:
            block += text if text.endswith("\n") else text + "\n"
        blocks.append(block)

    return "\n".join(blocks)
