import os
from pathlib import Path
from typing import Optional

from repodump.errors import NotARepositoryError, TargetNotFoundError
from repodump.walker import find_git_worktree


def resolve_target_directory(path: Optional[Path | str] = None) -> Path:
    """
    Picks the directory to dump.

    An explicit path is returned as given once it is known to exist. Without
    one, the top of the git working tree around the current directory is used.
    """
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise TargetNotFoundError(path)
        return path

    repo_root = find_git_worktree(os.getcwd())
    if repo_root is None:
        raise NotARepositoryError()
    return repo_root
