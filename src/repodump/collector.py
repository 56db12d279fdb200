from pathlib import Path

from repodump.errors import WalkError
from repodump.policy import SelectionPolicy
from repodump.walker import Walker


def collect_files(root_path: Path | str, policy: SelectionPolicy,
                  respect_ignore_files: bool = True) -> list[str]:
    """
    Walks `root_path` and returns the forward-slash relative paths of every
    regular file the policy selects, sorted by their full string.

    :param root_path: The directory to scan.
    :param policy: Decides which relative paths are kept.
    :param respect_ignore_files: Honor .gitignore files and git's own excludes.
    :raises WalkError: if the walk fails or a path cannot be made relative to the root.
    """
    root_path = Path(root_path)
    files = set()

    for entry in Walker(root_path, respect_ignore_files=respect_ignore_files):
        if not entry.is_file:
            continue

        try:
            relative_path = entry.path.relative_to(root_path).as_posix()
        except ValueError as e:
            raise WalkError("Failed to create relative path", entry.path, OSError(str(e))) from e

        if policy.should_include(relative_path):
            files.add(relative_path)

    return sorted(files)
