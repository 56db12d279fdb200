import os
import subprocess
from pathlib import Path
from typing import Iterator, NamedTuple, Optional

import rootutils
from pathspec import GitIgnoreSpec

from repodump.errors import WalkError

IGNORE_FILENAME = ".gitignore"


class WalkEntry(NamedTuple):
    path: Path
    is_file: bool


def find_git_worktree(path: Path | str) -> Optional[Path]:
    """Returns the top of the git working tree containing `path`, or None."""
    try:
        return rootutils.find_root(search_from=path, indicator=".git")
    except FileNotFoundError:
        return None


def global_excludes_file() -> Path:
    """Locates the user's global git excludes file (`core.excludesFile`)."""
    try:
        result = subprocess.run(
            ["git", "config", "--global", "--get", "core.excludesFile"],
            capture_output=True, text=True, check=False,
        )
        if result.returncode == 0 and result.stdout.strip():
            return Path(result.stdout.strip()).expanduser()
    except OSError:
        # git executable missing, fall back to git's default location
        pass
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "git" / "ignore"


def _join(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


def _read_lines(path: Path) -> Optional[list[str]]:
    if not path.is_file():
        return None
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read().splitlines()
    except OSError as e:
        raise WalkError("Failed to read ignore file", path, e) from e


def _read_spec(path: Path) -> Optional[GitIgnoreSpec]:
    lines = _read_lines(path)
    return None if lines is None else GitIgnoreSpec.from_lines(lines)


def _escape(name: str) -> str:
    return "".join("\\" + c if c in "*?[]\\" else c for c in name)


def _read_spec_above_root(path: Path, root_dirs: list[str]) -> Optional[GitIgnoreSpec]:
    """
    Reads an ignore file that sits above the walk root, so that no rule
    ignores the root itself or one of its ancestors (`root_dirs`, relative
    to the file's directory, outermost first).

    A name-only rule (`build/`, `**/vendor`) that hits the root is anchored
    below it and still applies to nested directories of that name. Any other
    rule that hits the root is dropped.
    """
    lines = _read_lines(path)
    if lines is None:
        return None

    kept = []
    for line in lines:
        rule = GitIgnoreSpec.from_lines([line])
        if not any(rule.check_file(d + "/").include for d in root_dirs):
            kept.append(line)
            continue

        body = line.rstrip()
        if body.startswith("**/"):
            body = body[3:]
        if "/" not in body.rstrip("/"):
            kept.append(f"/{_escape(root_dirs[-1])}/**/{body}")
    return GitIgnoreSpec.from_lines(kept)


def _decide(spec: GitIgnoreSpec, rel: str, is_dir: bool) -> Optional[bool]:
    """True (ignored), False (re-included by a negation) or None (no rule applies)."""
    return spec.check_file(rel + "/" if is_dir else rel).include


class IgnoreRules:
    """
    Git-style ignore rules for one walk.

    Paths are kept relative to the scope: the git working tree when the walk
    root is inside one, otherwise the walk root itself. `prefix` is the walk
    root's position inside the scope.
    """
    def __init__(self, prefix: str = "", repo_specs: tuple = ()):
        self.prefix = prefix
        self.repo_specs = tuple(s for s in repo_specs if s is not None)
        self.dir_specs = {}

    @classmethod
    def for_root(cls, root: Path | str) -> "IgnoreRules":
        root = Path(root).resolve()
        worktree = find_git_worktree(root)
        if worktree is None:
            return cls()

        prefix = root.relative_to(worktree).as_posix()
        prefix = "" if prefix == "." else prefix
        parts = prefix.split("/") if prefix else []

        def _root_dirs(depth):
            # The root and its ancestors, relative to the directory at `depth`
            return ["/".join(parts[depth:k]) for k in range(depth + 1, len(parts) + 1)]

        repo_specs = []
        git_dir = worktree / ".git"
        if git_dir.is_dir():
            repo_specs.append(_read_spec_above_root(git_dir / "info" / "exclude", _root_dirs(0)))
        repo_specs.append(_read_spec_above_root(global_excludes_file(), _root_dirs(0)))
        rules = cls(prefix=prefix, repo_specs=tuple(repo_specs))

        # .gitignore files between the working tree top and the walk root
        for depth in range(len(parts)):
            scope_dir = "/".join(parts[:depth])
            spec = _read_spec_above_root(worktree / scope_dir / IGNORE_FILENAME, _root_dirs(depth))
            rules._add_dir_spec(scope_dir, spec)
        return rules

    def _add_dir_spec(self, scope_dir: str, spec: Optional[GitIgnoreSpec]):
        if spec is not None:
            self.dir_specs[scope_dir] = spec

    def load_directory(self, directory: Path, rel_dir: str):
        """Picks up the ignore file of a directory as the walk enters it."""
        self._add_dir_spec(_join(self.prefix, rel_dir), _read_spec(directory / IGNORE_FILENAME))

    def is_ignored(self, rel: str, is_dir: bool) -> bool:
        scope_path = _join(self.prefix, rel)

        # Nearest ignore file first
        parts = scope_path.split("/")
        for depth in range(len(parts) - 1, -1, -1):
            scope_dir = "/".join(parts[:depth])
            spec = self.dir_specs.get(scope_dir)
            if spec is None:
                continue
            decision = _decide(spec, "/".join(parts[depth:]), is_dir)
            if decision is not None:
                return decision

        for spec in self.repo_specs:
            decision = _decide(spec, scope_path, is_dir)
            if decision is not None:
                return decision
        return False


class Walker:
    """
    An iterable over every entry below `root`, hidden entries included.
    Yields WalkEntry(path, is_file) with `path` joined onto `root` as given.

    With `respect_ignore_files`, ignored files are skipped and ignored
    directories are not descended into. The root itself is never ignored.
    """
    def __init__(self, root: Path | str, respect_ignore_files: bool = True):
        self.root = Path(root)
        self.respect_ignore_files = respect_ignore_files

    def __iter__(self) -> Iterator[WalkEntry]:
        rules = IgnoreRules.for_root(self.root) if self.respect_ignore_files else None

        def _raise(err: OSError):
            raise WalkError("Failed to read directory entry", err.filename or self.root, err)

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_raise):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.root).as_posix()
            rel_dir = "" if rel_dir == "." else rel_dir

            if rules is not None:
                rules.load_directory(current, rel_dir)
                dirnames[:] = [d for d in dirnames if not rules.is_ignored(_join(rel_dir, d), is_dir=True)]
            dirnames.sort()

            for name in dirnames:
                yield WalkEntry(current / name, False)

            for name in sorted(filenames):
                if rules is not None and rules.is_ignored(_join(rel_dir, name), is_dir=False):
                    continue
                path = current / name
                # Dangling symlinks and special files are not regular files
                yield WalkEntry(path, path.is_file())
