from pathlib import PurePath
from typing import Iterable, Optional

from repodump.patterns import PatternSet, to_posix

# Always appended to the exclude set. Being ordinary exclude patterns, a user
# include pattern can still bring a path under .git/ back.
VCS_METADATA_EXCLUDES = (".git", ".git/**")


class SelectionPolicy:
    """
    Decides whether a relative path is selected, in three stages:

    1. Filter: when configured, the path must match a filter pattern.
       `filter_set=None` means no filter was configured and every path passes.
    2. Exclude: a path matching no exclude pattern is selected.
    3. Include: an excluded path is selected only if it matches an include
       pattern. Includes override excludes, never the filter.
    """
    def __init__(self, filter_set: Optional[PatternSet] = None,
                 exclude_set: Optional[PatternSet] = None,
                 include_set: Optional[PatternSet] = None):
        self.filter_set = filter_set
        self.exclude_set = exclude_set if exclude_set is not None else PatternSet()
        self.include_set = include_set if include_set is not None else PatternSet()

    @classmethod
    def from_patterns(cls, filter: Iterable[str] = (), exclude: Iterable[str] = (),
                      include: Iterable[str] = (), exclude_vcs_metadata: bool = True) -> "SelectionPolicy":
        """
        Compiles pattern strings into a policy. An empty filter list means
        "unconfigured". With `exclude_vcs_metadata`, the standing `.git`
        exclusion is added to the user's exclude patterns.

        :raises InvalidPatternError: naming the first pattern that fails to compile.
        """
        filter = list(filter)
        exclude_set = PatternSet(exclude)
        if exclude_vcs_metadata:
            exclude_set = exclude_set + PatternSet(VCS_METADATA_EXCLUDES)

        return cls(
            filter_set=PatternSet(filter) if filter else None,
            exclude_set=exclude_set,
            include_set=PatternSet(include),
        )

    @property
    def has_filter(self) -> bool:
        return self.filter_set is not None

    def should_include(self, path: str | PurePath) -> bool:
        path = to_posix(path)

        # 1. Filter stage short-circuits everything else
        if self.filter_set is not None and not self.filter_set.matches(path):
            return False

        # 2. Exclude stage
        if not self.exclude_set.matches(path):
            return True

        # 3. Include overrides the exclusion
        return self.include_set.matches(path)

    def __repr__(self):
        return (f"SelectionPolicy(filter={self.filter_set!r}, "
                f"exclude={self.exclude_set!r}, include={self.include_set!r})")
