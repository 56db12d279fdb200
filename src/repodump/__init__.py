__version__ = "0.1.0"

from .errors import (
    RepodumpError,
    InvalidPatternError,
    TargetNotFoundError,
    NotARepositoryError,
    WalkError,
    OutputWriteError,
)

from .patterns import Pattern, PatternSet, compile_glob

from .policy import SelectionPolicy, VCS_METADATA_EXCLUDES

from .walker import Walker, WalkEntry

from .collector import collect_files

from .resolver import resolve_target_directory

from .render import render_tree, render_contents

from .dump import RepoDumper, DumpResult, estimate_tokens
