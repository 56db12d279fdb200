from pathlib import Path


class RepodumpError(Exception):
    """Base class for every error that aborts a dump."""


class InvalidPatternError(RepodumpError, ValueError):
    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid glob pattern: {pattern} ({reason})")


class TargetNotFoundError(RepodumpError, FileNotFoundError):
    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Directory does not exist: {self.path}")


class NotARepositoryError(RepodumpError):
    def __init__(self):
        super().__init__(
            "The current directory is not a git repository. "
            "For use outside of git repositories, please provide a directory path."
        )


class WalkError(RepodumpError):
    """Raised when the directory walk cannot list a directory or read an ignore file."""
    def __init__(self, operation: str, path: Path | str, cause: OSError):
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{operation}: {self.path} ({cause.strerror or cause})")


class OutputWriteError(RepodumpError):
    def __init__(self, path: Path | str, cause: OSError):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to write output file: {self.path} ({cause.strerror or cause})")
