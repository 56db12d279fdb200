import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Iterator

from repodump.errors import InvalidPatternError


def to_posix(path: str | PurePath) -> str:
    """Returns the forward-slash form of a relative path."""
    if isinstance(path, PurePath):
        return path.as_posix()
    return path


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """
    Translates the character class opening at `pattern[start] == "["`.
    Returns the regex fragment and the index just past the closing "]".
    """
    i = start + 1
    negate = False
    if i < len(pattern) and pattern[i] in "!^":
        negate = True
        i += 1

    items = []
    first = True
    while i < len(pattern):
        c = pattern[i]
        # A "]" right after the opening bracket is a literal
        if c == "]" and not first:
            break
        first = False

        if c == "\\":
            if i + 1 >= len(pattern):
                raise InvalidPatternError(pattern, "dangling escape")
            i += 1
            c = pattern[i]

        if i + 2 < len(pattern) and pattern[i + 1] == "-" and pattern[i + 2] != "]":
            hi = pattern[i + 2]
            if hi < c:
                raise InvalidPatternError(pattern, f"invalid character range {c}-{hi}")
            items.append(f"{re.escape(c)}-{re.escape(hi)}")
            i += 3
        else:
            items.append(re.escape(c))
            i += 1
    else:
        raise InvalidPatternError(pattern, "unclosed character class")

    body = "".join(items)
    if negate:
        return f"[^/{body}]", i + 1
    # Classes never match the separator
    return f"(?!/)[{body}]", i + 1


def translate(pattern: str) -> str:
    """
    Translates a glob into a regular expression matched against a whole
    forward-slash relative path.

    `*` stays inside one path segment, `**` as a full segment spans any number
    of segments, `?` is one non-separator character, `[...]` is a character
    class and `{a,b}` an alternation. The empty pattern matches only the
    empty path.
    """
    out = []
    in_alt = False
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        at_segment_start = i == 0 or pattern[i - 1] == "/" or (in_alt and pattern[i - 1] in "{,")

        if c == "*":
            if at_segment_start and pattern.startswith("**", i):
                end = i + 2
                if end == n or (in_alt and pattern[end] in ",}"):
                    out.append(".*")
                    i = end
                    continue
                if pattern[end] == "/":
                    out.append("(?:.*/)?")
                    i = end + 1
                    continue
            while i < n and pattern[i] == "*":
                i += 1
            out.append("[^/]*")
            continue

        if c == "?":
            out.append("[^/]")
        elif c == "[":
            fragment, i = _translate_class(pattern, i)
            out.append(fragment)
            continue
        elif c == "{":
            if in_alt:
                raise InvalidPatternError(pattern, "nested alternation")
            in_alt = True
            out.append("(?:")
        elif c == "," and in_alt:
            out.append("|")
        elif c == "}":
            if not in_alt:
                raise InvalidPatternError(pattern, "unopened alternation")
            in_alt = False
            out.append(")")
        elif c == "\\":
            if i + 1 >= n:
                raise InvalidPatternError(pattern, "dangling escape")
            i += 1
            out.append(re.escape(pattern[i]))
        else:
            out.append(re.escape(c))
        i += 1

    if in_alt:
        raise InvalidPatternError(pattern, "unclosed alternation")
    return "".join(out)


def compile_glob(pattern: str) -> re.Pattern:
    """Compiles a glob pattern, raising InvalidPatternError on bad syntax."""
    try:
        return re.compile(translate(pattern), re.DOTALL)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


@dataclass(frozen=True)
class Pattern:
    """A single compiled glob."""
    text: str
    regex: re.Pattern

    @classmethod
    def compile(cls, text: str) -> "Pattern":
        return cls(text=text, regex=compile_glob(text))

    def matches(self, path: str | PurePath) -> bool:
        return self.regex.fullmatch(to_posix(path)) is not None


class PatternSet:
    """
    An unordered collection of globs. A path matches the set when it matches
    any one of its patterns, so an empty set matches nothing.
    """
    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns = tuple(Pattern.compile(p) for p in patterns)

    def matches(self, path: str | PurePath) -> bool:
        path = to_posix(path)
        return any(p.matches(path) for p in self.patterns)

    def is_empty(self) -> bool:
        return not self.patterns

    def __len__(self) -> int:
        return len(self.patterns)

    def __iter__(self) -> Iterator[str]:
        return (p.text for p in self.patterns)

    def __add__(self, other: "PatternSet") -> "PatternSet":
        combined = PatternSet()
        combined.patterns = self.patterns + other.patterns
        return combined

    def __repr__(self):
        return f"PatternSet({list(self)!r})"
