"""Search patterns and queries."""

import re
from dataclasses import dataclass, field

from ifnotnow.errors import InvalidPatternError


@dataclass(frozen=True)
class Keyword:
    """Case-sensitive literal text."""

    text: str


@dataclass(frozen=True)
class Regex:
    """A regular expression, compiled when the value is built."""

    source: str
    compiled: re.Pattern[str] = field(compare=False, repr=False)


Pattern = Keyword | Regex


@dataclass(frozen=True)
class KeywordSpec:
    text: str


@dataclass(frozen=True)
class RegexSpec:
    source: str


PatternSpec = KeywordSpec | RegexSpec


@dataclass(frozen=True)
class ContextNames:
    """Match against the names of contexts."""

    pattern: Pattern


@dataclass(frozen=True)
class ContextItems:
    """Match against the text of every item in a context."""

    pattern: Pattern


Query = ContextNames | ContextItems


def compile_pattern(spec: PatternSpec) -> Pattern:
    """Validate a pattern spec and build the matching Pattern.

    Raises:
        InvalidPatternError: The keyword is empty or the regex does not compile.
    """
    if isinstance(spec, KeywordSpec):
        if not spec.text:
            msg = "Keyword pattern must not be empty"
            raise InvalidPatternError(msg)
        return Keyword(text=spec.text)
    try:
        compiled = re.compile(spec.source)
    except re.error as e:
        msg = f"Invalid regex {spec.source!r}: {e}"
        raise InvalidPatternError(msg) from e
    return Regex(source=spec.source, compiled=compiled)


def count_matches(text: str, pattern: Pattern) -> int:
    """Count non-overlapping matches of ``pattern`` in ``text``.

    Empty regex matches are not counted.
    """
    if isinstance(pattern, Keyword):
        return text.count(pattern.text)
    return sum(1 for m in pattern.compiled.finditer(text) if m.end() > m.start())
