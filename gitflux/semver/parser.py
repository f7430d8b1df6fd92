"""Hand-written parser for semantic version strings.

Implements the grammar below as an ordered-choice (PEG) recursive descent
parser. No whitespace is skipped and the whole input must be consumed.

    semver       := core ('-' prerelease)? ('+' build)?
    core         := numeric '.' numeric '.' numeric
    numeric      := '0' | [1-9][0-9]*
    prerelease   := identifier ('.' identifier)*
    identifier   := numeric | alphanumeric
    alphanumeric := [0-9A-Za-z-]+
    build        := alphanumeric

On failure the parser reports the furthest offset at which any part of the
grammar failed to match, which is where the longest valid prefix ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar, Union

from gitflux.semver.model import ALPHANUMERIC_CHARS, DIGITS, Alphanumeric, Identifier, Numeric, SemVer

T = TypeVar("T")


@dataclass(frozen=True)
class ParseFailure:
    """Describes where and why a version string failed to parse."""

    text: str
    offset: int
    expected: str

    @property
    def message(self) -> str:
        found = repr(self.text[self.offset]) if self.offset < len(self.text) else "end of input"
        return f"{self.expected} expected but {found} found at offset {self.offset}"

    def __str__(self) -> str:
        return self.message


class SemVerParseError(ValueError):
    """Raised by SemVer.parse when the input is not a valid semantic version."""

    def __init__(self, failure: ParseFailure) -> None:
        self.failure = failure
        self.offset = failure.offset
        super().__init__(f"Invalid semver {failure.text!r}: {failure.message}")


ParseResult = Union[SemVer, ParseFailure]


class _Parser:
    """Single-use parser over one input string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._furthest = 0
        self._expected = "input"

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse_all(self, rule: Callable[[], T | None]) -> T | ParseFailure:
        """Apply a rule and require that it consumes the entire input."""
        value = rule()
        if value is not None and self._at_end():
            return value
        if value is not None:
            self._fail("end of input")
        return ParseFailure(self._text, self._furthest, self._expected)

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def semver(self) -> SemVer | None:
        core = self._core()
        if core is None:
            return None
        major, minor, patch = core

        identifiers: list[Identifier] = []
        start = self._pos
        if self._literal("-"):
            prerelease = self.prerelease()
            if prerelease is None:
                self._pos = start
            else:
                identifiers = prerelease

        build = None
        start = self._pos
        if self._literal("+"):
            build = self._alphanumeric()
            if build is None:
                self._pos = start

        return SemVer(major, minor, patch, tuple(identifiers), build)

    def prerelease(self) -> list[Identifier] | None:
        first = self._identifier()
        if first is None:
            return None
        identifiers = [first]

        while True:
            start = self._pos
            if not self._literal("."):
                break
            identifier = self._identifier()
            if identifier is None:
                self._pos = start
                break
            identifiers.append(identifier)

        return identifiers

    def _core(self) -> tuple[int, int, int] | None:
        start = self._pos
        major = self._numeric()
        if major is not None and self._literal("."):
            minor = self._numeric()
            if minor is not None and self._literal("."):
                patch = self._numeric()
                if patch is not None:
                    return major, minor, patch
        self._pos = start
        return None

    def _identifier(self) -> Identifier | None:
        # Ordered choice: a numeric match wins even when more characters follow
        number = self._numeric()
        if number is not None:
            return Numeric(number)
        text = self._alphanumeric()
        if text is not None:
            return Alphanumeric(text)
        return None

    # ------------------------------------------------------------------
    # Terminals
    # ------------------------------------------------------------------

    def _numeric(self) -> int | None:
        start = self._pos
        if self._peek() == "0":
            self._advance()
            return 0
        if self._peek() not in DIGITS:
            return self._fail("numeric identifier")
        while not self._at_end() and self._peek() in DIGITS:
            self._advance()
        return int(self._text[start : self._pos])

    def _alphanumeric(self) -> str | None:
        start = self._pos
        while not self._at_end() and self._peek() in ALPHANUMERIC_CHARS:
            self._advance()
        if self._pos == start:
            return self._fail("alphanumeric identifier")
        return self._text[start : self._pos]

    def _literal(self, ch: str) -> bool:
        if self._peek() != ch:
            self._fail(repr(ch))
            return False
        self._advance()
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fail(self, expected: str) -> None:
        """Record a failed match at the current position."""
        if self._pos >= self._furthest:
            self._furthest = self._pos
            self._expected = expected
        return None

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _peek(self) -> str:
        if self._at_end():
            return "\0"
        return self._text[self._pos]

    def _advance(self) -> None:
        self._pos += 1


def parse_semver(text: str) -> ParseResult:
    """Parse a complete semantic version string.

    Returns the parsed SemVer, or a ParseFailure carrying the offset of the
    first character that the grammar could not consume. Never raises.
    """
    parser = _Parser(text)
    return parser.parse_all(parser.semver)


def parse_prerelease(text: str) -> tuple[Identifier, ...] | ParseFailure:
    """Parse a dot-separated prerelease string into its identifiers."""
    parser = _Parser(text)
    result = parser.parse_all(parser.prerelease)
    if isinstance(result, ParseFailure):
        return result
    return tuple(result)


def destructure(text: str) -> tuple[int, int, int, str | None, str | None] | None:
    """Split a version string into (major, minor, patch, prerelease, build).

    The prerelease is returned as a single string. Use
    destructure_with_prerelease when the individual identifiers are needed.
    """
    result = parse_semver(text)
    if isinstance(result, ParseFailure):
        return None
    return result.major, result.minor, result.patch, result.prerelease, result.build


def destructure_with_prerelease(
    text: str,
) -> tuple[int, int, int, tuple[Identifier, ...], str | None] | None:
    """Split a version string, keeping the prerelease as its identifier list."""
    result = parse_semver(text)
    if isinstance(result, ParseFailure):
        return None
    return (
        result.major,
        result.minor,
        result.patch,
        result.prerelease_identifiers,
        result.build,
    )
