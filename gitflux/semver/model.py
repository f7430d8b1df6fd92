"""Semantic version model for gitflux.

Provides the immutable SemVer value, its prerelease identifiers, and the
precedence comparator used everywhere versions are sorted or compared.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field, replace
from typing import Any, Union

DIGITS = frozenset("0123456789")
ALPHANUMERIC_CHARS = frozenset("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-")


# ---------------------------------------------------------------------------
# Prerelease identifiers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Numeric:
    """A numeric prerelease identifier (no leading zeroes)."""

    value: int

    def __post_init__(self) -> None:
        if not _is_non_negative_int(self.value):
            raise ValueError(f"numeric identifier must be a non-negative integer, got {self.value!r}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Alphanumeric:
    """An alphanumeric prerelease identifier over [0-9A-Za-z-]."""

    value: str

    def __post_init__(self) -> None:
        # A leading digit would parse back as a numeric identifier
        if not _is_token(self.value) or self.value[0] in DIGITS:
            raise ValueError(
                f"alphanumeric identifier must be non-empty [0-9A-Za-z-] "
                f"not starting with a digit, got {self.value!r}"
            )

    def __str__(self) -> str:
        return self.value


Identifier = Union[Numeric, Alphanumeric]


def compare_identifiers(left: Identifier, right: Identifier) -> int:
    """Compare two prerelease identifiers at the same position."""
    if isinstance(left, Numeric) and isinstance(right, Numeric):
        return _cmp(left.value, right.value)
    if isinstance(left, Alphanumeric) and isinstance(right, Alphanumeric):
        return _cmp(left.value, right.value)
    # Numeric identifiers always have lower precedence than alphanumeric ones
    return -1 if isinstance(left, Numeric) else 1


def compare_prerelease(left: tuple[Identifier, ...], right: tuple[Identifier, ...]) -> int:
    """Compare two prerelease identifier lists.

    An empty list (a normal version) sorts above any prerelease. Otherwise
    identifiers are compared pairwise and a strict prefix sorts lower.
    """
    if not left and not right:
        return 0
    if not left:
        return 1
    if not right:
        return -1

    for lhs, rhs in zip(left, right):
        result = compare_identifiers(lhs, rhs)
        if result != 0:
            return result
    return _cmp(len(left), len(right))


# ---------------------------------------------------------------------------
# SemVer
# ---------------------------------------------------------------------------


@functools.total_ordering
@dataclass(frozen=True, eq=True)
class SemVer:
    """A semantic version (major.minor.patch[-prerelease][+build])."""

    major: int
    minor: int
    patch: int
    prerelease_identifiers: tuple[Identifier, ...] = field(default_factory=tuple)
    build: str | None = None

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not _is_non_negative_int(value):
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")

        # Accept any iterable of identifiers but always store a tuple
        if not isinstance(self.prerelease_identifiers, tuple):
            object.__setattr__(self, "prerelease_identifiers", tuple(self.prerelease_identifiers))
        for identifier in self.prerelease_identifiers:
            if not isinstance(identifier, (Numeric, Alphanumeric)):
                raise ValueError(f"not a prerelease identifier: {identifier!r}")

        if self.build is not None and not _is_token(self.build):
            raise ValueError(f"build metadata must be a single [0-9A-Za-z-]+ token, got {self.build!r}")

    @property
    def prerelease(self) -> str | None:
        """The prerelease identifiers joined with '.', or None when there are none."""
        if not self.prerelease_identifiers:
            return None
        return ".".join(str(i) for i in self.prerelease_identifiers)

    @property
    def core(self) -> SemVer:
        """This version without prerelease identifiers or build metadata."""
        return SemVer(self.major, self.minor, self.patch)

    @property
    def is_core(self) -> bool:
        return not self.prerelease_identifiers and self.build is None

    def without_prerelease(self) -> SemVer:
        return replace(self, prerelease_identifiers=())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease_identifiers:
            text += f"-{self.prerelease}"
        if self.build is not None:
            text += f"+{self.build}"
        return text

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return compare_semver(self, other) < 0

    # --- Parsing conveniences (see gitflux.semver.parser) ---

    @classmethod
    def parse(cls, text: str) -> SemVer:
        """Parse a version string, raising SemVerParseError on failure."""
        from gitflux.semver.parser import ParseFailure, SemVerParseError, parse_semver

        result = parse_semver(text)
        if isinstance(result, ParseFailure):
            raise SemVerParseError(result)
        return result

    @classmethod
    def parse_option(cls, text: str) -> SemVer | None:
        """Parse a version string, returning None on failure."""
        from gitflux.semver.parser import ParseFailure, parse_semver

        result = parse_semver(text)
        return None if isinstance(result, ParseFailure) else result


def compare_semver(left: SemVer, right: SemVer) -> int:
    """Order two versions by precedence.

    Core versions compare numerically, then prerelease identifiers. Build
    metadata breaks remaining ties: no build sorts lowest, otherwise tokens
    compare lexicographically.
    """
    result = _cmp(
        (left.major, left.minor, left.patch),
        (right.major, right.minor, right.patch),
    )
    if result != 0:
        return result

    result = compare_prerelease(left.prerelease_identifiers, right.prerelease_identifiers)
    if result != 0:
        return result

    if left.build is None or right.build is None:
        return _cmp(left.build is not None, right.build is not None)
    return _cmp(left.build, right.build)


precedence_key = functools.cmp_to_key(compare_semver)


def _cmp(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_token(value: Any) -> bool:
    return isinstance(value, str) and bool(value) and all(ch in ALPHANUMERIC_CHARS for ch in value)
