"""Flux refs: git branch and tag names that carry a semantic version.

Four naming patterns are recognized:

    develop-X.Y.Z            DevelopBranch
    topic-X.Y.Z-<prerelease> TopicBranch
    release-X.Y.Z            ReleaseTag
    release-X.Y.Z-alpha.N    PrereleaseTag

Every ref knows its kind (a closed RefKind enum), its full version, and the
release version it is working towards. Names that do not match a pattern
parse to None; constructing a ref directly with invalid fields raises
InvalidRefError.
"""

from __future__ import annotations

import functools
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, ClassVar, Iterable, Optional, TypeVar

from gitflux.semver import (
    Alphanumeric,
    Identifier,
    Numeric,
    ParseFailure,
    SemVer,
    compare_semver,
    parse_prerelease,
    parse_semver,
)

R = TypeVar("R", bound="FluxRef")


# ---------------------------------------------------------------------------
# Kinds and errors
# ---------------------------------------------------------------------------


class RefKind(str, Enum):
    """The closed set of recognized ref patterns."""

    DEVELOP_BRANCH = "develop-branch"
    TOPIC_BRANCH = "topic-branch"
    RELEASE_TAG = "release-tag"
    PRERELEASE_TAG = "prerelease-tag"

    @property
    def is_branch(self) -> bool:
        return self in (RefKind.DEVELOP_BRANCH, RefKind.TOPIC_BRANCH)

    @property
    def is_tag(self) -> bool:
        return not self.is_branch


class InvalidRefError(ValueError):
    """Raised when a ref is constructed directly with invalid fields."""


@dataclass(frozen=True)
class ConstructionError:
    """Returned by the fallible ``create`` factories instead of raising."""

    kind: RefKind
    message: str

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Base types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FluxRef(ABC):
    """A branch or tag name matching one of the flux naming patterns.

    FluxRef, FluxBranch and FluxTag are abstract groupings; only the four
    concrete variants can be constructed. Calling ``parse`` on a grouping
    tries every variant in that group.
    """

    kind: ClassVar[RefKind]
    prefix: ClassVar[str]

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            _check_non_negative(name, getattr(self, name))

    @property
    def version(self) -> SemVer:
        return SemVer(self.major, self.minor, self.patch)

    @property
    def target_release_version(self) -> SemVer:
        """The release this ref is heading towards (its version minus any prerelease)."""
        return self.version.without_prerelease()

    @property
    def ref_name(self) -> str:
        return f"{self.prefix}{self.version}"

    @property
    def is_branch(self) -> bool:
        return self.kind.is_branch

    @property
    def is_tag(self) -> bool:
        return self.kind.is_tag

    @classmethod
    def parse(cls: type[R], name: str) -> R | None:
        """Parse a ref name into this variant, or return None if it does not match."""
        group = _GROUP_PARSERS.get(cls)
        if group is not None:
            return group(name)
        if not name.startswith(cls.prefix):
            return None
        result = parse_semver(name[len(cls.prefix) :])
        if isinstance(result, ParseFailure) or result.build is not None:
            return None
        return cls._from_version(result)

    @classmethod
    def create(cls: type[R], *fields: object) -> R | ConstructionError:
        """Construct this variant, returning a ConstructionError instead of raising."""
        if inspect.isabstract(cls):
            raise TypeError(f"{cls.__name__} is abstract; create one of its variants")
        try:
            return cls(*fields)
        except (InvalidRefError, TypeError) as exc:
            return ConstructionError(cls.kind, str(exc))

    @classmethod
    @abstractmethod
    def _from_version(cls: type[R], version: SemVer) -> R | None:
        """Build this variant from a parsed version, or None if its shape does not fit."""

    def __str__(self) -> str:
        return self.ref_name


@dataclass(frozen=True)
class FluxBranch(FluxRef):
    """A develop or topic branch."""


@dataclass(frozen=True)
class FluxTag(FluxRef):
    """A release or prerelease tag."""


# ---------------------------------------------------------------------------
# Branches
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DevelopBranch(FluxBranch):
    """``develop-X.Y.Z``: ongoing work towards release X.Y.Z."""

    kind: ClassVar[RefKind] = RefKind.DEVELOP_BRANCH
    prefix: ClassVar[str] = "develop-"

    @classmethod
    def _from_version(cls, version: SemVer) -> DevelopBranch | None:
        if version.prerelease_identifiers:
            return None
        return cls(version.major, version.minor, version.patch)


@dataclass(frozen=True)
class TopicBranch(FluxBranch):
    """``topic-X.Y.Z-name``: a feature branch targeting release X.Y.Z.

    The topic must itself be a valid prerelease (dot-separated identifiers).
    """

    kind: ClassVar[RefKind] = RefKind.TOPIC_BRANCH
    prefix: ClassVar[str] = "topic-"

    topic: str
    _identifiers: tuple[Identifier, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.topic, str):
            raise InvalidRefError(f"topic must be a string, not {type(self.topic).__name__}")
        identifiers = parse_prerelease(self.topic)
        if isinstance(identifiers, ParseFailure):
            raise InvalidRefError(
                f"topic '{self.topic}' is not a valid semantic version pre-release "
                f"({identifiers.message})"
            )
        object.__setattr__(self, "_identifiers", identifiers)

    @property
    def version(self) -> SemVer:
        return SemVer(self.major, self.minor, self.patch, self._identifiers)

    @classmethod
    def _from_version(cls, version: SemVer) -> TopicBranch | None:
        if not version.prerelease_identifiers:
            return None
        return cls(version.major, version.minor, version.patch, version.prerelease or "")


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReleaseTag(FluxTag):
    """``release-X.Y.Z``: a published release."""

    kind: ClassVar[RefKind] = RefKind.RELEASE_TAG
    prefix: ClassVar[str] = "release-"

    @classmethod
    def _from_version(cls, version: SemVer) -> ReleaseTag | None:
        if version.prerelease_identifiers:
            return None
        return cls(version.major, version.minor, version.patch)


@dataclass(frozen=True)
class PrereleaseTag(FluxTag):
    """``release-X.Y.Z-alpha.N``: the Nth alpha of release X.Y.Z."""

    kind: ClassVar[RefKind] = RefKind.PRERELEASE_TAG
    prefix: ClassVar[str] = "release-"

    alpha: int

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_non_negative("alpha", self.alpha)

    @property
    def version(self) -> SemVer:
        return SemVer(
            self.major,
            self.minor,
            self.patch,
            (Alphanumeric("alpha"), Numeric(self.alpha)),
        )

    @classmethod
    def _from_version(cls, version: SemVer) -> PrereleaseTag | None:
        identifiers = version.prerelease_identifiers
        if len(identifiers) != 2 or identifiers[0] != Alphanumeric("alpha"):
            return None
        counter = identifiers[1]
        if not isinstance(counter, Numeric):
            return None
        return cls(version.major, version.minor, version.patch, counter.value)


# ---------------------------------------------------------------------------
# Grouped parsing
# ---------------------------------------------------------------------------


# Variant parse order within each group. Shapes are disjoint, so the order
# only decides which parser gets to reject a name first.
BRANCH_TYPES: tuple[type[FluxBranch], ...] = (DevelopBranch, TopicBranch)
TAG_TYPES: tuple[type[FluxTag], ...] = (ReleaseTag, PrereleaseTag)

REF_TYPES: dict[RefKind, type[FluxRef]] = {
    RefKind.DEVELOP_BRANCH: DevelopBranch,
    RefKind.TOPIC_BRANCH: TopicBranch,
    RefKind.RELEASE_TAG: ReleaseTag,
    RefKind.PRERELEASE_TAG: PrereleaseTag,
}


def parse_flux_branch(name: str) -> FluxBranch | None:
    """Parse a branch name as a develop or topic branch."""
    return _first_match(BRANCH_TYPES, name)


def parse_flux_tag(name: str) -> FluxTag | None:
    """Parse a tag name as a release or prerelease tag."""
    return _first_match(TAG_TYPES, name)


def parse_flux_ref(name: str) -> FluxRef | None:
    """Parse any ref name (tags are tried before branches)."""
    return parse_flux_tag(name) or parse_flux_branch(name)


_GROUP_PARSERS: dict[type[FluxRef], Callable[[str], Optional[FluxRef]]] = {
    FluxRef: parse_flux_ref,
    FluxBranch: parse_flux_branch,
    FluxTag: parse_flux_tag,
}


def _first_match(types: Iterable[type[R]], name: str) -> Optional[R]:
    for ref_type in types:
        ref = ref_type.parse(name)
        if ref is not None:
            return ref
    return None


# ---------------------------------------------------------------------------
# Tag ordering
# ---------------------------------------------------------------------------


def compare_tags(left: FluxTag, right: FluxTag) -> int:
    """Order tags by the precedence of their versions."""
    return compare_semver(left.version, right.version)


tag_precedence_key: Callable[[FluxTag], object] = functools.cmp_to_key(compare_tags)


def _check_non_negative(name: str, value: object) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidRefError(f"{name} must be a non-negative integer, got {value!r}")
