"""Core data types for gitflux.

Shared enums, result types and the base exception used across the derive,
git, and CLI layers. Result types are JSON-serializable via their
to_dict/from_dict methods.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from gitflux.refs import FluxRef, parse_flux_ref
from gitflux.semver import SemVer


class GitFluxError(Exception):
    """Base class for errors that abort a version derivation."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Compatibility(str, Enum):
    """How strictly a release must match the public surface of a prior one."""

    NONE = "none"
    BINARY_COMPATIBLE = "binary-compatible"
    BINARY_AND_SOURCE_COMPATIBLE = "binary-and-source-compatible"

    @property
    def rank(self) -> int:
        return _COMPAT_RANK[self]

    def implies(self, other: Compatibility) -> bool:
        """True when satisfying this level also satisfies ``other``."""
        return self.rank >= other.rank

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


_COMPAT_RANK = {
    Compatibility.NONE: 0,
    Compatibility.BINARY_COMPATIBLE: 1,
    Compatibility.BINARY_AND_SOURCE_COMPATIBLE: 2,
}


# ---------------------------------------------------------------------------
# Compatibility decisions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoCompat:
    """No compatibility guarantee is required for this release."""

    required: ClassVar[bool] = False

    reason: str
    details: tuple[str, ...] = field(default=(), compare=False)

    @property
    def level(self) -> Compatibility:
        return Compatibility.NONE

    @property
    def against(self) -> SemVer | None:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "required": False,
            "level": self.level.value,
            "against": None,
            "reason": self.reason,
            "details": list(self.details),
        }


@dataclass(frozen=True)
class RequireCompat:
    """This release must satisfy ``level`` against the prior release ``against``."""

    required: ClassVar[bool] = True

    level: Compatibility
    against: SemVer
    details: tuple[str, ...] = field(default=(), compare=False)

    @property
    def reason(self) -> str:
        return f"must be {self.level.label} with {self.against}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "required": True,
            "level": self.level.value,
            "against": str(self.against),
            "reason": self.reason,
            "details": list(self.details),
        }


CompatDecision = Union[NoCompat, RequireCompat]


def decision_from_dict(data: dict[str, Any]) -> CompatDecision:
    details = tuple(data.get("details", []))
    if data.get("required"):
        return RequireCompat(
            level=Compatibility(data["level"]),
            against=SemVer.parse(data["against"]),
            details=details,
        )
    return NoCompat(reason=data.get("reason", ""), details=details)


# ---------------------------------------------------------------------------
# Derivation result
# ---------------------------------------------------------------------------


# Bumped whenever the JSON shape of a Derivation changes
DERIVATION_SCHEMA = 1


@dataclass
class Derivation:
    """Everything derived from the git metadata for one build."""

    ref: FluxRef
    version: str
    is_snapshot: bool
    decision: CompatDecision
    prior_release: SemVer | None = None
    since: SemVer | None = None
    candidates: list[FluxRef] = field(default_factory=list)
    notes: list[str] = field(default_factory=list, compare=False)

    @property
    def target_release_version(self) -> SemVer:
        return self.ref.target_release_version

    def to_dict(self) -> dict[str, Any]:
        return {
            "ref": self.ref.ref_name,
            "kind": self.ref.kind.value,
            "version": self.version,
            "is_snapshot": self.is_snapshot,
            "target_release_version": str(self.target_release_version),
            "prior_release": str(self.prior_release) if self.prior_release else None,
            "since": str(self.since) if self.since else None,
            "compatibility": self.decision.to_dict(),
            "candidates": [c.ref_name for c in self.candidates],
            "notes": list(self.notes),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Derivation:
        ref = _ref_from_name(data["ref"])
        return cls(
            ref=ref,
            version=data["version"],
            is_snapshot=data["is_snapshot"],
            decision=decision_from_dict(data["compatibility"]),
            prior_release=_optional_semver(data.get("prior_release")),
            since=_optional_semver(data.get("since")),
            candidates=[_ref_from_name(name) for name in data.get("candidates", [])],
            notes=list(data.get("notes", [])),
        )

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize for the CLI's machine-readable output and other build steps."""
        return json.dumps({"schema": DERIVATION_SCHEMA, **self.to_dict()}, indent=indent)

    @classmethod
    def from_json(cls, text: str) -> Derivation:
        data = json.loads(text)
        schema = data.get("schema")
        if schema != DERIVATION_SCHEMA:
            raise ValueError(f"Unsupported derivation schema {schema!r}, expected {DERIVATION_SCHEMA}")
        return cls.from_dict(data)


def _ref_from_name(name: str) -> FluxRef:
    ref = parse_flux_ref(name)
    if ref is None:
        raise ValueError(f"Not a flux ref name: {name!r}")
    return ref


def _optional_semver(value: str | None) -> SemVer | None:
    return SemVer.parse(value) if value else None
