"""gitflux derive — turns branch and tag names into a version and a
compatibility requirement.

Usage:
    from gitflux.derive import VersionDeriver

    derivation = VersionDeriver().derive()
    json_str = derivation.to_json()
"""

from gitflux.derive.compatibility import decide_compatibility, parse_since_version
from gitflux.derive.deriver import VersionDeriver, derive_from_snapshot, version_string
from gitflux.derive.prior import collect_releases, resolve_prior_release
from gitflux.derive.selection import (
    NoEligibleRefError,
    RefCandidates,
    rank_candidates,
    select_current_ref,
)

__all__ = [
    "NoEligibleRefError",
    "RefCandidates",
    "VersionDeriver",
    "collect_releases",
    "decide_compatibility",
    "derive_from_snapshot",
    "parse_since_version",
    "rank_candidates",
    "resolve_prior_release",
    "select_current_ref",
    "version_string",
]
