"""Compatibility decision.

Classifies how compatible a release must be with the prior release, based
only on where the version sits in its series:

    X.Y.Z+build  not a plain release, nothing is checked
    0.Y.0        first release of an unstable 0.y series, nothing is checked
    X.0.0        first release of a new major series, nothing is checked
    X.Y.0        binary compatible with the prior release of the major series
    X.Y.Z        binary and source compatible with the prior release of the minor series

Prerelease identifiers on the current version do not change the outcome.
"""

from __future__ import annotations

import logging

from gitflux.core.types import CompatDecision, Compatibility, NoCompat, RequireCompat
from gitflux.semver import SemVer, compare_semver

logger = logging.getLogger(__name__)

NO_CHECK = "No compatibility check will be performed."


def parse_since_version(text: str | None) -> SemVer | None:
    """Parse the configured "artifact introduced since" version.

    Anything other than a bare ``X.Y.Z`` is logged and ignored.
    """
    if text is None:
        return None
    version = SemVer.parse_option(text)
    if version is None or not version.is_core:
        logger.error(
            "Ignoring artifact-since value '%s' because it is not a core SemVer (x.y.z)", text
        )
        return None
    return version


def decide_compatibility(
    current: SemVer,
    prior: SemVer | None = None,
    since: SemVer | None = None,
) -> CompatDecision:
    """Decide what compatibility the ``current`` version owes the ``prior`` release.

    Args:
        current: The full version of the current ref.
        prior: The prior release, if one exists.
        since: The version in which this artifact first appeared, if known.

    Returns:
        NoCompat, or RequireCompat with the level and the version to check against.
    """
    major, minor, patch = current.major, current.minor, current.patch

    if current.build is not None:
        return NoCompat(
            reason="not a plain release version",
            details=(f"Version {current} is not a SemVer (x.y.z).", NO_CHECK),
        )

    if major == 0 and patch == 0:
        return NoCompat(
            reason="first release of an unstable 0.y series",
            details=(
                f"This is the first release in early minor series 0.{minor}.x, "
                "so no compatibility is guaranteed.",
            ),
        )

    if minor == 0 and patch == 0:
        return NoCompat(
            reason="first release of a new major series",
            details=(
                f"This is the first release in major series {major}.y.z, "
                "so no compatibility is guaranteed.",
            ),
        )

    if patch == 0:
        return _handle_prior(
            prior,
            since,
            first_version=SemVer(major, minor - 1, 0),
            level=Compatibility.BINARY_COMPATIBLE,
            series="major",
            intro=(
                f"This is the first release in minor series {major}.{minor}.x, so binary "
                "compatibility is required with the prior release in its major series."
            ),
        )

    return _handle_prior(
        prior,
        since,
        first_version=SemVer(major, minor, 0),
        level=Compatibility.BINARY_AND_SOURCE_COMPATIBLE,
        series="minor",
        intro=(
            f"This is a patch release in minor series {major}.{minor}.x, so source "
            "compatibility is required with the prior release in its minor series."
        ),
    )


def _handle_prior(
    prior: SemVer | None,
    since: SemVer | None,
    first_version: SemVer,
    level: Compatibility,
    series: str,
    intro: str,
) -> CompatDecision:
    if prior is None:
        return NoCompat(
            reason="no prior release exists",
            details=(intro, "No prior release exists.", NO_CHECK),
        )

    if compare_semver(prior, first_version) < 0:
        return NoCompat(
            reason="prior release is outside this series",
            details=(intro, f"Prior version {prior} is not part of this {series} series.", NO_CHECK),
        )

    if since is not None and compare_semver(since, prior) > 0:
        return NoCompat(
            reason="artifact did not exist in prior release",
            details=(
                intro,
                f"Prior version {prior} is before the introduction of this artifact ({since}).",
                NO_CHECK,
            ),
        )

    present = f"This artifact has been present since {since}." if since else (
        "This artifact has always been present."
    )
    return RequireCompat(
        level=level,
        against=prior,
        details=(
            intro,
            f"The prior version appears to be {prior}.",
            present,
            f"{level.label} will be checked against version {prior}",
        ),
    )
