"""Prior release resolution.

Scans every tag in the repository for releases and picks the most advanced
one that does not exceed the current target release version.
"""

from __future__ import annotations

import logging
from typing import Iterable

from gitflux.refs import (
    LegacyTagMapper,
    RefKind,
    ReleaseTag,
    no_legacy_tags,
    parse_flux_tag,
)
from gitflux.semver import SemVer, precedence_key

logger = logging.getLogger(__name__)


# Prerelease tags never count as a prior release
_COUNTS_AS_RELEASE: dict[RefKind, bool] = {
    RefKind.RELEASE_TAG: True,
    RefKind.PRERELEASE_TAG: False,
}


def collect_releases(
    tag_names: Iterable[str],
    legacy_mapper: LegacyTagMapper = no_legacy_tags,
) -> list[ReleaseTag]:
    """Return every distinct release tag, sorted ascending by precedence."""
    releases: list[ReleaseTag] = []
    notes: list[str] = []

    for name in tag_names:
        tag = parse_flux_tag(name)
        if tag is not None:
            if not _COUNTS_AS_RELEASE[tag.kind]:
                notes.append(f"{name} (ignoring prerelease tag)")
                continue
            release = ReleaseTag(tag.major, tag.minor, tag.patch)
        else:
            release = legacy_mapper(name)
            if release is None:
                notes.append(f"{name} (ignoring tag that doesn't begin with 'release-')")
                continue
        notes.append(f"{name} -> {release.version}")
        releases.append(release)

    logger.debug("gitflux: looking for prior release tags in git:\n  %s", "\n  ".join(notes))
    unique = list(dict.fromkeys(releases))
    return sorted(unique, key=lambda tag: precedence_key(tag.version))


def resolve_prior_release(
    tag_names: Iterable[str],
    legacy_mapper: LegacyTagMapper,
    target: SemVer,
) -> SemVer | None:
    """Find the latest release whose version is <= ``target``.

    Args:
        tag_names: Every tag name in the repository history.
        legacy_mapper: Maps tags outside the flux patterns to release tags.
        target: The current ref's target release version.

    Returns:
        The prior release version, or None if no release qualifies.
    """
    target_key = precedence_key(target)
    eligible = [
        tag.version for tag in collect_releases(tag_names, legacy_mapper)
        if precedence_key(tag.version) <= target_key
    ]
    prior = eligible[-1] if eligible else None

    if prior is None:
        logger.info("gitflux: no prior release for target version %s", target)
    else:
        logger.info("gitflux: chose prior release %s", prior)
    return prior
