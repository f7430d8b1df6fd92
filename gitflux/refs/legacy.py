"""Legacy tag mapping.

Repositories that adopted the flux naming scheme part way through their
history have older release tags (``v1.2.3``, ``1.2.3``...) that the release
tag grammar does not recognize. A legacy mapper turns such names into
ReleaseTags so they can still count as prior releases.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional, Union

from gitflux.refs.fluxref import ReleaseTag
from gitflux.semver import SemVer

logger = logging.getLogger(__name__)

LegacyTagMapper = Callable[[str], Optional[ReleaseTag]]


def no_legacy_tags(name: str) -> ReleaseTag | None:
    """The default mapper: no tag outside the flux patterns is a release."""
    return None


def pattern_tag_mapper(pattern: Union[str, "re.Pattern[str]"]) -> LegacyTagMapper:
    """Build a mapper from a regular expression with a ``version`` group.

    The whole tag name must match the pattern, and the ``version`` group must
    hold a bare ``X.Y.Z`` version, e.g. ``v(?P<version>\\d+\\.\\d+\\.\\d+)``.
    """
    compiled = re.compile(pattern)
    if "version" not in compiled.groupindex:
        raise ValueError(f"Legacy tag pattern {compiled.pattern!r} has no 'version' group")

    def mapper(name: str) -> ReleaseTag | None:
        match = compiled.fullmatch(name)
        if match is None:
            return None
        version = SemVer.parse_option(match.group("version") or "")
        if version is None or not version.is_core:
            logger.debug("Legacy tag %s does not hold a bare X.Y.Z version", name)
            return None
        return ReleaseTag(version.major, version.minor, version.patch)

    return mapper


def chain_mappers(*mappers: LegacyTagMapper) -> LegacyTagMapper:
    """Combine mappers; the first one that recognizes a name wins."""

    def mapper(name: str) -> ReleaseTag | None:
        for candidate in mappers:
            tag = candidate(name)
            if tag is not None:
                return tag
        return None

    return mapper
