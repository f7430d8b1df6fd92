"""gitflux refs — branch and tag naming patterns that carry a version.

Usage:
    from gitflux.refs import parse_flux_ref, parse_flux_tag, tag_precedence_key

    ref = parse_flux_ref("topic-1.2.0-login")
    tags = sorted(filter(None, map(parse_flux_tag, names)), key=tag_precedence_key)
"""

from gitflux.refs.fluxref import (
    BRANCH_TYPES,
    REF_TYPES,
    TAG_TYPES,
    ConstructionError,
    DevelopBranch,
    FluxBranch,
    FluxRef,
    FluxTag,
    InvalidRefError,
    PrereleaseTag,
    RefKind,
    ReleaseTag,
    TopicBranch,
    compare_tags,
    parse_flux_branch,
    parse_flux_ref,
    parse_flux_tag,
    tag_precedence_key,
)
from gitflux.refs.legacy import LegacyTagMapper, chain_mappers, no_legacy_tags, pattern_tag_mapper

__all__ = [
    "BRANCH_TYPES",
    "REF_TYPES",
    "TAG_TYPES",
    "ConstructionError",
    "DevelopBranch",
    "FluxBranch",
    "FluxRef",
    "FluxTag",
    "InvalidRefError",
    "LegacyTagMapper",
    "PrereleaseTag",
    "RefKind",
    "ReleaseTag",
    "TopicBranch",
    "chain_mappers",
    "compare_tags",
    "no_legacy_tags",
    "parse_flux_branch",
    "parse_flux_ref",
    "parse_flux_tag",
    "pattern_tag_mapper",
    "tag_precedence_key",
]
