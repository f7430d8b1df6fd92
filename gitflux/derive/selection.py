"""Current ref selection.

Picks the single flux ref that determines the version of the current
commit: the checked-out branch if it follows a branch pattern, otherwise the
lowest-precedence release tag pointing at the commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from gitflux.core.types import GitFluxError
from gitflux.refs import FluxBranch, FluxRef, FluxTag, parse_flux_branch, parse_flux_tag, tag_precedence_key

logger = logging.getLogger(__name__)

BRANCH_PATTERNS = ("develop-X.Y.Z", "topic-X.Y.Z-name")
TAG_PATTERNS = ("release-X.Y.Z", "release-X.Y.Z-alpha.N")


class NoEligibleRefError(GitFluxError):
    """Raised when neither the branch nor any tag at HEAD follows a flux pattern."""

    def __init__(self, branch_name: str | None = None, tag_names: Iterable[str] = ()) -> None:
        self.branch_name = branch_name
        self.tag_names = sorted(tag_names)
        super().__init__(
            "Unable to determine a version from the git metadata. "
            "One of the following must be true:\n"
            f" - the current branch follows either the format '{BRANCH_PATTERNS[0]}' "
            f"or '{BRANCH_PATTERNS[1]}'\n"
            f" - there is a tag at HEAD that follows either the format '{TAG_PATTERNS[0]}' "
            f"or '{TAG_PATTERNS[1]}'"
        )


@dataclass
class RefCandidates:
    """Branch and tag candidates for the current commit, in preference order."""

    branch_name: str | None = None
    tag_names: list[str] = field(default_factory=list)
    branch: FluxBranch | None = None
    tags: list[FluxTag] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def eligible(self) -> list[FluxRef]:
        """All eligible refs, most preferred first, without duplicates."""
        ordered: list[FluxRef] = [self.branch] if self.branch is not None else []
        ordered.extend(self.tags)
        return list(dict.fromkeys(ordered))

    def select(self) -> FluxRef:
        """Return the most preferred eligible ref.

        Raises:
            NoEligibleRefError: if neither the branch nor any tag is eligible.
        """
        logger.debug("gitflux:\n  %s", self.describe())
        eligible = self.eligible
        if not eligible:
            raise NoEligibleRefError(self.branch_name, self.tag_names)
        return eligible[0]

    def describe(self) -> str:
        lines = ["current branch and tags:"]
        lines.extend(f"  {note}" for note in self.notes)
        lines.append("eligible versions (in order of preference):")
        lines.extend(f"  {ref.ref_name}" for ref in self.eligible)
        return "\n  ".join(lines)


def rank_candidates(branch_name: str | None, tag_names: Iterable[str]) -> RefCandidates:
    """Classify the branch and tags at HEAD and rank the eligible ones."""
    tag_names = sorted(set(tag_names))
    candidates = RefCandidates(branch_name=branch_name, tag_names=tag_names)

    if branch_name is not None:
        candidates.branch = parse_flux_branch(branch_name)
        if candidates.branch is not None:
            candidates.notes.append(f"{branch_name} (eligible branch)")
        else:
            candidates.notes.append(
                f"{branch_name} (ineligible, not in '{BRANCH_PATTERNS[0]}' "
                f"or '{BRANCH_PATTERNS[1]}' format)"
            )

    matched: list[tuple[str, FluxTag]] = []
    for name in tag_names:
        tag = parse_flux_tag(name)
        if tag is None:
            candidates.notes.append(
                f"{name} (ineligible, not in '{TAG_PATTERNS[0]}' or '{TAG_PATTERNS[1]}' format)"
            )
            continue
        candidates.notes.append(f"{name} -> {tag.version} (eligible tag)")
        matched.append((name, tag))

    matched.sort(key=lambda item: (tag_precedence_key(item[1]), item[0]))
    candidates.tags = [tag for _, tag in matched]
    return candidates


def select_current_ref(branch_name: str | None, tag_names: Iterable[str]) -> FluxRef:
    """Return the ref that determines the current version.

    A matching branch always wins. Otherwise the matching tag with the
    lowest precedence is chosen.

    Raises:
        NoEligibleRefError: if neither the branch nor any tag is eligible.
    """
    return rank_candidates(branch_name, tag_names).select()
