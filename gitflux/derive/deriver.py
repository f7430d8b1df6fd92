"""Version derivation — ties ref selection, prior release resolution, and the
compatibility decision together.

Takes a RepositorySnapshot (or reads one from git) and produces a Derivation
holding the version string, the chosen ref, the prior release, and the
compatibility verdict.
"""

from __future__ import annotations

import logging

from gitflux.core.config import GitFluxConfig, get_config
from gitflux.core.types import Derivation
from gitflux.derive.compatibility import decide_compatibility, parse_since_version
from gitflux.derive.prior import resolve_prior_release
from gitflux.derive.selection import rank_candidates
from gitflux.git.repository import GitRepository, RepositorySnapshot
from gitflux.refs import FluxRef, LegacyTagMapper, no_legacy_tags

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_SUFFIX = "-SNAPSHOT"


def version_string(ref: FluxRef, snapshot_suffix: str = DEFAULT_SNAPSHOT_SUFFIX) -> str:
    """Branches build snapshots of their version; tags build the version itself."""
    if ref.is_branch:
        return f"{ref.version}{snapshot_suffix}"
    return str(ref.version)


def derive_from_snapshot(
    snapshot: RepositorySnapshot,
    legacy_mapper: LegacyTagMapper = no_legacy_tags,
    since: str | None = None,
    snapshot_suffix: str = DEFAULT_SNAPSHOT_SUFFIX,
) -> Derivation:
    """Run the full derivation over already-read git metadata.

    Raises:
        NoEligibleRefError: if no branch or tag at HEAD follows a flux pattern.
    """
    candidates = rank_candidates(snapshot.branch, snapshot.head_tags)
    ref = candidates.select()

    version = version_string(ref, snapshot_suffix)
    logger.info("gitflux: derived version %s based on git ref %s", version, ref.ref_name)

    prior = resolve_prior_release(snapshot.all_tags, legacy_mapper, ref.target_release_version)
    since_version = parse_since_version(since)
    decision = decide_compatibility(ref.version, prior, since_version)

    header = f"gitflux: version {version}"
    if decision.required:
        info = f"{header} must be {decision.level.label} with {decision.against}"
    else:
        info = f"{header} has no compatibility guarantees ({decision.reason})"
    logger.debug("%s:\n  %s", info, "\n  ".join(decision.details))
    logger.info(info)

    return Derivation(
        ref=ref,
        version=version,
        is_snapshot=ref.is_branch,
        decision=decision,
        prior_release=prior,
        since=since_version,
        candidates=candidates.eligible,
        notes=list(candidates.notes),
    )


class VersionDeriver:
    """Derive the version of a git working tree.

    Usage:
        deriver = VersionDeriver(config)
        derivation = deriver.derive()
        print(derivation.version)
    """

    def __init__(
        self,
        config: GitFluxConfig | None = None,
        repository: GitRepository | None = None,
    ) -> None:
        self._config = config or get_config()
        self._repository = repository or GitRepository(
            self._config.repo_dir,
            git_executable=self._config.git_executable,
            timeout=self._config.git_timeout,
        )

    @property
    def config(self) -> GitFluxConfig:
        return self._config

    def snapshot(self) -> RepositorySnapshot:
        return self._repository.snapshot()

    def derive(self, since: str | None = None) -> Derivation:
        """Read git metadata and derive the version.

        Args:
            since: Overrides the configured artifact-since version.
        """
        return self.derive_from(self.snapshot(), since=since)

    def derive_from(self, snapshot: RepositorySnapshot, since: str | None = None) -> Derivation:
        """Derive the version from an already-read snapshot using this config."""
        return derive_from_snapshot(
            snapshot,
            legacy_mapper=self._config.legacy_tag_mapper(),
            since=since if since is not None else self._config.artifact_since,
            snapshot_suffix=self._config.snapshot_suffix,
        )
