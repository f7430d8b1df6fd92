import json

import pytest

from gitflux.core import (
    DERIVATION_SCHEMA,
    Compatibility,
    Derivation,
    GitFluxConfig,
    NoCompat,
    RequireCompat,
)
from gitflux.derive import (
    NoEligibleRefError,
    VersionDeriver,
    derive_from_snapshot,
    rank_candidates,
    version_string,
)
from gitflux.derive import deriver as deriver_module
from gitflux.git import RepositorySnapshot
from gitflux.refs import DevelopBranch, PrereleaseTag, ReleaseTag, TopicBranch, pattern_tag_mapper
from gitflux.semver import SemVer


class FakeRepository:
    def __init__(self, snapshot):
        self._snapshot = snapshot
        self.reads = 0

    def snapshot(self):
        self.reads += 1
        return self._snapshot


DEVELOP = RepositorySnapshot(
    branch="develop-1.3.0",
    head_tags=(),
    all_tags=("release-1.2.5", "release-1.3.0-alpha.0", "release-1.2.4"),
)

PRERELEASE = RepositorySnapshot(
    branch=None,
    head_tags=("release-1.4.0-alpha.0",),
    all_tags=("release-1.3.1", "release-1.4.0-alpha.0"),
)


class TestVersionString:
    def test_branches_are_snapshots(self):
        assert version_string(DevelopBranch(1, 2, 0)) == "1.2.0-SNAPSHOT"
        assert version_string(TopicBranch(1, 2, 0, "login")) == "1.2.0-login-SNAPSHOT"

    def test_tags_are_exact(self):
        assert version_string(ReleaseTag(1, 2, 0)) == "1.2.0"
        assert version_string(PrereleaseTag(1, 2, 0, 3)) == "1.2.0-alpha.3"

    def test_custom_suffix(self):
        assert version_string(DevelopBranch(1, 2, 0), "-dev") == "1.2.0-dev"
        assert version_string(DevelopBranch(1, 2, 0), "") == "1.2.0"


class TestDeriveFromSnapshot:
    """End-to-end derivation from branch and tag names."""

    def test_develop_branch(self):
        derivation = derive_from_snapshot(DEVELOP)
        assert derivation.ref == DevelopBranch(1, 3, 0)
        assert derivation.version == "1.3.0-SNAPSHOT"
        assert derivation.is_snapshot is True
        assert derivation.target_release_version == SemVer(1, 3, 0)
        assert derivation.prior_release == SemVer(1, 2, 5)
        assert derivation.decision == RequireCompat(Compatibility.BINARY_COMPATIBLE, SemVer(1, 2, 5))

    def test_prerelease_tag(self):
        derivation = derive_from_snapshot(PRERELEASE)
        assert derivation.version == "1.4.0-alpha.0"
        assert derivation.is_snapshot is False
        assert derivation.prior_release == SemVer(1, 3, 1)
        assert derivation.decision == RequireCompat(Compatibility.BINARY_COMPATIBLE, SemVer(1, 3, 1))

    def test_since_excludes_prior(self):
        derivation = derive_from_snapshot(DEVELOP, since="1.3.0")
        assert derivation.since == SemVer(1, 3, 0)
        assert isinstance(derivation.decision, NoCompat)
        assert derivation.decision.reason == "artifact did not exist in prior release"

    def test_malformed_since_is_ignored(self):
        derivation = derive_from_snapshot(DEVELOP, since="1.3")
        assert derivation.since is None
        assert derivation.decision.required

    def test_legacy_mapper(self):
        snapshot = RepositorySnapshot(branch="develop-2.1.0", all_tags=("v2.0.3", "release-1.9.0"))
        mapper = pattern_tag_mapper(r"v(?P<version>\d+\.\d+\.\d+)")
        derivation = derive_from_snapshot(snapshot, legacy_mapper=mapper)
        assert derivation.prior_release == SemVer(2, 0, 3)

    def test_candidates(self):
        snapshot = RepositorySnapshot(
            branch="develop-1.0.0", head_tags=("release-0.9.0", "release-0.9.0-alpha.2")
        )
        derivation = derive_from_snapshot(snapshot)
        assert derivation.candidates == [
            DevelopBranch(1, 0, 0),
            PrereleaseTag(0, 9, 0, 2),
            ReleaseTag(0, 9, 0),
        ]

    def test_candidates_ranked_once(self, monkeypatch):
        calls = []

        def counting(branch_name, tag_names):
            calls.append(branch_name)
            return rank_candidates(branch_name, tag_names)

        monkeypatch.setattr(deriver_module, "rank_candidates", counting)
        derivation = derive_from_snapshot(DEVELOP)
        assert calls == ["develop-1.3.0"]
        assert derivation.notes == ["develop-1.3.0 (eligible branch)"]

    def test_no_eligible_ref(self):
        with pytest.raises(NoEligibleRefError):
            derive_from_snapshot(RepositorySnapshot(branch="main", head_tags=("latest",)))


class TestVersionDeriver:
    def test_uses_config(self):
        config = GitFluxConfig(snapshot_suffix="-dev", artifact_since="1.3.0")
        repository = FakeRepository(DEVELOP)
        derivation = VersionDeriver(config, repository).derive()
        assert repository.reads == 1
        assert derivation.version == "1.3.0-dev"
        assert derivation.since == SemVer(1, 3, 0)

    def test_since_argument_overrides_config(self):
        config = GitFluxConfig(artifact_since="1.3.0")
        derivation = VersionDeriver(config, FakeRepository(DEVELOP)).derive(since="1.0.0")
        assert derivation.since == SemVer(1, 0, 0)
        assert derivation.decision.required

    def test_config_legacy_pattern(self):
        config = GitFluxConfig(legacy_tag_pattern=r"v(?P<version>\d+\.\d+\.\d+)")
        snapshot = RepositorySnapshot(branch="develop-2.1.0", all_tags=("v2.0.3",))
        derivation = VersionDeriver(config, FakeRepository(snapshot)).derive()
        assert derivation.prior_release == SemVer(2, 0, 3)


class TestDerivationJson:
    """The machine-readable form used by ``gitflux version --json``."""

    def test_json_round_trip(self):
        derivation = derive_from_snapshot(DEVELOP, since="1.0.0")
        restored = Derivation.from_json(derivation.to_json())
        assert restored == derivation
        assert restored.notes == derivation.notes

    def test_json_shape(self):
        data = json.loads(derive_from_snapshot(PRERELEASE).to_json())
        assert data["schema"] == DERIVATION_SCHEMA
        assert data["ref"] == "release-1.4.0-alpha.0"
        assert data["kind"] == "prerelease-tag"
        assert data["version"] == "1.4.0-alpha.0"
        assert data["target_release_version"] == "1.4.0"
        assert data["prior_release"] == "1.3.1"
        assert data["since"] is None
        assert data["compatibility"]["level"] == "binary-compatible"
        assert data["candidates"] == ["release-1.4.0-alpha.0"]
        assert data["notes"] == ["release-1.4.0-alpha.0 -> 1.4.0-alpha.0 (eligible tag)"]

    @pytest.mark.parametrize("schema", [None, 0, DERIVATION_SCHEMA + 1])
    def test_unknown_schema_rejected(self, schema):
        data = json.loads(derive_from_snapshot(DEVELOP).to_json())
        data["schema"] = schema
        with pytest.raises(ValueError, match="Unsupported derivation schema"):
            Derivation.from_json(json.dumps(data))
