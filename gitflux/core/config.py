"""Global configuration for gitflux.

Manages default settings for the git reader, the version file writer, and
the compatibility decision. Settings can be overridden via environment
variables or explicit configuration.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from gitflux.core.types import GitFluxError
from gitflux.refs import LegacyTagMapper, no_legacy_tags, pattern_tag_mapper

_DEFAULT_VERSION_FILE = Path("target") / "VERSION"


class ConfigError(GitFluxError):
    """Raised when a configuration value cannot be used."""


@dataclass
class GitFluxConfig:
    """Top-level configuration for gitflux."""

    # Paths
    repo_dir: Path = field(default_factory=lambda: Path("."))
    version_file: Path = field(default_factory=lambda: _DEFAULT_VERSION_FILE)

    # Derivation
    artifact_since: str | None = None
    legacy_tag_pattern: str | None = None
    snapshot_suffix: str = "-SNAPSHOT"

    # Git
    git_executable: str = "git"
    git_timeout: float = 30.0

    log_level: str = "WARNING"

    @property
    def version_path(self) -> Path:
        """The version file location, resolved against the repository directory."""
        if self.version_file.is_absolute():
            return self.version_file
        return self.repo_dir / self.version_file

    def legacy_tag_mapper(self) -> LegacyTagMapper:
        """Build the legacy tag mapper described by ``legacy_tag_pattern``."""
        if not self.legacy_tag_pattern:
            return no_legacy_tags
        try:
            return pattern_tag_mapper(self.legacy_tag_pattern)
        except (re.error, ValueError) as exc:
            raise ConfigError(f"Invalid legacy tag pattern: {exc}") from exc

    @classmethod
    def from_env(cls) -> GitFluxConfig:
        """Build config from environment variables, falling back to defaults."""
        config = cls()

        if val := os.environ.get("GITFLUX_REPO_DIR"):
            config.repo_dir = Path(val)
        if val := os.environ.get("GITFLUX_VERSION_FILE"):
            config.version_file = Path(val)
        if val := os.environ.get("GITFLUX_ARTIFACT_SINCE"):
            config.artifact_since = val
        if val := os.environ.get("GITFLUX_LEGACY_TAG_PATTERN"):
            config.legacy_tag_pattern = val
        if (val := os.environ.get("GITFLUX_SNAPSHOT_SUFFIX")) is not None:
            config.snapshot_suffix = val
        if val := os.environ.get("GITFLUX_GIT"):
            config.git_executable = val
        if val := os.environ.get("GITFLUX_GIT_TIMEOUT"):
            try:
                config.git_timeout = float(val)
            except ValueError as exc:
                raise ConfigError(f"GITFLUX_GIT_TIMEOUT must be a number, got {val!r}") from exc
        if val := os.environ.get("GITFLUX_LOG_LEVEL"):
            config.log_level = val.upper()

        return config


# Module-level singleton
_config: GitFluxConfig | None = None


def get_config() -> GitFluxConfig:
    """Return the global gitflux config, lazily initialized from env."""
    global _config
    if _config is None:
        _config = GitFluxConfig.from_env()
    return _config


def set_config(config: GitFluxConfig | None) -> None:
    """Override the global config (useful in tests); None resets it."""
    global _config
    _config = config
