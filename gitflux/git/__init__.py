"""gitflux git — repository metadata reader and version file persistence."""

from gitflux.git.repository import GitError, GitRepository, RepositorySnapshot
from gitflux.git.versionfile import read_version_file, write_version_file

__all__ = [
    "GitError",
    "GitRepository",
    "RepositorySnapshot",
    "read_version_file",
    "write_version_file",
]
