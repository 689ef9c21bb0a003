"""
Repository domain object for sourcelinks.

RepositoryRecord represents one discovered git checkout together with the
commit-pinned blob URL used to build permalinks into it. Records are
immutable and serializable for JSONL output.
"""

from dataclasses import dataclass
from typing import Dict, Any
import os

GITHUB_URL = "https://github.com/"


def normalize_path(path) -> str:
    """Absolute, normalized form of a path (symlinks are not resolved)."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


def with_trailing_sep(path: str) -> str:
    return path.rstrip(os.sep) + os.sep


def github_blob_url(name: str, commit_sha: str) -> str:
    """Commit-pinned blob URL prefix for a GitHub repository."""
    return f"{GITHUB_URL}{name}/blob/{commit_sha}/"


@dataclass(frozen=True)
class RepositoryRecord:
    """
    Immutable representation of a discovered git checkout.

    Attributes:
        name: Host-relative repository name, e.g. ``org/repo``
        permalink_base: ``https://github.com/<name>/blob/<sha>/``
        root_path: Normalized working-tree root (parent of ``.git``)
        commit_sha: Commit id taken verbatim from FETCH_HEAD
    """

    name: str
    permalink_base: str
    root_path: str
    commit_sha: str

    @classmethod
    def create(cls, name: str, commit_sha: str, root_path) -> 'RepositoryRecord':
        """Build a record, deriving the permalink base from name and commit."""
        return cls(
            name=name,
            permalink_base=github_blob_url(name, commit_sha),
            root_path=normalize_path(root_path),
            commit_sha=commit_sha,
        )

    def contains(self, file_path) -> bool:
        """True if file_path lies strictly below this repository's root."""
        return normalize_path(file_path).startswith(with_trailing_sep(self.root_path))

    def relative_path(self, file_path) -> str:
        """Path of file_path relative to the root, always with ``/`` separators."""
        relative = os.path.relpath(normalize_path(file_path), self.root_path)
        return relative.replace(os.sep, '/')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'permalink_base': self.permalink_base,
            'root_path': self.root_path,
            'commit_sha': self.commit_sha,
        }

    def __str__(self) -> str:
        return f"{self.name} ({self.root_path})"
