"""
Project domain object for sourcelinks.

A ProjectRecord is one build-project file (``*.csproj`` by default) located
inside a known repository. Two records are the same project when they point
at the same file, whatever else they carry.
"""

import os
from typing import Any, Dict, Optional

from .repository import RepositoryRecord, normalize_path, with_trailing_sep


class ProjectRecord:
    """
    A build-project file and its place inside its owning repository.

    Example:
        project = ProjectRecord("/src/app/App/App.csproj", repo)
        project.project_name            # "App"
        project.repo_relative_path      # "App/App.csproj"
    """

    __slots__ = (
        '_file_path', '_directory_path', '_project_name',
        '_repository', '_repo_relative_path', '_repo_relative_directory_path',
    )

    def __init__(self, file_path, repository: RepositoryRecord):
        file_path = normalize_path(file_path)
        directory_path = os.path.dirname(file_path)
        if not directory_path:
            raise ValueError(f"Unable to determine directory name of {file_path}")

        self._file_path = file_path
        self._directory_path = directory_path
        self._project_name = os.path.splitext(os.path.basename(file_path))[0]
        self._repository = repository
        self._repo_relative_path = repository.relative_path(file_path)
        self._repo_relative_directory_path = os.path.dirname(self._repo_relative_path)

    @property
    def project_name(self) -> str:
        return self._project_name

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def directory_path(self) -> str:
        return self._directory_path

    @property
    def repository(self) -> RepositoryRecord:
        return self._repository

    @property
    def repo_relative_path(self) -> str:
        return self._repo_relative_path

    @property
    def repo_relative_directory_path(self) -> str:
        return self._repo_relative_directory_path

    def copy(self) -> 'ProjectRecord':
        """Independent record sharing the same (immutable) repository."""
        return ProjectRecord(self._file_path, self._repository)

    def contains_file(self, file_path) -> bool:
        """True if file_path lies below this project's directory."""
        return normalize_path(file_path).startswith(with_trailing_sep(self._directory_path))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'project_name': self.project_name,
            'file_path': self.file_path,
            'directory_path': self.directory_path,
            'repo_relative_path': self.repo_relative_path,
            'repo_relative_directory_path': self.repo_relative_directory_path,
            'repository': self.repository.name,
        }

    # Identity is the project file path only.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProjectRecord):
            return NotImplemented
        return self._file_path == other._file_path

    def __hash__(self) -> int:
        return hash(self._file_path)

    def __str__(self) -> str:
        return f"ProjectRecord {{ project_name = {self.project_name} file_path = {self.file_path} }}"

    def __repr__(self) -> str:
        return f"ProjectRecord(project_name={self.project_name!r}, file_path={self.file_path!r})"


def project_name_from(name_or_path: str) -> Optional[str]:
    """Project key for a bare name, a file name, or a full path."""
    if not name_or_path:
        return None
    return os.path.splitext(os.path.basename(os.fspath(name_or_path)))[0]
