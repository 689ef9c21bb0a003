"""
Project registry for sourcelinks.

Catalogs build-project files (``*.csproj`` by default) found under a scan
directory, keyed by project name. Build logs and test results often carry
project paths from another machine (e.g. inside an action container), so
projects are looked up by name rather than by path.
"""

from typing import Dict, Iterator, List, Optional, Tuple
import fnmatch
import logging
import os

from ..domain import ProjectRecord, normalize_path, project_name_from
from ..exit_codes import DuplicateProjectError, ProjectLookupError, RepoNotFoundError
from ..infra import GIT_DIR_NAME
from .repository_index import RepositoryIndex

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_PATTERN = '*.csproj'


def find_project_files(scan_dir, pattern: str = DEFAULT_PROJECT_PATTERN) -> List[str]:
    """All files under scan_dir whose name matches pattern, sorted."""
    matches = []
    for dirpath, dirnames, filenames in os.walk(scan_dir):
        if GIT_DIR_NAME in dirnames:
            dirnames.remove(GIT_DIR_NAME)
        for filename in fnmatch.filter(filenames, pattern):
            matches.append(os.path.join(dirpath, filename))
    return sorted(matches)


class ProjectRegistry:
    """
    Immutable catalog of ProjectRecords keyed by project name.

    Records handed out are copies; the registry's own table cannot be
    changed by callers.

    Example:
        index = RepositoryIndex.from_scan("/src")
        registry = ProjectRegistry.build("/src", index)
        project = registry.get("/other/machine/path/App.csproj")
        print(project.repo_relative_directory_path)
    """

    def __init__(self, projects: Optional[Dict[str, ProjectRecord]] = None):
        self._projects: Dict[str, ProjectRecord] = dict(projects or {})

    @classmethod
    def build(
        cls,
        scan_dir,
        repo_index: RepositoryIndex,
        pattern: str = DEFAULT_PROJECT_PATTERN,
    ) -> 'ProjectRegistry':
        """
        Scan scan_dir for project files and resolve each one's repository.

        Args:
            scan_dir: Directory to search recursively
            repo_index: Index used to find the owning repository
            pattern: Glob matched against file names

        Raises:
            RepoNotFoundError: A project file has no owning repository
            DuplicateProjectError: Two project files share a project name
        """
        projects: Dict[str, ProjectRecord] = {}
        scan_dir = normalize_path(scan_dir)
        if not os.path.isdir(scan_dir):
            logger.warning(f"Project scan directory '{scan_dir}' does not exist")
            return cls(projects)

        logger.info(f"Scanning for {pattern} in: {scan_dir}")
        for file_path in find_project_files(scan_dir, pattern):
            repo = repo_index.owner_of(file_path)
            if repo is None:
                raise RepoNotFoundError(f"No git repository found for project {file_path}", path=file_path)

            project = ProjectRecord(file_path, repo)
            logger.info(f"  project: {file_path}\n    => {project.repo_relative_path}")
            existing = projects.get(project.project_name)
            if existing is not None:
                raise DuplicateProjectError(project.project_name, existing.file_path, project.file_path)
            projects[project.project_name] = project

        return cls(projects)

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, name_or_path) -> bool:
        return project_name_from(name_or_path) in self._projects

    def __iter__(self) -> Iterator[ProjectRecord]:
        return iter(self.snapshot())

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._projects)

    def get(self, name_or_path) -> ProjectRecord:
        """
        Project matching the base name of name_or_path.

        Any directory and extension are ignored, so a stale absolute path
        from a build log still finds the local project.

        Raises:
            ProjectLookupError: Unless exactly one project matches
        """
        name = project_name_from(name_or_path)
        matches = [p for p in self._projects.values() if p.project_name == name]
        if len(matches) != 1:
            raise ProjectLookupError(str(name_or_path), len(matches))
        return matches[0].copy()

    def snapshot(self) -> Tuple[ProjectRecord, ...]:
        """Copies of all records, in discovery order."""
        return tuple(project.copy() for project in self._projects.values())

    def project_for_file(self, file_path) -> Optional[ProjectRecord]:
        """Innermost project whose directory contains file_path, if any."""
        containing = [p for p in self._projects.values() if p.contains_file(file_path)]
        if not containing:
            return None
        return max(containing, key=lambda p: len(p.directory_path)).copy()
