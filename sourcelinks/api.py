"""
High-level Python API for sourcelinks.

One SourceLocator is created per report run. It owns the repository index
and the project registry, and is shared by every generator that needs to
cite source lines.

Example:
    import sourcelinks

    locator = sourcelinks.create()           # settings from config/env

    # Or with explicit paths
    locator = sourcelinks.SourceLocator.from_paths(
        source_scan_dir="/src",
        output_dir="/src/report",
    )

    # Link to source lines
    url = locator.github_source_link("/src/app/Foo.cs", 3, 8)
    md = locator.formatted_github_source_link("/src/app/Foo.cs", CharPosition(3, 1))

    # Reference-style links with a single definitions block
    refs = locator.reference_table(generate_ids=True, generated_id_prefix="t")
    token = refs.add_source_link("/src/app/Foo.cs", CharPosition(3, 1))
    block = refs.emit_reference_block()

    # Projects
    project = locator.get_project("App.csproj")
"""

from typing import Any, Dict, Optional, Tuple
import logging

from .config import ReportSettings, load_config
from .domain import CharPosition, ProjectRecord, RepositoryRecord
from .infra import GitClient
from .services import (
    RepositoryIndex,
    ProjectRegistry,
    MarkdownReferenceTable,
    formatted_markdown_link,
    formatted_position,
    github_source_link,
    markdown_chart_link,
)

logger = logging.getLogger(__name__)


class SourceLocator:
    """
    Per-run context resolving file paths to repositories, projects and links.

    Example:
        locator = SourceLocator(settings)
        repo = locator.repository_for("/src/app/Foo.cs")
    """

    def __init__(
        self,
        settings: ReportSettings,
        git_client: Optional[GitClient] = None,
        scan_projects: bool = True,
    ):
        """
        Initialize SourceLocator.

        Scans settings.source_scan_dir for repositories and, unless
        scan_projects is False, for project files.

        Raises:
            MalformedPointerError: The scan root's own repository is unreadable
            RepoNotFoundError: A project file has no owning repository
            DuplicateProjectError: Two project files share a name
        """
        self.settings = settings
        scan_dir = settings.source_scan_dir
        self.repo_index = RepositoryIndex.from_scan(scan_dir, git_client=git_client)
        if scan_dir and scan_projects:
            self.projects = ProjectRegistry.build(
                scan_dir, self.repo_index, pattern=settings.project_file_pattern
            )
        else:
            self.projects = ProjectRegistry()

    @classmethod
    def from_config(
        cls,
        config: Optional[Dict[str, Any]] = None,
        create_dirs: bool = True,
        **kwargs,
    ) -> 'SourceLocator':
        """Build a locator from a configuration dict (loaded if None)."""
        settings = ReportSettings.from_config(config if config is not None else load_config())
        if create_dirs:
            settings.ensure_output_dirs()
        return cls(settings, **kwargs)

    @classmethod
    def from_paths(
        cls,
        source_scan_dir: Optional[str],
        output_dir: str = ".",
        **kwargs,
    ) -> 'SourceLocator':
        """Build a locator for explicit directories, without any config file."""
        settings = ReportSettings(output_dir=output_dir, source_scan_dir=source_scan_dir)
        return cls(settings, **kwargs)

    @property
    def repositories(self) -> Tuple[RepositoryRecord, ...]:
        return self.repo_index.repositories

    def repository_for(self, file_path) -> Optional[RepositoryRecord]:
        return self.repo_index.owner_of(file_path)

    def github_source_link(
        self,
        file_path,
        line_start: Optional[int] = None,
        line_end: Optional[int] = None,
    ) -> Optional[str]:
        url = github_source_link(self.repo_index, file_path, line_start, line_end)
        if url is None:
            logger.warning(f"Unable to find git repo for {file_path}")
        return url

    def formatted_source_position(
        self,
        file_path,
        start: Optional[CharPosition] = None,
        end: Optional[CharPosition] = None,
    ) -> str:
        return formatted_position(file_path, start, end)

    def formatted_github_source_link(
        self,
        file_path,
        start: Optional[CharPosition] = None,
        end: Optional[CharPosition] = None,
    ) -> str:
        return formatted_markdown_link(self.repo_index, file_path, start, end)

    def markdown_chart_link(self, file_name: str) -> str:
        return markdown_chart_link(self.settings.output_dir, self.settings.plot_output_dir, file_name)

    def reference_table(
        self,
        generate_ids: Optional[bool] = None,
        generated_id_prefix: Optional[str] = None,
    ) -> MarkdownReferenceTable:
        """New reference table bound to this run's index; defaults from settings."""
        return MarkdownReferenceTable(
            self.repo_index,
            generate_ids=self.settings.generate_ids if generate_ids is None else generate_ids,
            generated_id_prefix=(self.settings.generated_id_prefix
                                 if generated_id_prefix is None else generated_id_prefix),
            quiet_patterns=self.settings.quiet_unresolved_patterns,
        )

    def get_project(self, file_name_or_path) -> ProjectRecord:
        return self.projects.get(file_name_or_path)

    def get_projects_copy(self) -> Tuple[ProjectRecord, ...]:
        return self.projects.snapshot()


def create(config: Optional[Dict[str, Any]] = None, **kwargs) -> SourceLocator:
    """Convenience constructor: SourceLocator.from_config(config, **kwargs)."""
    return SourceLocator.from_config(config, **kwargs)
