"""
Service layer for sourcelinks.

Contains the logic that orchestrates domain objects and infrastructure:
- RepositoryIndex: Repository discovery and file ownership
- ProjectRegistry: Build-project catalog keyed by name
- link_formatter: Labels, permalinks and markdown links
- MarkdownReferenceTable: Deduplicated reference-style links

Services are the primary API for commands to use.
"""

from .repository_index import RepositoryIndex
from .project_registry import ProjectRegistry, find_project_files
from .link_formatter import (
    source_permalink,
    github_source_link,
    formatted_position,
    formatted_markdown_link,
    markdown_chart_link,
)
from .reference_table import MarkdownReferenceTable

__all__ = [
    'RepositoryIndex',
    'ProjectRegistry',
    'find_project_files',
    'source_permalink',
    'github_source_link',
    'formatted_position',
    'formatted_markdown_link',
    'markdown_chart_link',
    'MarkdownReferenceTable',
]
