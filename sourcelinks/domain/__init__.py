"""
Domain layer for sourcelinks.

Contains pure domain objects with no I/O or side effects:
- RepositoryRecord: A discovered git checkout and its permalink base
- ProjectRecord: A build-project file inside a repository
- CharPosition / SourceCitation: A file location to link to

These objects are immutable and provide serialization methods for
JSONL output.
"""

from .repository import RepositoryRecord, normalize_path, github_blob_url
from .project import ProjectRecord, project_name_from
from .citation import CharPosition, SourceCitation

__all__ = [
    'RepositoryRecord',
    'normalize_path',
    'github_blob_url',
    'ProjectRecord',
    'project_name_from',
    'CharPosition',
    'SourceCitation',
]
