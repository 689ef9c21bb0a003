"""
sourcelinks - Commit-pinned GitHub links to source lines for CI reports.

sourcelinks finds the git checkouts that own the files a report cites and
turns (file, line range) citations into permalinks and deduplicated
markdown references.

Quick Start:
    import sourcelinks
    from sourcelinks import CharPosition

    # Scan a source tree for repositories and project files
    locator = sourcelinks.SourceLocator.from_paths("/src")

    # Permalink to a line range
    locator.github_source_link("/src/app/Foo.cs", 10, 15)
    # -> https://github.com/org/app/blob/<sha>/Foo.cs#L10-#L15

    # Markdown reference links, defined once per section
    refs = locator.reference_table()
    text = refs.add_source_link("/src/app/Foo.cs", CharPosition(10, 1))
    text += "\\n\\n" + refs.emit_reference_block()

Domain Objects:
    RepositoryRecord - A git checkout and its permalink base
    ProjectRecord - A build-project file inside a repository
    CharPosition, SourceCitation - Locations to link to

Services:
    RepositoryIndex - Discovery and longest-prefix file ownership
    ProjectRegistry - Project files keyed by name
    MarkdownReferenceTable - Deduplicated reference-style links
"""

__version__ = "0.3.0"

# High-level API
from .api import SourceLocator, create

# Domain objects
from .domain import (
    RepositoryRecord,
    ProjectRecord,
    CharPosition,
    SourceCitation,
)

# Services (for advanced use)
from .services import (
    RepositoryIndex,
    ProjectRegistry,
    MarkdownReferenceTable,
)

# Errors
from .exit_codes import (
    CommandError,
    ConfigError,
    MalformedPointerError,
    RepoNotFoundError,
    DuplicateProjectError,
    ProjectLookupError,
)

# Configuration
from .config import load_config, save_config, ReportSettings

__all__ = [
    # Version
    "__version__",
    # High-level API
    "SourceLocator",
    "create",
    # Domain objects
    "RepositoryRecord",
    "ProjectRecord",
    "CharPosition",
    "SourceCitation",
    # Services
    "RepositoryIndex",
    "ProjectRegistry",
    "MarkdownReferenceTable",
    # Errors
    "CommandError",
    "ConfigError",
    "MalformedPointerError",
    "RepoNotFoundError",
    "DuplicateProjectError",
    "ProjectLookupError",
    # Configuration
    "load_config",
    "save_config",
    "ReportSettings",
]
