"""
Link formatting for sourcelinks.

Pure functions turning a file path and optional positions into labels,
permalinks and markdown links. Example permalink:

    https://github.com/org/repo/blob/1588c4d/src/Scanner.cs#L161-#L170
"""

import logging
import os
from typing import Optional

from ..domain import CharPosition, RepositoryRecord, SourceCitation, normalize_path
from .repository_index import RepositoryIndex

logger = logging.getLogger(__name__)


def line_anchor(start_line: Optional[int] = None, end_line: Optional[int] = None) -> str:
    """``#L<start>``, plus ``-#L<end>`` when the end is on another line."""
    anchor = f"#L{start_line}" if start_line is not None else ""
    if start_line is not None and end_line is not None and start_line != end_line:
        anchor += "-"
    if end_line is not None and end_line != start_line:
        anchor += f"#L{end_line}"
    return anchor


def source_permalink(
    repo: RepositoryRecord,
    file_path,
    start_line: Optional[int] = None,
    end_line: Optional[int] = None,
) -> str:
    """Commit-pinned URL of file_path (which must lie inside repo)."""
    return (
        repo.permalink_base.rstrip('/')
        + '/'
        + repo.relative_path(file_path)
        + line_anchor(start_line, end_line)
    )


def github_source_link(
    repo_index: RepositoryIndex,
    file_path,
    start_line: Optional[int] = None,
    end_line: Optional[int] = None,
) -> Optional[str]:
    """
    Permalink for file_path, or None when no repository owns it.

    The URL is built, never fetched; a stale commit yields a dead link.
    """
    full_path = normalize_path(file_path)
    repo = repo_index.owner_of(full_path)
    if repo is None:
        logger.debug(f"Unable to find git repo for {full_path} (originally: {file_path})")
        return None
    return source_permalink(repo, full_path, start_line, end_line)


def formatted_position(
    file_path,
    start: Optional[CharPosition] = None,
    end: Optional[CharPosition] = None,
) -> str:
    """
    Human-readable location, e.g. ``Foo.cs 3:1`` or ``Foo.cs 3:1-5:2``.

    The end is only shown when it is on a different line than the start.
    """
    label = os.path.basename(os.fspath(file_path))
    if start is None:
        return label
    label += f" {start.line}:{start.column}"
    if end is not None and end.line != start.line:
        label += f"-{end.line}:{end.column}"
    return label


def formatted_markdown_link(
    repo_index: RepositoryIndex,
    file_path,
    start: Optional[CharPosition] = None,
    end: Optional[CharPosition] = None,
) -> str:
    """
    ``[Foo.cs 3:1](permalink)``, or the bare label if the file has no repo.
    """
    label = formatted_position(file_path, start, end)
    start_line, end_line = SourceCitation(file_path, start, end).lines
    url = github_source_link(repo_index, file_path, start_line, end_line)
    if url is None:
        return label
    return f"[{label}]({url})"


def markdown_chart_link(output_dir, plot_output_dir, file_name: str) -> str:
    """Markdown image link to a rendered chart, relative to output_dir."""
    rel_path = os.path.relpath(os.path.join(plot_output_dir, file_name), output_dir)
    rel_path = rel_path.replace(os.sep, '/')
    if not rel_path.endswith('.png'):
        rel_path += '.png'
    return f"![{file_name}]({rel_path})"
