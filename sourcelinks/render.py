"""
Rendering functions for sourcelinks output.

This module handles JSONL streaming and pretty-printed tables.
Services return data, this module makes it human-readable.
"""

import json
import sys
from typing import Any, Iterable

from rich.table import Table
from rich.console import Console
from rich import box

from .domain import ProjectRecord, RepositoryRecord

console = Console()


def emit_jsonl(items: Iterable[Any], stream=None) -> None:
    """Print one JSON object per item (items with to_dict() or dicts)."""
    stream = stream or sys.stdout
    for item in items:
        data = item.to_dict() if hasattr(item, 'to_dict') else item
        print(json.dumps(data, ensure_ascii=False), file=stream, flush=True)


def render_repositories_table(repos: Iterable[RepositoryRecord]) -> None:
    """Render discovered repositories as a pretty table."""
    repos = list(repos)
    if not repos:
        console.print("[yellow]No repositories found.[/yellow]")
        return

    table = Table(
        title="Repositories",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Repository", style="cyan")
    table.add_column("Commit", style="green")
    table.add_column("Root", style="dim")

    for repo in repos:
        table.add_row(repo.name, repo.commit_sha[:12], repo.root_path)

    console.print(table)


def render_projects_table(projects: Iterable[ProjectRecord]) -> None:
    """Render registered projects as a pretty table."""
    projects = list(projects)
    if not projects:
        console.print("[yellow]No projects found.[/yellow]")
        return

    table = Table(
        title="Projects",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Project", style="cyan")
    table.add_column("Repository", style="green")
    table.add_column("Path", style="dim")

    for project in projects:
        table.add_row(project.project_name, project.repository.name, project.repo_relative_path)

    console.print(table)
