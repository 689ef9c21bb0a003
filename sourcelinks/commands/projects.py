"""
Project commands for sourcelinks.

Lists build-project files and the repositories that own them.
"""

import click

from ..cli_utils import standard_command, add_common_options, load_command_config
from ..config import ReportSettings
from ..render import emit_jsonl, render_projects_table
from ..services import ProjectRegistry, RepositoryIndex


def _build_registry(ctx, scan_dir, pattern) -> ProjectRegistry:
    settings = ReportSettings.from_config(load_command_config(ctx))
    scan_dir = scan_dir or settings.source_scan_dir
    index = RepositoryIndex.from_scan(scan_dir)
    return ProjectRegistry.build(scan_dir, index, pattern=pattern or settings.project_file_pattern)


@click.group('projects')
def projects_cmd():
    """Inspect build-project files and their repositories.

    \b
    Examples:
        sourcelinks projects list ~/src
        sourcelinks projects list --pattern '*.fsproj' --pretty
        sourcelinks projects show App
    """
    pass


@projects_cmd.command('list')
@click.argument('scan_dir', required=False, type=click.Path())
@click.option('--pattern', help='Project file glob (default: from config, *.csproj)')
@add_common_options('pretty')
@click.pass_context
@standard_command()
def list_handler(ctx, scan_dir, pattern, pretty):
    """List project files found under SCAN_DIR."""
    registry = _build_registry(ctx, scan_dir, pattern)
    if pretty:
        render_projects_table(registry)
    else:
        emit_jsonl(registry)


@projects_cmd.command('show')
@click.argument('name')
@click.option('--pattern', help='Project file glob (default: from config, *.csproj)')
@add_common_options('scan_dir')
@click.pass_context
@standard_command()
def show_handler(ctx, name, pattern, scan_dir):
    """Show the project called NAME (a name, file name or path)."""
    registry = _build_registry(ctx, scan_dir, pattern)
    emit_jsonl([registry.get(name)])
