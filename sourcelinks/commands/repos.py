"""
Handles the 'repos' command for listing discovered repositories.
"""

import click

from ..cli_utils import standard_command, add_common_options, load_command_config
from ..config import ReportSettings
from ..render import emit_jsonl, render_repositories_table
from ..services import RepositoryIndex


@click.command(name='repos')
@click.argument('scan_dir', required=False, type=click.Path())
@add_common_options('pretty')
@click.pass_context
@standard_command()
def repos_handler(ctx, scan_dir, pretty):
    """List git repositories found at, below and above SCAN_DIR.

    SCAN_DIR defaults to the configured source scan directory.

    \b
    Examples:
        sourcelinks repos                 # Configured scan directory
        sourcelinks repos ~/src --pretty  # Table output
    """
    config = load_command_config(ctx)
    scan_dir = scan_dir or ReportSettings.from_config(config).source_scan_dir
    index = RepositoryIndex.from_scan(scan_dir)

    if pretty:
        render_repositories_table(index)
    else:
        emit_jsonl(index)
