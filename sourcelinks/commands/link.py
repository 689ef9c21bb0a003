"""
Handles the 'link' command: permalink for one source location.
"""

import click

from ..cli_utils import standard_command, add_common_options, load_command_config, parse_position
from ..config import ReportSettings
from ..domain import SourceCitation
from ..exit_codes import RepoNotFoundError
from ..services import RepositoryIndex, formatted_markdown_link, github_source_link


@click.command(name='link')
@click.argument('file_path', type=click.Path())
@click.option('--start', callback=parse_position, help='Start position, LINE[:COLUMN]')
@click.option('--end', callback=parse_position, help='End position, LINE[:COLUMN]')
@click.option('--markdown', is_flag=True, help='Print a markdown link instead of the bare URL')
@add_common_options('scan_dir')
@click.pass_context
@standard_command()
def link_handler(ctx, file_path, start, end, markdown, scan_dir):
    """Print the commit-pinned GitHub URL of FILE_PATH.

    With --markdown an unresolvable file prints its plain label;
    otherwise it is an error.

    \b
    Examples:
        sourcelinks link src/App/Foo.cs --start 10 --end 15
        sourcelinks link src/App/Foo.cs --start 3:1 --markdown
    """
    config = load_command_config(ctx)
    index = RepositoryIndex.from_scan(scan_dir or ReportSettings.from_config(config).source_scan_dir)

    if markdown:
        click.echo(formatted_markdown_link(index, file_path, start, end))
        return

    start_line, end_line = SourceCitation(file_path, start, end).lines
    url = github_source_link(index, file_path, start_line, end_line)
    if url is None:
        raise RepoNotFoundError(f"No git repository found for {file_path}", path=file_path)
    click.echo(url)
