"""
Handles the 'cite' command: markdown citations with one reference block.
"""

import sys
from dataclasses import replace

import click

from ..api import SourceLocator
from ..cli_utils import standard_command, add_common_options, load_command_config
from ..config import ReportSettings
from ..domain import SourceCitation


@click.command(name='cite')
@click.argument('citations', nargs=-1)
@click.option('--short-ids/--no-short-ids', default=None,
              help='Reference links by generated ids (default: from config)')
@click.option('--prefix', default=None, help='Prefix for generated ids')
@add_common_options('scan_dir')
@click.pass_context
@standard_command()
def cite_handler(ctx, citations, short_ids, prefix, scan_dir):
    """Turn PATH[:LINE[:COL][-LINE[:COL]]] citations into markdown.

    Citations are read from the arguments, or one per line from stdin.
    Each citation prints as a reference-style link (or a plain label when
    the file has no repository), followed by a blank line and the link
    definitions.

    \b
    Examples:
        sourcelinks cite src/App/Foo.cs:3:1 src/App/Foo.cs:10-15
        grep -n TODO -r src | cut -d: -f1,2 | sourcelinks cite --short-ids --prefix t
    """
    config = load_command_config(ctx)
    settings = ReportSettings.from_config(config)
    if scan_dir:
        settings = replace(settings, source_scan_dir=scan_dir)

    locator = SourceLocator(settings, scan_projects=False)
    refs = locator.reference_table(generate_ids=short_ids, generated_id_prefix=prefix)

    lines = citations or [line for line in sys.stdin.read().splitlines() if line.strip()]
    for text in lines:
        citation = SourceCitation.parse(text)
        click.echo(refs.add_source_link(citation.file_path, citation.start, citation.end))

    block = refs.emit_reference_block()
    if block:
        click.echo()
        click.echo(block, nl=False)
