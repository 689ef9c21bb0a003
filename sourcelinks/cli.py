#!/usr/bin/env python3

import click

from sourcelinks import __version__
from sourcelinks.commands.repos import repos_handler
from sourcelinks.commands.projects import projects_cmd
from sourcelinks.commands.link import link_handler
from sourcelinks.commands.cite import cite_handler
from sourcelinks.commands.config import config_cmd


@click.group()
@click.version_option(version=__version__, prog_name='sourcelinks')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Configuration file (default: ~/.sourcelinks/config.*)')
@click.pass_context
def cli(ctx, debug, config_path):
    """sourcelinks - Commit-pinned GitHub links to source lines.

    Finds the git checkouts that own source files and builds permalinks
    and markdown references for CI reports.
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    ctx.obj['config_path'] = config_path


cli.add_command(repos_handler, name='repos')
cli.add_command(projects_cmd)
cli.add_command(link_handler, name='link')
cli.add_command(cite_handler, name='cite')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
