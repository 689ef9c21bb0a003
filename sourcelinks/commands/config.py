import click
from pathlib import Path
import json

from ..cli_utils import standard_command
from ..config import get_config_path, get_default_config, load_config, save_config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("generate")
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@standard_command()
def generate_config(path, force):
    """Write the default configuration to PATH (JSON, TOML or YAML by suffix)."""
    config_path = Path(path) if path else get_config_path()
    if config_path.exists() and not force:
        click.echo(f"Configuration already exists at {config_path} (use --force to overwrite)")
        return
    saved = save_config(get_default_config(), config_path)
    click.echo(f"Default configuration written to {saved}")


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@click.pass_context
@standard_command()
def show_config(ctx, pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    config_path = (ctx.find_root().obj or {}).get('config_path')

    if path:
        print(json.dumps({"config_path": str(config_path or get_config_path())}))
        return

    config = load_config(config_path)

    if pretty:
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(config, ensure_ascii=False))
