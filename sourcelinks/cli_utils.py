"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from typing import Any, Dict, Optional

from .config import configure_logging, load_config, logger
from .domain import CharPosition
from .exit_codes import (
    INTERRUPTED,
    get_exit_code_for_exception, CommandError
)


def standard_command():
    """
    Decorator that provides standard CLI behavior:
    - Log messages on stderr
    - Errors reported as a JSON object on stdout
    - Exit code taken from CommandError, or mapped from the exception type
    """
    def decorator(func):

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                logger.error("Interrupted by user")
                sys.exit(INTERRUPTED)
            except click.ClickException:
                # Click exceptions already have their exit code
                raise
            except CommandError as e:
                logger.error(str(e))
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": e.exit_code
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
                sys.exit(e.exit_code)
            except Exception as e:
                logger.error(f"Command failed: {e}")
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
                sys.exit(get_exit_code_for_exception(e))

        return wrapper
    return decorator


def load_command_config(ctx: Optional[click.Context]) -> Dict[str, Any]:
    """
    Load configuration for a command and apply its logging level.

    Honors the group's --config and --debug options.
    """
    obj = (ctx.find_root().obj if ctx else None) or {}
    config = load_config(obj.get('config_path'))
    if obj.get('debug'):
        configure_logging('DEBUG')
    else:
        configure_logging(config.get('logging', {}).get('level') or None)
    return config


def parse_position(ctx, param, value) -> Optional[CharPosition]:
    """Click callback turning ``LINE[:COLUMN]`` into a CharPosition."""
    if value is None:
        return None
    try:
        return CharPosition.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


# Standard options that many commands share
common_options = {
    'pretty': click.option('--pretty', is_flag=True,
                           help='Display as a formatted table instead of JSONL'),
    'scan_dir': click.option('--scan-dir', type=click.Path(),
                             help='Directory to scan for repositories (default: from config)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('pretty', 'scan_dir')
        def my_command(pretty, scan_dir):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
