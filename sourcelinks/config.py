#!/usr/bin/env python3

import os
import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import logging
import sys

import toml
import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("sourcelinks")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']

# GitHub Action inputs mapped onto config keys under "report"
ACTION_INPUTS = {
    'INPUT_OUTPUT_DIR': 'output_dir',
    'INPUT_SOURCE_SCAN_DIR': 'source_scan_dir',
    'INPUT_LINE_COUNT_FILE_PATTERN': 'line_count_file_pattern',
    'INPUT_COVERAGE_HISTORY_DIR': 'coverage_history_dir',
    'INPUT_TEST_RESULTS_DIR': 'test_results_dir',
    'INPUT_PLOT_DEFINITIONS_DIR': 'plot_definitions_dir',
    'GITHUB_REPOSITORY': 'repository',
    'GITHUB_SHA': 'commit_hash',
}


def should_log_debug() -> bool:
    """
    Whether debug output is wanted for this run.

    Only when not running as a published action, or when the action is
    being exercised inside its own repository.
    """
    action_repo = os.environ.get('GITHUB_ACTION_REPOSITORY')
    if not action_repo:
        return True
    return os.environ.get('GITHUB_REPOSITORY') == action_repo


def configure_logging(level: Optional[str] = None) -> None:
    """Apply a log level to the package logger."""
    if level is None:
        level = 'DEBUG' if should_log_debug() else 'INFO'
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. SOURCELINKS_CONFIG environment variable
    2. ~/.sourcelinks/ directory
    """
    if 'SOURCELINKS_CONFIG' in os.environ:
        path = Path(os.environ['SOURCELINKS_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.sourcelinks'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "report": {
            "output_dir": "",
            "source_scan_dir": "",
            "build_log_file_pattern": "*-build.log",
            "line_count_file_pattern": r"(?<!\.(verified|generated))\.(axaml|cs|ps1)$",
            "coverage_history_dir": "",
            "plot_definitions_dir": "",
            "test_results_dir": "",
            "repository": "",
            "commit_hash": "",
        },
        "projects": {
            "file_pattern": "*.csproj",
        },
        "links": {
            "generate_ids": False,
            "generated_id_prefix": "",
            "quiet_unresolved_patterns": ["Microsoft.NET.Sdk"],
        },
        "logging": {
            "level": "",
        },
    }


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(config_path=None):
    """
    Load configuration from file.

    Defaults are merged with the file contents, then environment
    overrides and GitHub Action inputs are applied on top.

    Raises:
        ConfigError: If the configuration file exists but cannot be parsed
    """
    from .exit_codes import ConfigError

    config_path = Path(config_path) if config_path else get_config_path()
    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        config = merge_configs(config, file_config)

    config = apply_env_overrides(config)
    config = apply_action_inputs(config)
    return config


def save_config(config, config_path=None):
    """Save configuration to file, choosing the format from the suffix."""
    config_path = Path(config_path) if config_path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    with open(config_path, 'w') as f:
        if suffix == '.toml':
            toml.dump(config, f)
        elif suffix in ['.yaml', '.yml']:
            yaml.safe_dump(config, f, default_flow_style=False)
        else:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: SOURCELINKS_SECTION_KEY
    For example: SOURCELINKS_LINKS_GENERATE_IDS=true
    """
    env_prefix = "SOURCELINKS_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'SOURCELINKS_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that prefixes the remaining parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config


def apply_action_inputs(config):
    """Copy non-empty GitHub Action inputs into the "report" section."""
    report = config.setdefault('report', {})
    for env_key, config_key in ACTION_INPUTS.items():
        value = os.environ.get(env_key)
        if value:
            report[config_key] = value
    return config


def _optional(value) -> Optional[str]:
    return str(value) if value else None


def _string_list(value) -> Tuple[str, ...]:
    """A list setting, also accepted as one comma-separated string."""
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class ReportSettings:
    """
    Resolved settings for one report-generation run.

    Built from the configuration dict; directories left empty fall back
    to the current working directory.
    """
    output_dir: str
    source_scan_dir: Optional[str]
    build_log_file_pattern: str = "*-build.log"
    line_count_file_pattern: str = r"(?<!\.(verified|generated))\.(axaml|cs|ps1)$"
    coverage_history_dir: Optional[str] = None
    plot_definitions_dir: Optional[str] = None
    test_results_dir: Optional[str] = None
    repository: str = ""
    commit_hash: str = ""
    project_file_pattern: str = "*.csproj"
    quiet_unresolved_patterns: Tuple[str, ...] = field(default=("Microsoft.NET.Sdk",))
    generate_ids: bool = False
    generated_id_prefix: str = ""

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> 'ReportSettings':
        config = config if config is not None else load_config()
        report = config.get('report', {})
        links = config.get('links', {})
        cwd = os.getcwd()
        return cls(
            output_dir=report.get('output_dir') or cwd,
            source_scan_dir=report.get('source_scan_dir') or cwd,
            build_log_file_pattern=report.get('build_log_file_pattern') or "*-build.log",
            line_count_file_pattern=report.get('line_count_file_pattern') or cls.line_count_file_pattern,
            coverage_history_dir=_optional(report.get('coverage_history_dir')),
            plot_definitions_dir=_optional(report.get('plot_definitions_dir')),
            test_results_dir=_optional(report.get('test_results_dir')),
            repository=report.get('repository') or "",
            commit_hash=report.get('commit_hash') or "",
            project_file_pattern=config.get('projects', {}).get('file_pattern') or "*.csproj",
            quiet_unresolved_patterns=_string_list(links.get('quiet_unresolved_patterns')),
            generate_ids=bool(links.get('generate_ids', False)),
            generated_id_prefix=links.get('generated_id_prefix') or "",
        )

    @property
    def plot_output_dir(self) -> str:
        return os.path.join(self.output_dir, 'charts')

    @property
    def metadata_output_dir(self) -> str:
        return os.path.join(self.output_dir, 'metadata')

    @property
    def test_failure_output_dir(self) -> str:
        return os.path.join(self.output_dir, 'test_failures')

    @property
    def todo_output_dir(self) -> str:
        return self.output_dir

    @property
    def build_log_history_output_dir(self) -> str:
        return self.metadata_output_dir

    @property
    def line_count_history_output_dir(self) -> str:
        return self.metadata_output_dir

    @property
    def is_todo_scan_enabled(self) -> bool:
        return bool(self.source_scan_dir and self.output_dir and self.commit_hash)

    @property
    def is_coverage_history_enabled(self) -> bool:
        return bool(self.coverage_history_dir) and os.path.exists(self.coverage_history_dir)

    def ensure_output_dirs(self) -> None:
        """Create the output directory tree if it does not exist yet."""
        for directory in (
            self.output_dir,
            self.metadata_output_dir,
            self.test_failure_output_dir,
            self.plot_output_dir,
        ):
            if not os.path.exists(directory):
                logger.debug(f"Directory '{directory}' does not exist, creating...")
                os.makedirs(directory, exist_ok=True)
