#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import toml
import yaml

logger = logging.getLogger("qtpods")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def setup_logging(level=None, fmt=None, config=None):
    """Attach a stderr handler to the qtpods logger.

    Level and format default to the config's ``logging`` section.
    Calling it again replaces the previous handler.
    """
    settings = (config or get_default_config()).get("logging", {})
    level = level or settings.get("level", "WARNING")
    fmt = fmt or settings.get("format", "%(levelname)s: %(message)s")

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. QTPODS_CONFIG environment variable
    2. ~/.qtpods/ directory
    """
    if 'QTPODS_CONFIG' in os.environ:
        path = Path(os.environ['QTPODS_CONFIG'])
        if path.exists():
            return path

    qtpods_dir = Path.home() / '.qtpods'
    for filename in CONFIG_FILENAMES:
        path = qtpods_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path for saving
    return qtpods_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    return apply_env_overrides(config)


def save_config(config):
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() == '.toml':
            with open(config_path, 'w') as f:
                toml.dump(_without_nulls(config), f)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")


def _without_nulls(config):
    """TOML has no null; drop unset keys."""
    if isinstance(config, dict):
        return {k: _without_nulls(v) for k, v in config.items() if v is not None}
    return config


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "sources": [],               # Pod catalog URLs
            "primary_branch": "master"   # Branch pods are updated to
        },
        "git": {
            "executable": "git",
            "timeout_seconds": None      # None waits for git indefinitely
        },
        "catalog": {
            "timeout_seconds": 10,
            "probe_host": "1.1.1.1",
            "probe_port": 53
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


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
    Environment variables follow the pattern: QTPODS_SECTION_KEY
    For example: QTPODS_GIT_TIMEOUT_SECONDS=60
    List settings take a comma-separated value:
    QTPODS_GENERAL_SOURCES=https://a/pods.json,https://b/pods.json
    """
    env_prefix = "QTPODS_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "QTPODS_CONFIG":
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
            # Longest config key that is a prefix of the remaining parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            if i + best_match_len == len(key_parts):
                if isinstance(current_level[matched_key], list):
                    current_level[matched_key] = [v.strip() for v in value.split(',') if v.strip()]
                else:
                    current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config
