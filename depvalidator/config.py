#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

logger = logging.getLogger("depvalidator")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def setup_logging(config=None, verbose=False):
    """Configure logging to stderr from the "logging" config section."""
    logging_config = (config or get_default_config()).get("logging", {})
    level_name = "DEBUG" if verbose else str(logging_config.get("level", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=logging_config.get("format", "%(levelname)s: %(message)s"),
        handlers=[
            logging.StreamHandler(sys.stderr)  # Keep stdout clean for data
        ],
        force=True
    )


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. DEPVALIDATOR_CONFIG environment variable
    2. ~/.depvalidator/ directory
    """
    if 'DEPVALIDATOR_CONFIG' in os.environ:
        path = Path(os.environ['DEPVALIDATOR_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.depvalidator'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path
    return config_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            if isinstance(file_config, dict):
                # Merge file config with defaults
                config = merge_configs(config, file_config)
            else:
                logger.error(f"Error loading config from {config_path}: top level is not a mapping")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "github": {
            "token": "",
            "api_url": "https://api.github.com",
            "timeout_seconds": 30,
            "per_page": 100,
            "max_pages": 10
        },
        "archive": {
            "temp_dir": "",
            "unzip_command": "unzip",
            "extract_timeout_seconds": 120
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


def get_github_token(config=None):
    """
    Resolve the GitHub token.

    Precedence: config "github.token", then DEPVALIDATOR_GITHUB_TOKEN
    (already folded into config by apply_env_overrides), then GITHUB_TOKEN.
    Returns None when no token is available.
    """
    token = (config or {}).get("github", {}).get("token")
    if token:
        return str(token)
    return os.environ.get('GITHUB_TOKEN') or None


def mask_token(config):
    """Return a copy of config safe for display."""
    masked = merge_configs(config, {})
    github = dict(masked.get("github", {}))
    if github.get("token"):
        github["token"] = "***"
    masked["github"] = github
    return masked


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
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: DEPVALIDATOR_SECTION_KEY
    For example: DEPVALIDATOR_GITHUB_TIMEOUT_SECONDS=60
    """
    env_prefix = "DEPVALIDATOR_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
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
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                # If we are at the end of the env var, we have found the key to set
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                # Otherwise, we descend into the dictionary
                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                # No match found
                break

    return config
