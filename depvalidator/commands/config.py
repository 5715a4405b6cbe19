import click
from depvalidator.config import load_config, get_config_path, get_default_config, mask_token
from depvalidator.exit_codes import ConfigError
import json
import sys


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    The GitHub token is masked.
    """
    if path:
        click.echo(json.dumps({"config_path": str(get_config_path())}))
        return

    config = mask_token(load_config())

    if pretty:
        click.echo(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        click.echo(json.dumps(config, ensure_ascii=False))


@config_cmd.command("path")
def config_path():
    """Print the configuration file path (it may not exist yet)."""
    click.echo(str(get_config_path()))


@config_cmd.command("generate")
def generate_config():
    """Write a default configuration file if none exists."""
    config_path = get_config_path()
    if config_path.exists():
        click.echo(f"Configuration already exists at {config_path}")
        return
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(get_default_config(), f, indent=2)
    except OSError as e:
        error = ConfigError(f"Cannot write configuration to {config_path}: {e}")
        click.echo(json.dumps({"error": str(error), "type": type(error).__name__}), err=True)
        sys.exit(error.exit_code)
    click.echo(f"Default configuration written to {config_path}")
