"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from typing import Generator
from .progress import get_progress
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .format_utils import format_output, get_format_from_env


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Progress reporting on stderr
    - Clean data output on stdout
    - --quiet/-q suppresses data output
    - Consistent error handling and exit codes

    The command may return:
    - an int: it handled its own output, exit with that code
    - a generator, list or dict: formatted with --format, exit 0
    - None: it handled its own output, exit 0
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        quiet = kwargs.get('quiet', False)
        output_format = kwargs.get('format', None)

        # Get format from env if not specified
        if output_format is None:
            output_format = get_format_from_env('jsonl')
            if 'format' in kwargs:
                kwargs['format'] = output_format

        # Initialize progress reporter
        progress = get_progress(enabled=verbose or None)
        kwargs['progress'] = progress

        try:
            result = func(*args, **kwargs)

            if isinstance(result, bool):
                result = int(result)
            if isinstance(result, int):
                sys.exit(result)

            if quiet:
                # In quiet mode, consume the generator but don't output
                if isinstance(result, Generator):
                    for _ in result:
                        pass
            elif result is None:
                pass
            elif isinstance(result, (Generator, list, tuple)):
                for line in format_output(iter(result), output_format):
                    click.echo(line)
            elif isinstance(result, dict):
                for line in format_output(iter([result]), output_format):
                    click.echo(line)
            else:
                click.echo(result)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            progress.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            progress.error(str(e))
            if not quiet:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": e.exit_code
                }
                click.echo(json.dumps(error_obj, ensure_ascii=False))
            sys.exit(e.exit_code)
        except Exception as e:
            progress.error(f"Command failed: {e}")
            if not quiet:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__
                }
                click.echo(json.dumps(error_obj, ensure_ascii=False))
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Show progress and debug logging'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                          help='Suppress data output, only set the exit code'),
    'format': click.option('--format', 'format',
                           type=click.Choice(['json', 'jsonl', 'yaml']),
                           help='Output format (default: jsonl, or from DEPVALIDATOR_FORMAT env)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'quiet')
        def my_command(verbose, quiet):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
