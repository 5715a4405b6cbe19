#!/usr/bin/env python3

import click

from depvalidator.commands.validate import validate_handler
from depvalidator.commands.config import config_cmd


@click.group()
@click.version_option(package_name='depvalidator')
def cli():
    """depvalidator - Validate GitHub repositories as 4D components.

    Checks that a repository publishes a release ZIP that 4D's Project
    Dependencies Manager can install, and reports the declared dependencies.
    """
    pass


cli.add_command(validate_handler, name='validate')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
