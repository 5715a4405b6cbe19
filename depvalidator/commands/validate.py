"""
Handles the 'validate' command for checking repositories against the
4D Project Dependencies Manager requirements.

This command follows our design principles:
- Default output is JSONL streaming, one record per repository
- --table for a human-readable report with a summary
- --verbose/-v for progress output
- Exit code 0 only if every repository is valid
"""

import sys
import click

from ..config import load_config, setup_logging, get_github_token
from ..cli_utils import standard_command, add_common_options
from ..domain import ReleaseSelection
from ..exit_codes import SUCCESS, VALIDATION_FAILED, CommandError, NoReposFoundError, UsageError
from ..format_utils import format_output
from ..infra import ArchiveWorkspace, GitHubClient
from ..render import render_validation_table, render_summary
from ..services import ValidationService
from ..utils import load_repository_list


def build_service(config, token=None, temp_dir=None):
    """Create a ValidationService from configuration and CLI overrides."""
    github_config = config.get('github', {})
    archive_config = config.get('archive', {})

    github = GitHubClient(
        token=token or get_github_token(config),
        api_url=github_config.get('api_url', 'https://api.github.com'),
        timeout=github_config.get('timeout_seconds', 30),
        per_page=github_config.get('per_page', 100),
        max_pages=github_config.get('max_pages', 10),
    )
    workspace = ArchiveWorkspace(
        root=temp_dir or archive_config.get('temp_dir') or None,
        unzip_command=archive_config.get('unzip_command', 'unzip'),
        timeout=archive_config.get('extract_timeout_seconds', 120),
    )
    return ValidationService(github_client=github, workspace=workspace)


def collect_repositories(repos, repo_file):
    """Combine repositories given as arguments with those listed in a file."""
    repositories = list(repos)
    if repo_file:
        try:
            repositories.extend(load_repository_list(repo_file))
        except (OSError, UnicodeDecodeError) as e:
            raise CommandError(f"Error reading file: {e}")
    return repositories


@click.command(name='validate')
@click.argument('repos', nargs=-1)
@click.option('-f', '--file', 'repo_file', type=click.Path(dir_okay=False),
              help='File with repository paths, one owner/repo per line')
@click.option('--release', default=None, metavar='TAG|*',
              help="Release to validate: a tag, '*' for all releases "
                   "(default: stop at first release with matching ZIP)")
@click.option('--full', is_flag=True, help='Include GitHub repository and release info')
@click.option('-t', '--token', default=None, help='GitHub API token (or set GITHUB_TOKEN)')
@click.option('--temp-dir', type=click.Path(file_okay=False), default=None,
              help='Directory for downloads and extraction')
@click.option('--table/--no-table', default=None,
              help='Display as formatted table (auto-detected by default)')
@add_common_options('format', 'verbose', 'quiet')
@standard_command
def validate_handler(repos, repo_file, release, full, token, temp_dir, table,
                     format, verbose, quiet, progress, **kwargs):
    """Validate that repositories publish an installable 4D component.

    REPOS: Repository paths like 4d/4D-ViewPro

    \b
    A repository is valid if a release carries a ZIP named after the
    repository (e.g. 4D-ViewPro.zip or 4D-ViewPro-v1.0.zip) that contains:
      - a .4Dbase folder, OR
      - a .4DZ file, OR
      - a Project/ folder with a .4DProject file

    \b
    By default only releases up to the first one with a matching ZIP are
    checked, even if that ZIP holds no valid component. Use --release '*'
    to check every release.

    Examples:

    \b
        depvalidator validate 4d/4D-ViewPro
        depvalidator validate 4d/4D-ViewPro --release 21.4
        depvalidator validate 4d/4D-ViewPro --release '*'
        depvalidator validate --file github.txt --table
        depvalidator validate --file github.txt --format json --full
    """
    config = load_config()
    setup_logging(config, verbose=verbose)

    repositories = collect_repositories(repos, repo_file)
    if not repositories:
        if repo_file:
            raise NoReposFoundError(f"No repositories listed in {repo_file}")
        raise UsageError("Please specify repositories or --file")

    if table is None:
        table = sys.stdout.isatty()

    selection = ReleaseSelection.from_option(release)
    service = build_service(config, token=token, temp_dir=temp_dir)

    progress(f"Validating {len(repositories)} repositories ({selection.describe()})...")

    results = []
    stream = not table and not quiet and format == 'jsonl'
    with progress.task("Validating repositories", total=len(repositories)) as update:
        for i, result in enumerate(service.validate_many(repositories, selection, full=full), 1):
            update(i, result.repository)
            results.append(result)
            if stream:
                for line in format_output(iter([result.to_dict()]), format):
                    click.echo(line)

    if not quiet:
        if table:
            render_validation_table(results)
            render_summary(results)
        elif not stream:
            for line in format_output(iter(r.to_dict() for r in results), format):
                click.echo(line)

    invalid = sum(1 for r in results if not r.is_valid)
    if invalid:
        progress.warning(f"{invalid} of {len(results)} repositories are invalid")
        return VALIDATION_FAILED
    progress.success(f"All {len(results)} repositories are valid")
    return SUCCESS
