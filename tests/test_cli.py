"""
Tests for the validate and config CLI commands.

The validation service is replaced by a MagicMock; results are built
directly from domain objects.
"""

import json

import pytest
from click.testing import CliRunner
from unittest.mock import patch, MagicMock

from depvalidator.cli import cli
from depvalidator.config import get_default_config
from depvalidator.domain import (
    ComponentKind,
    ReleaseValidation,
    RepositoryValidation,
    SelectionMode,
)
from depvalidator.exit_codes import SUCCESS, VALIDATION_FAILED, USAGE_ERROR, NO_REPOS_FOUND


def valid_result(token):
    release = ReleaseValidation(
        tag="v1",
        matched_asset_name=token.split('/')[-1] + ".zip",
        has_matching_asset=True,
        component_kind=ComponentKind.COMPILED_ARCHIVE,
    )
    return RepositoryValidation(
        repository=token, is_valid=True, has_releases=True, release_validations=(release,)
    )


def invalid_result(token):
    return RepositoryValidation(repository=token, errors=("No releases found",))


def json_lines(output):
    """Records printed on stdout (progress and errors may share the stream)."""
    return [json.loads(line) for line in output.splitlines() if line.startswith('{')]


@pytest.fixture
def service():
    service = MagicMock()
    service.validate_many.side_effect = lambda tokens, selection, full=False: (
        valid_result(t) if t.startswith('good/') else invalid_result(t) for t in tokens
    )
    return service


@pytest.fixture
def runner(service, monkeypatch):
    monkeypatch.delenv('DEPVALIDATOR_FORMAT', raising=False)
    monkeypatch.setenv('DEPVALIDATOR_PROGRESS', '0')
    with patch('depvalidator.commands.validate.load_config', return_value=get_default_config()), \
         patch('depvalidator.commands.validate.build_service', return_value=service):
        yield CliRunner()


class TestValidateCommand:
    """Tests for 'depvalidator validate'."""

    def test_all_valid_exits_zero(self, runner):
        """Test exit code 0 when every repository is valid"""
        result = runner.invoke(cli, ['validate', 'good/Foo', 'good/Bar'])
        assert result.exit_code == SUCCESS
        records = json_lines(result.output)
        assert [r['repository'] for r in records] == ['good/Foo', 'good/Bar']
        assert records[0]['valid'] is True
        assert records[0]['releases'][0]['component_type'] == '4DZ'

    def test_any_invalid_exits_one(self, runner):
        """Test exit code 1 when a repository is invalid"""
        result = runner.invoke(cli, ['validate', 'good/Foo', 'bad/Bar'])
        assert result.exit_code == VALIDATION_FAILED
        records = json_lines(result.output)
        assert [r['valid'] for r in records] == [True, False]
        assert records[1]['errors'] == ["No releases found"]

    def test_no_repositories_is_usage_error(self, runner):
        """Test usage error without repositories or --file"""
        result = runner.invoke(cli, ['validate'])
        assert result.exit_code == USAGE_ERROR
        assert "Please specify repositories or --file" in result.output

    def test_empty_file(self, runner, tmp_path):
        """Test a repository file without entries"""
        repo_file = tmp_path / "github.txt"
        repo_file.write_text("# nothing yet\n\n")
        result = runner.invoke(cli, ['validate', '--file', str(repo_file)])
        assert result.exit_code == NO_REPOS_FOUND

    def test_file_and_arguments_are_combined(self, runner, service, tmp_path):
        """Test arguments come before entries read from --file"""
        repo_file = tmp_path / "github.txt"
        repo_file.write_text("good/One\n  # comment\n\n good/Two \n")
        result = runner.invoke(cli, ['validate', 'good/Zero', '-f', str(repo_file)])
        assert result.exit_code == SUCCESS
        tokens = list(service.validate_many.call_args[0][0])
        assert tokens == ['good/Zero', 'good/One', 'good/Two']

    def test_missing_file(self, runner, tmp_path):
        """Test error for an unreadable repository file"""
        result = runner.invoke(cli, ['validate', '--file', str(tmp_path / "missing.txt")])
        assert result.exit_code == 1
        assert "Error reading file" in result.output

    @pytest.mark.parametrize("option,mode,tag", [
        ([], SelectionMode.FIRST_MATCH, None),
        (['--release', '*'], SelectionMode.ALL, None),
        (['--release', '21.4'], SelectionMode.TAG, '21.4'),
    ])
    def test_release_option(self, runner, service, option, mode, tag):
        """Test --release maps to the selection mode"""
        runner.invoke(cli, ['validate', 'good/Foo'] + option)
        selection = service.validate_many.call_args[0][1]
        assert selection.mode == mode
        assert selection.tag == tag

    def test_full_flag_is_passed(self, runner, service):
        """Test --full reaches the service"""
        runner.invoke(cli, ['validate', 'good/Foo', '--full'])
        assert service.validate_many.call_args[1]['full'] is True

    def test_json_format_has_summary(self, runner):
        """Test --format json output carries a summary"""
        result = runner.invoke(cli, ['validate', 'good/Foo', 'bad/Bar', '--format', 'json'])
        assert result.exit_code == VALIDATION_FAILED
        start = result.output.index('{')
        document = json.loads(result.output[start:])
        assert document['summary'] == {'total': 2, 'valid': 1, 'invalid': 1}
        assert len(document['results']) == 2

    def test_quiet_prints_nothing(self, runner):
        """Test --quiet suppresses records"""
        result = runner.invoke(cli, ['validate', 'good/Foo', '--quiet'])
        assert result.exit_code == SUCCESS
        assert json_lines(result.output) == []

    def test_table_output(self, runner):
        """Test --table renders the table and summary panel"""
        result = runner.invoke(cli, ['validate', 'good/Foo', 'bad/Bar', '--table'])
        assert result.exit_code == VALIDATION_FAILED
        assert "good/Foo" in result.output
        assert "Summary" in result.output


class TestBuildService:
    """Tests for wiring configuration into the service."""

    def test_cli_overrides_config(self, tmp_path):
        """Test --token and --temp-dir win over configuration"""
        from depvalidator.commands.validate import build_service

        config = get_default_config()
        config['github']['token'] = 'from-config'
        config['archive']['unzip_command'] = '/usr/local/bin/unzip'
        service = build_service(config, token='from-cli', temp_dir=str(tmp_path))

        assert service.github.token == 'from-cli'
        assert service.workspace.root == tmp_path
        assert service.workspace.unzip_command == '/usr/local/bin/unzip'

    def test_config_token_used(self, monkeypatch):
        """Test the configured token is used without --token"""
        from depvalidator.commands.validate import build_service

        monkeypatch.delenv('GITHUB_TOKEN', raising=False)
        config = get_default_config()
        config['github']['token'] = 'from-config'
        assert build_service(config).github.token == 'from-config'


class TestConfigCommand:
    """Tests for 'depvalidator config'."""

    def test_show_masks_token(self, tmp_path, monkeypatch):
        """Test config show hides the GitHub token"""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"github": {"token": "ghp_secret"}}))
        monkeypatch.setenv('DEPVALIDATOR_CONFIG', str(config_file))

        result = CliRunner().invoke(cli, ['config', 'show'])

        assert result.exit_code == 0
        assert "ghp_secret" not in result.output
        config = json.loads(result.output)
        assert config['github']['token'] == '***'
        assert config['archive']['unzip_command'] == 'unzip'

    def test_show_path(self, tmp_path, monkeypatch):
        """Test config show --path"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("github:\n  timeout_seconds: 5\n")
        monkeypatch.setenv('DEPVALIDATOR_CONFIG', str(config_file))

        result = CliRunner().invoke(cli, ['config', 'show', '--path'])
        assert json.loads(result.output) == {"config_path": str(config_file)}

    def test_path_command(self, tmp_path, monkeypatch):
        """Test config path prints the default location"""
        monkeypatch.delenv('DEPVALIDATOR_CONFIG', raising=False)
        monkeypatch.setenv('HOME', str(tmp_path))
        result = CliRunner().invoke(cli, ['config', 'path'])
        assert result.output.strip() == str(tmp_path / '.depvalidator' / 'config.json')

    def test_generate_existing_file_untouched(self, tmp_path, monkeypatch):
        """Test config generate keeps an existing file"""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"github": {}}')
        monkeypatch.setenv('DEPVALIDATOR_CONFIG', str(config_file))
        result = CliRunner().invoke(cli, ['config', 'generate'])
        assert "already exists" in result.output
        assert config_file.read_text() == '{"github": {}}'

    def test_generate(self, tmp_path, monkeypatch):
        """Test config generate writes the defaults"""
        monkeypatch.delenv('DEPVALIDATOR_CONFIG', raising=False)
        monkeypatch.setenv('HOME', str(tmp_path))

        result = CliRunner().invoke(cli, ['config', 'generate'])

        assert result.exit_code == 0
        written = tmp_path / '.depvalidator' / 'config.json'
        assert json.loads(written.read_text()) == get_default_config()
