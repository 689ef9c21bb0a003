"""
Tests for the sourcelinks command line interface.
"""

import json
import pytest
from click.testing import CliRunner

from sourcelinks.cli import cli
from sourcelinks.exit_codes import PROJECT_ERROR, REPO_NOT_FOUND, USAGE_ERROR


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """A scan directory with one checkout, and a HOME without any config."""
    monkeypatch.setenv('HOME', str(tmp_path / 'home'))
    monkeypatch.delenv('SOURCELINKS_CONFIG', raising=False)
    monkeypatch.delenv('INPUT_SOURCE_SCAN_DIR', raising=False)

    repo = tmp_path / 'scan' / 'repoA'
    (repo / '.git').mkdir(parents=True)
    (repo / '.git' / 'FETCH_HEAD').write_text(
        "deadbeef\t\tbranch 'main' of https://github.com/org/a\n"
    )
    (repo / 'sub').mkdir()
    (repo / 'sub' / 'Foo.cs').write_text('class Foo {}\n')
    (repo / 'sub' / 'Foo.csproj').write_text('<Project />\n')
    return tmp_path


def _jsonl(output):
    return [json.loads(line) for line in output.splitlines() if line.strip()]


class TestReposCommand:
    """Tests for 'sourcelinks repos'."""

    def test_lists_repositories(self, workspace):
        """Test JSONL output of discovered repositories."""
        runner = CliRunner()
        result = runner.invoke(cli, ['repos', str(workspace / 'scan')])

        assert result.exit_code == 0
        records = _jsonl(result.stdout)
        assert len(records) == 1
        assert records[0]['name'] == 'org/a'
        assert records[0]['commit_sha'] == 'deadbeef'

    def test_pretty_output(self, workspace):
        """Test that --pretty renders without error."""
        runner = CliRunner()
        result = runner.invoke(cli, ['repos', str(workspace / 'scan'), '--pretty'])
        assert result.exit_code == 0


class TestLinkCommand:
    """Tests for 'sourcelinks link'."""

    def test_permalink(self, workspace):
        """Test the bare permalink for a line range."""
        file_path = workspace / 'scan' / 'repoA' / 'sub' / 'Foo.cs'
        runner = CliRunner()
        result = runner.invoke(cli, [
            'link', str(file_path),
            '--start', '1', '--end', '4',
            '--scan-dir', str(workspace / 'scan'),
        ])

        assert result.exit_code == 0
        assert result.stdout.strip() == (
            'https://github.com/org/a/blob/deadbeef/sub/Foo.cs#L1-#L4'
        )

    def test_markdown(self, workspace):
        """Test the markdown form of a link."""
        file_path = workspace / 'scan' / 'repoA' / 'sub' / 'Foo.cs'
        runner = CliRunner()
        result = runner.invoke(cli, [
            'link', str(file_path), '--start', '3:1', '--markdown',
            '--scan-dir', str(workspace / 'scan'),
        ])

        assert result.exit_code == 0
        assert result.stdout.strip() == (
            '[Foo.cs 3:1](https://github.com/org/a/blob/deadbeef/sub/Foo.cs#L3)'
        )

    def test_unresolved_file(self, workspace):
        """Test that a file outside every checkout is an error."""
        stray = workspace / 'elsewhere' / 'Bar.cs'
        stray.parent.mkdir()
        stray.write_text('')
        runner = CliRunner()
        result = runner.invoke(cli, [
            'link', str(stray), '--scan-dir', str(workspace / 'scan'),
        ])

        assert result.exit_code == REPO_NOT_FOUND
        error = json.loads(result.stdout.strip().splitlines()[-1])
        assert error['type'] == 'RepoNotFoundError'

    def test_bad_position(self, workspace):
        """Test that a malformed position is a usage error."""
        runner = CliRunner()
        result = runner.invoke(cli, ['link', 'Foo.cs', '--start', 'abc'])
        assert result.exit_code == USAGE_ERROR


class TestCiteCommand:
    """Tests for 'sourcelinks cite'."""

    def test_reference_block(self, workspace):
        """Test that repeated citations share one definition."""
        file_path = workspace / 'scan' / 'repoA' / 'sub' / 'Foo.cs'
        runner = CliRunner()
        result = runner.invoke(cli, [
            'cite', f'{file_path}:3:1', f'{file_path}:3:1',
            '--scan-dir', str(workspace / 'scan'),
        ])

        assert result.exit_code == 0
        assert result.stdout == (
            '[Foo.cs 3:1]\n'
            '[Foo.cs 3:1]\n'
            '\n'
            '[Foo.cs 3:1]: https://github.com/org/a/blob/deadbeef/sub/Foo.cs#L3\n'
        )

    def test_short_ids_from_stdin(self, workspace):
        """Test generated ids for citations read from stdin."""
        file_path = workspace / 'scan' / 'repoA' / 'sub' / 'Foo.cs'
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ['cite', '--short-ids', '--prefix', 't', '--scan-dir', str(workspace / 'scan')],
            input=f'{file_path}:1-2\n\n{file_path}:5\n',
        )

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            '[Foo.cs 1:1-2:1][t0]',
            '[Foo.cs 5:1][t1]',
            '',
            '[t0]: https://github.com/org/a/blob/deadbeef/sub/Foo.cs#L1-#L2',
            '[t1]: https://github.com/org/a/blob/deadbeef/sub/Foo.cs#L5',
        ]


class TestProjectsCommand:
    """Tests for 'sourcelinks projects'."""

    def test_list(self, workspace):
        """Test listing project files with their repository."""
        runner = CliRunner()
        result = runner.invoke(cli, ['projects', 'list', str(workspace / 'scan')])

        assert result.exit_code == 0
        records = _jsonl(result.stdout)
        assert [r['project_name'] for r in records] == ['Foo']
        assert records[0]['repository'] == 'org/a'

    def test_show_unknown(self, workspace):
        """Test that an unknown project name is a project error."""
        runner = CliRunner()
        result = runner.invoke(cli, [
            'projects', 'show', 'Missing', '--scan-dir', str(workspace / 'scan'),
        ])
        assert result.exit_code == PROJECT_ERROR


class TestConfigCommand:
    """Tests for 'sourcelinks config'."""

    def test_generate_and_show(self, workspace):
        """Test writing the default config and reading it back."""
        config_file = workspace / 'custom.yaml'
        runner = CliRunner()

        result = runner.invoke(cli, ['config', 'generate', str(config_file)])
        assert result.exit_code == 0
        assert config_file.exists()

        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'show'])
        assert result.exit_code == 0
        config = json.loads(result.stdout)
        assert config['projects']['file_pattern'] == '*.csproj'

    def test_generate_refuses_overwrite(self, workspace):
        """Test that an existing file is kept without --force."""
        config_file = workspace / 'custom.json'
        config_file.write_text('{}')
        runner = CliRunner()

        result = runner.invoke(cli, ['config', 'generate', str(config_file)])
        assert result.exit_code == 0
        assert config_file.read_text() == '{}'
