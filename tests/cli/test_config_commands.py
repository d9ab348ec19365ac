# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Tests for `gh-checkproxy config` and `gh-checkproxy status`.

Covers:
    - Setting and showing config values
    - Validation of config values
    - Owner-only permissions on the config file
    - Token masking in status output
"""

import json
import stat

TOKEN = 'github_pat_1234567890'
PROXY = 'https://checks.example.com'


class TestConfigSet:
    def test_writes_values(self, runner, cli_root, config_file):
        result = runner.invoke(
            cli_root,
            ['config', 'set', '--proxy-url', f'{PROXY}/', '--repo', 'octo/hello', '--interval', '30s'],
        )

        assert result.exit_code == 0
        assert json.loads(config_file.read_text()) == {
            'proxy_url': PROXY,
            'repo': 'octo/hello',
            'interval': '30s',
        }

    def test_merges_with_existing(self, runner, cli_root, config_file):
        runner.invoke(cli_root, ['config', 'set', '--repo', 'octo/hello'])
        runner.invoke(cli_root, ['config', 'set', '--interval', '1m'])

        assert json.loads(config_file.read_text()) == {'repo': 'octo/hello', 'interval': '1m'}

    def test_file_is_owner_only(self, runner, cli_root, config_file):
        runner.invoke(cli_root, ['config', 'set', '--repo', 'octo/hello'])

        assert stat.S_IMODE(config_file.stat().st_mode) == 0o600

    def test_rejects_bad_repo(self, runner, cli_root, config_file):
        result = runner.invoke(cli_root, ['config', 'set', '--repo', 'octo'])

        assert result.exit_code == 2
        assert not config_file.exists()

    def test_rejects_bad_interval(self, runner, cli_root, config_file):
        result = runner.invoke(cli_root, ['config', 'set', '--interval', 'often'])

        assert result.exit_code == 2
        assert not config_file.exists()

    def test_rejects_zero_interval(self, runner, cli_root, config_file):
        result = runner.invoke(cli_root, ['config', 'set', '--interval', '0s'])

        assert result.exit_code == 2

    def test_nothing_to_set(self, runner, cli_root, config_file):
        result = runner.invoke(cli_root, ['config', 'set'])

        assert result.exit_code == 0
        assert 'No values given' in result.output
        assert not config_file.exists()


class TestConfigShow:
    def test_empty(self, runner, cli_root):
        result = runner.invoke(cli_root, ['config'])

        assert result.exit_code == 0
        assert 'No configuration set' in result.output

    def test_shows_values(self, runner, cli_root):
        runner.invoke(cli_root, ['config', 'set', '--repo', 'octo/hello'])

        result = runner.invoke(cli_root, ['config'])

        assert 'repo' in result.output
        assert 'octo/hello' in result.output

    def test_alias(self, runner, cli_root):
        result = runner.invoke(cli_root, ['cfg'])

        assert result.exit_code == 0
        assert 'No configuration set' in result.output

    def test_invalid_json_warns(self, runner, cli_root, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text('[1, 2')

        result = runner.invoke(cli_root, ['config'])

        assert result.exit_code == 0
        assert 'Warning' in result.output


class TestStatus:
    def test_masks_token(self, runner, cli_root, monkeypatch):
        monkeypatch.setenv('GH_TOKEN', TOKEN)

        result = runner.invoke(cli_root, ['status'])

        assert result.exit_code == 0
        assert 'from GH_TOKEN' in result.output
        assert 'gith***...7890' in result.output
        assert TOKEN not in result.output

    def test_github_token_fallback(self, runner, cli_root, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', TOKEN)

        result = runner.invoke(cli_root, ['status'])

        assert 'from GITHUB_TOKEN' in result.output

    def test_unset_values(self, runner, cli_root):
        result = runner.invoke(cli_root, ['status'])

        assert 'Token:      not set' in result.output
        assert 'auto-detect' in result.output
        assert '10s' in result.output

    def test_proxy_from_environment(self, runner, cli_root, monkeypatch):
        monkeypatch.setenv('GH_CHECKPROXY_URL', PROXY)

        result = runner.invoke(cli_root, ['status'])

        assert f'from GH_CHECKPROXY_URL) {PROXY}' in result.output


class TestRootCommand:
    def test_version(self, runner, cli_root):
        result = runner.invoke(cli_root, ['--version'])

        assert result.exit_code == 0
        assert '0.3.0' in result.output

    def test_help_lists_alias(self, runner, cli_root):
        result = runner.invoke(cli_root, ['--help'])

        assert 'config, cfg' in result.output
