# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Shared fixtures for CLI tests."""

import pytest
from click.testing import CliRunner

from checkproxy.cli.main import cli
from checkproxy.constants import PROXY_URL_ENV_VAR, TOKEN_ENV_VARS


@pytest.fixture
def cli_root():
    return cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every CLI test without credentials or proxy settings."""
    for name in (*TOKEN_ENV_VARS, PROXY_URL_ENV_VAR):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def config_file(tmp_path, monkeypatch):
    """Point the client config at a temporary directory."""
    config_dir = tmp_path / 'gh-checkproxy'
    path = config_dir / 'config.json'
    monkeypatch.setattr('checkproxy.cli.config_commands.CHECKPROXY_DIR', config_dir)
    monkeypatch.setattr('checkproxy.cli.config_commands.CONFIG_FILE', path)
    return path


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv('GH_TOKEN', 'github_pat_1234567890')
    monkeypatch.setenv(PROXY_URL_ENV_VAR, 'https://checks.example.com')
