# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Tests for small parsing helpers."""

import pytest

from checkproxy.errors import ConfigurationError
from checkproxy.utils.utils import first_non_empty, mask_token, parse_duration, parse_repo_name


class TestParseDuration:
    @pytest.mark.parametrize(
        'value, expected',
        [
            ('10s', 10.0),
            ('1m30s', 90.0),
            ('500ms', 0.5),
            ('2h', 7200.0),
            ('1.5s', 1.5),
            ('30', 30.0),
            (' 5S ', 5.0),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize('value', ['', 'soon', '10x', '1m30', 's10'])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestParseRepoName:
    def test_valid(self):
        assert parse_repo_name('octo/hello.py') == ('octo', 'hello.py')

    @pytest.mark.parametrize('value', ['hello', 'octo/', '/hello', 'a/b/c', 'octo / hello', ''])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError, match='owner/repo'):
            parse_repo_name(value)


def test_first_non_empty():
    assert first_non_empty(None, '', 'b', 'c') == 'b'
    assert first_non_empty(None, '') == ''


def test_mask_token():
    assert mask_token('github_pat_1234567890') == 'gith***...7890'
    assert mask_token('short') == '***'
