# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Tests for resolving PR selectors to pull requests."""

from unittest.mock import patch

import pytest

from checkproxy.checks.selector import parse_pr_number, resolve_pull_request
from checkproxy.classes import PullRequestRef
from checkproxy.errors import MalformedSelector, NoBranchDetected, NoOpenPullRequest, ResolutionError

PR = PullRequestRef(number=42, head_sha='abc123def456', head_ref='feature/login')


def no_branch():
    return None


class TestParsePrNumber:
    @pytest.mark.parametrize(
        'selector, expected',
        [
            ('42', 42),
            ('#42', 42),
            ('https://github.com/octo/hello/pull/42', 42),
            ('https://github.com/octo/hello/pull/42/files', 42),
            ('HTTP://github.com/octo/hello/pull/7', 7),
            ('feature/login', None),
            ('#feature', None),
        ],
    )
    def test_forms(self, selector, expected):
        assert parse_pr_number(selector) == expected

    def test_url_without_pull_segment(self):
        with pytest.raises(MalformedSelector):
            parse_pr_number('https://github.com/octo/hello/issues/42')


class TestResolvePullRequest:
    @patch('checkproxy.checks.selector.fetch_pull_request')
    def test_number_and_hash_number_resolve_alike(self, mock_fetch):
        mock_fetch.return_value = PR

        first = resolve_pull_request('42', 'octo', 'hello', 'tok', branch_detector=no_branch)
        second = resolve_pull_request('#42', 'octo', 'hello', 'tok', branch_detector=no_branch)

        assert first == second == PR
        assert mock_fetch.call_args_list[0].args == mock_fetch.call_args_list[1].args == ('octo', 'hello', 42, 'tok')

    @patch('checkproxy.checks.selector.fetch_pull_request')
    def test_url_selector(self, mock_fetch):
        mock_fetch.return_value = PR

        resolve_pull_request('https://github.com/octo/hello/pull/42/checks', 'octo', 'hello', 'tok')

        assert mock_fetch.call_args.args[2] == 42

    @patch('checkproxy.checks.selector.find_open_pull_requests')
    @patch('checkproxy.checks.selector.fetch_pull_request')
    def test_malformed_url_makes_no_request(self, mock_fetch, mock_find):
        with pytest.raises(MalformedSelector):
            resolve_pull_request('https://github.com/octo/hello', 'octo', 'hello', 'tok')

        mock_fetch.assert_not_called()
        mock_find.assert_not_called()

    @patch('checkproxy.checks.selector.find_open_pull_requests')
    def test_whitespace_is_malformed(self, mock_find):
        with pytest.raises(MalformedSelector):
            resolve_pull_request('two words', 'octo', 'hello', 'tok')

        mock_find.assert_not_called()

    @patch('checkproxy.checks.selector.find_open_pull_requests')
    def test_branch_selector(self, mock_find):
        mock_find.return_value = [PR]

        assert resolve_pull_request('feature/login', 'octo', 'hello', 'tok') == PR
        assert mock_find.call_args.args == ('octo', 'hello', 'feature/login', 'tok')

    @patch('checkproxy.checks.selector.find_open_pull_requests')
    def test_branch_first_result_wins(self, mock_find):
        other = PullRequestRef(number=43, head_sha='ffff', head_ref='feature/login')
        mock_find.return_value = [PR, other]

        assert resolve_pull_request('feature/login', 'octo', 'hello', 'tok').number == 42

    @patch('checkproxy.checks.selector.find_open_pull_requests')
    def test_branch_without_open_pr(self, mock_find):
        mock_find.return_value = []

        with pytest.raises(NoOpenPullRequest, match='stale-branch'):
            resolve_pull_request('stale-branch', 'octo', 'hello', 'tok')

    @patch('checkproxy.checks.selector.find_open_pull_requests')
    def test_empty_selector_uses_current_branch(self, mock_find):
        mock_find.return_value = [PR]

        resolve_pull_request('', 'octo', 'hello', 'tok', branch_detector=lambda: 'feature/login')

        assert mock_find.call_args.args[2] == 'feature/login'

    @patch('checkproxy.checks.selector.find_open_pull_requests')
    def test_empty_selector_without_branch(self, mock_find):
        with pytest.raises(NoBranchDetected):
            resolve_pull_request('', 'octo', 'hello', 'tok', branch_detector=no_branch)

        mock_find.assert_not_called()

    def test_resolution_errors_share_a_base(self):
        assert issubclass(NoBranchDetected, ResolutionError)
        assert issubclass(NoOpenPullRequest, ResolutionError)
        assert issubclass(MalformedSelector, ResolutionError)
