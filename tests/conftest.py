# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Shared fixtures for the test suite."""

import logging

import pytest

from payloads import make_pr_payload


@pytest.fixture
def pr_payload():
    return make_pr_payload()


@pytest.fixture(autouse=True)
def reset_checkproxy_logger():
    """Drop handlers installed by CLI invocations so tests stay independent."""
    yield
    logger = logging.getLogger('checkproxy')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
