"""
Shared pytest fixtures for hookrelay tests.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import tempfile

import pytest

from preoccupied.hookrelay.config import RelayConfig


@pytest.fixture
def temp_dir():
    """
    Create a temporary directory for tests.
    """

    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def relay_config():
    """
    Create a RelayConfig with a dispatch token for testing.
    """

    return RelayConfig(
        webhook_secret='secret123',
        upstream_repo='Wei-Shaw/claude-relay-service',
        target_repo='DuanNaiSheQu/claude-duannai',
        github_token='ghp_test_token',
    )


@pytest.fixture
def push_data():
    """
    A push event payload for the configured upstream repository's
    main branch.
    """

    return {
        'repository': {'full_name': 'Wei-Shaw/claude-relay-service'},
        'ref': 'refs/heads/main',
        'commits': [
            {
                'id': 'abc123',
                'message': 'fix: bug',
                'added': [],
                'modified': ['x.js'],
                'removed': [],
            },
        ],
    }


@pytest.fixture
def mock_env_vars(monkeypatch):
    """
    Clear and optionally set environment variables for testing.
    """

    env_vars_to_clear = [
        'CONFIG_PATH',
        'HOOKRELAY_HOST',
        'HOOKRELAY_PORT',
        'HOOKRELAY_WEBHOOK_SECRET',
        'HOOKRELAY_UPSTREAM_REPO',
        'HOOKRELAY_TARGET_REPO',
        'HOOKRELAY_GITHUB_TOKEN',
        'HOOKRELAY_GITHUB_API_URL',
        'HOOKRELAY_DISPATCH_TIMEOUT',
    ]

    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)

    return monkeypatch


# The end.
