"""Tests for configuration loading from the environment."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from duppr.config import DEFAULT_API_BASE_URL, load_config
from duppr.errors import AuthenticationError, ConfigurationError


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    for name in (
        "GITHUB_ACCESS_TOKEN",
        "GITHUB_API_END_POINT",
        "DUPPR_COMMITTER_NAME",
        "DUPPR_COMMITTER_EMAIL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_config_reads_token_and_defaults_api_url(monkeypatch):
    """Verify the token is read from the environment and the public API is the default."""
    monkeypatch.setenv("GITHUB_ACCESS_TOKEN", "  secret  ")

    config = load_config(from_pr="acme/widgets/pull/1", target_branch="main")

    assert config.token == "secret"
    assert config.api_base_url == DEFAULT_API_BASE_URL
    assert config.target_branch == "main"
    assert config.committer_name is None
    assert config.committer_email is None


def test_load_config_missing_token_raises_authentication_error():
    """Verify a missing access token is reported before any I/O happens."""
    with pytest.raises(AuthenticationError):
        load_config(from_pr="acme/widgets/pull/1", target_branch="main")


def test_load_config_api_end_point_override_gets_trailing_slash(monkeypatch):
    """Verify an API end point override is normalized to end with a slash."""
    monkeypatch.setenv("GITHUB_ACCESS_TOKEN", "secret")
    monkeypatch.setenv("GITHUB_API_END_POINT", "https://ghe.example.com/api/v3")

    config = load_config(from_pr="acme/widgets/pull/1", target_branch="main")

    assert config.api_base_url == "https://ghe.example.com/api/v3/"


def test_load_config_invalid_api_end_point_raises_configuration_error(monkeypatch):
    """Verify a non-http API end point override is rejected."""
    monkeypatch.setenv("GITHUB_ACCESS_TOKEN", "secret")
    monkeypatch.setenv("GITHUB_API_END_POINT", "ghe.example.com")

    with pytest.raises(ConfigurationError):
        load_config(from_pr="acme/widgets/pull/1", target_branch="main")


def test_load_config_blank_target_branch_raises_configuration_error(monkeypatch):
    """Verify a blank target branch is rejected."""
    monkeypatch.setenv("GITHUB_ACCESS_TOKEN", "secret")

    with pytest.raises(ConfigurationError):
        load_config(from_pr="acme/widgets/pull/1", target_branch=" ")


def test_load_config_reads_committer_identity(monkeypatch):
    """Verify the optional committer identity is picked up from the environment."""
    monkeypatch.setenv("GITHUB_ACCESS_TOKEN", "secret")
    monkeypatch.setenv("DUPPR_COMMITTER_NAME", "Duppr Bot")
    monkeypatch.setenv("DUPPR_COMMITTER_EMAIL", "bot@example.com")

    config = load_config(from_pr="acme/widgets/pull/1", target_branch="main")

    assert config.committer_name == "Duppr Bot"
    assert config.committer_email == "bot@example.com"
