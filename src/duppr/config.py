"""Configuration parsing and validation for duppr."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .errors import AuthenticationError, ConfigurationError

ACCESS_TOKEN_ENV = "GITHUB_ACCESS_TOKEN"
API_END_POINT_ENV = "GITHUB_API_END_POINT"
COMMITTER_NAME_ENV = "DUPPR_COMMITTER_NAME"
COMMITTER_EMAIL_ENV = "DUPPR_COMMITTER_EMAIL"

DEFAULT_API_BASE_URL = "https://api.github.com/"


@dataclass(frozen=True)
class Config:
    """Validated runtime settings threaded through the duplication pipeline."""

    from_pr: str
    target_branch: str
    token: str
    api_base_url: str = DEFAULT_API_BASE_URL
    committer_name: Optional[str] = None
    committer_email: Optional[str] = None


def _normalize_api_base_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            f"Invalid value for '{API_END_POINT_ENV}': expected an http(s) URL, got '{value}'."
        )
    return value if value.endswith("/") else f"{value}/"


def load_config(from_pr: str, target_branch: str) -> Config:
    """Build and validate application configuration.

    Args:
        from_pr: Source pull request identifier (``owner/repo/pull/number``).
        target_branch: Branch the duplicated pull request should target.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If the target branch is blank or the API end point
            override is not an http(s) URL.
        AuthenticationError: If ``GITHUB_ACCESS_TOKEN`` is not configured.
    """
    target_branch = target_branch.strip()
    if not target_branch:
        raise ConfigurationError("Invalid value for 'target-branch': expected a non-empty branch name.")

    token: str = os.getenv(ACCESS_TOKEN_ENV, "").strip()
    if not token:
        raise AuthenticationError(
            "Missing required GitHub access token. "
            f"Set the '{ACCESS_TOKEN_ENV}' environment variable before running duppr."
        )

    api_base_url = DEFAULT_API_BASE_URL
    end_point = os.getenv(API_END_POINT_ENV, "").strip()
    if end_point:
        api_base_url = _normalize_api_base_url(end_point)

    return Config(
        from_pr=from_pr,
        target_branch=target_branch,
        token=token,
        api_base_url=api_base_url,
        committer_name=os.getenv(COMMITTER_NAME_ENV, "").strip() or None,
        committer_email=os.getenv(COMMITTER_EMAIL_ENV, "").strip() or None,
    )
