"""Custom exception types for duppr."""

from __future__ import annotations


class DupprError(Exception):
    """Base exception for all terminal duplication errors."""


class InvalidIdentifierError(DupprError):
    """Raised when a pull request identifier is not ``owner/repository/pull/number``."""


class ConfigurationError(DupprError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(DupprError):
    """Raised when the GitHub access token is unavailable or rejected."""


class ApiError(DupprError):
    """Raised when a GitHub API request fails or returns an unexpected response."""


class NotFoundError(ApiError):
    """Raised when the requested pull request or repository does not exist."""


class ValidationError(ApiError):
    """Raised when GitHub rejects a new pull request (for example a duplicate)."""


class RepositoryError(DupprError):
    """Base exception for failures while preparing the duplicate branch.

    ``stage`` names the git step that failed and is used for the diagnostic
    line printed by the entry point.
    """

    stage = "repository"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.stage} failed: {self.message}"


class CloneFailedError(RepositoryError):
    """Raised when the base repository cannot be cloned."""

    stage = "clone"


class TargetBranchNotFoundError(RepositoryError):
    """Raised when the target branch has no remote-tracking reference in the clone."""

    stage = "checkout target branch"


class BranchCreateFailedError(RepositoryError):
    """Raised when the duplicate branch cannot be created."""

    stage = "create branch"


class RemoteFetchFailedError(RepositoryError):
    """Raised when the pull request head repository cannot be added or fetched."""

    stage = "fetch head repository"


class ReplayConflictError(RepositoryError):
    """Raised at the first commit that cannot be cherry-picked cleanly."""

    stage = "cherry-pick"

    def __init__(self, sha: str, message: str) -> None:
        super().__init__(message)
        self.sha = sha

    def __str__(self) -> str:
        return f"{self.stage} {self.sha} failed: {self.message}"


class PushFailedError(RepositoryError):
    """Raised when the duplicate branch cannot be pushed."""

    stage = "push"
