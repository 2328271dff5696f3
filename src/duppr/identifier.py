"""Parsing of compact pull request identifiers (``owner/repository/pull/number``)."""

from __future__ import annotations

import re

from .errors import InvalidIdentifierError
from .models import PullRequestRef

_NUMBER_PATTERN = re.compile(r"[0-9]+")


def parse_pull_request_ref(value: str) -> PullRequestRef:
    """Parse ``owner/repository/pull/number`` into a ``PullRequestRef``.

    The third segment is not checked; only the four-segment shape, non-empty
    owner and repository, and a non-negative integer number are required.

    Raises:
        InvalidIdentifierError: If any of those constraints is violated.
    """
    parts = value.split("/", 3)
    if len(parts) < 4:
        raise InvalidIdentifierError(f"pull request id ({value}) is invalid")

    owner, repository, _, number = parts
    if not owner or not repository or not _NUMBER_PATTERN.fullmatch(number):
        raise InvalidIdentifierError(f"pull request id ({value}) is invalid")

    return PullRequestRef(owner=owner, repository=repository, number=int(number))
