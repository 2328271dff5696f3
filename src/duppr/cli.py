"""Command-line argument parsing for duppr."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .errors import InvalidIdentifierError
from .identifier import parse_pull_request_ref


def _pull_request_id(value: str) -> str:
    """Validate a pull request identifier CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The identifier unchanged, once it is known to parse.

    Raises:
        argparse.ArgumentTypeError: If value is not ``owner/repository/pull/number``.
    """
    try:
        parse_pull_request_ref(value)
    except InvalidIdentifierError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc

    return value


def _branch_name(value: str) -> str:
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value.strip()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for pull request duplication.

    Returns:
        Parsed CLI arguments containing the source pull request identifier,
        the target branch and the verbosity flag.
    """
    parser = argparse.ArgumentParser(
        prog="duppr",
        description=(
            "Duplicate a GitHub pull request onto another target branch by "
            "cherry-picking its commits into a new branch and opening a new "
            "pull request. Requires the GITHUB_ACCESS_TOKEN environment variable."
        ),
    )

    parser.add_argument(
        "--from-pr",
        required=True,
        type=_pull_request_id,
        help="Pull request to duplicate from, like t-ashula/duppr/pull/123.",
    )
    parser.add_argument(
        "--target-branch",
        required=True,
        type=_branch_name,
        help="Branch the duplicated pull request should target.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)
