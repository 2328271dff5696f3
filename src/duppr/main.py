"""Entry point: duplicate a pull request onto another target branch."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from .cli import parse_args
from .composer import compose_duplicate_pull_request
from .config import load_config
from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    InvalidIdentifierError,
    RepositoryError,
)
from .github_client import GitHubClient
from .identifier import parse_pull_request_ref
from .worktree import build_duplicate_branch

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4
EXIT_REPOSITORY = 5


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def orchestrate_duplication(argv: Optional[Sequence[str]] = None) -> int:
    """Run the duplication pipeline and map failures to exit codes.

    parse → fetch pull request → fetch commits → build branch → compose → submit.
    Every failure is terminal and reported as a single ``ERROR:`` line.
    """
    try:
        args = parse_args(argv)
        configure_logging(args.verbose)

        config = load_config(from_pr=args.from_pr, target_branch=args.target_branch)
        ref = parse_pull_request_ref(config.from_pr)
        logger.info("start duplication, %s to %s", ref, config.target_branch)

        client = GitHubClient(config=config)

        logger.info("fetch pull request, %s", ref)
        snapshot = client.get_pull_request(ref)

        logger.info("fetch pull request commits, %s", ref)
        commits = client.list_pull_request_commits(ref)

        logger.info("prepare repository to create PR")
        new_branch = build_duplicate_branch(
            snapshot=snapshot,
            target_base_branch=config.target_branch,
            commits=commits,
            config=config,
        )

        logger.info("create new PR")
        new_pr = compose_duplicate_pull_request(snapshot, config.target_branch, new_branch)
        created = client.create_pull_request(ref, new_pr)
    except (InvalidIdentifierError, ConfigurationError) as exc:
        print(f"ERROR: invalid input: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION
    except AuthenticationError as exc:
        print(f"ERROR: authentication failed: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION
    except ApiError as exc:
        print(f"ERROR: GitHub API: {exc}", file=sys.stderr)
        return EXIT_API
    except RepositoryError as exc:
        print(f"ERROR: prepare repository: {exc}", file=sys.stderr)
        return EXIT_REPOSITORY
    except Exception as exc:
        logger.exception("Unexpected failure")
        print(f"ERROR: unexpected failure: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED

    print(f"pull request duplication success, {created.html_url}")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    return orchestrate_duplication(argv)


if __name__ == "__main__":
    raise SystemExit(main())
