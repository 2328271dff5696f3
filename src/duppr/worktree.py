"""Working tree orchestration: build the duplicate branch in a throwaway clone.

The flow mirrors what a person would type by hand::

    git clone <base repository> <tmp>
    git checkout refs/remotes/origin/<target>
    git checkout -b <head>-for-<target>
    git remote add pr <head repository> && git fetch pr   # forks only
    git cherry-pick <sha>                                 # once per commit, in order
    git push <origin|pr> <head>-for-<target>

Each step raises its own ``RepositoryError`` subclass. The clone lives in a
temporary directory that is removed when the run ends, whatever the outcome.
"""

from __future__ import annotations

import logging
import tempfile
from typing import Iterable, Optional, Sequence
from urllib.parse import quote, urlsplit, urlunsplit

from git import Repo
from git.exc import GitCommandError

from .composer import duplicate_branch_name
from .config import Config
from .errors import (
    BranchCreateFailedError,
    CloneFailedError,
    PushFailedError,
    RemoteFetchFailedError,
    ReplayConflictError,
    TargetBranchNotFoundError,
)
from .models import DuplicationPlan, ForkRemote, PullRequestSnapshot, SameRemote

logger = logging.getLogger(__name__)

BASIC_AUTH_USERNAME = "x-oauth-basic"
FORK_REMOTE_NAME = "pr"
TEMP_DIR_PREFIX = "duppr"


def authenticated_url(url: str, token: str) -> str:
    """Return ``url`` with the token applied as basic-auth credentials.

    Only http(s) URLs carry credentials; local paths, ``file://`` and ssh
    URLs are returned unchanged.
    """
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not token:
        return url

    host = parts.netloc.rsplit("@", 1)[-1]
    netloc = f"{BASIC_AUTH_USERNAME}:{quote(token, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def redact(text: str, token: str) -> str:
    """Strip every spelling of ``token`` from ``text``."""
    if not token:
        return text
    for secret in {token, quote(token, safe="")}:
        text = text.replace(secret, "***")
    return text


def plan_duplication(snapshot: PullRequestSnapshot, target_base_branch: str) -> DuplicationPlan:
    """Resolve the branch name and remote topology for one duplication run."""
    if snapshot.same_remote:
        topology = SameRemote()
    else:
        topology = ForkRemote(url=snapshot.head_clone_url, name=FORK_REMOTE_NAME)

    return DuplicationPlan(
        target_base_branch=target_base_branch,
        new_branch_name=duplicate_branch_name(snapshot.head_ref, target_base_branch),
        topology=topology,
    )


def _error_text(exc: GitCommandError, token: str) -> str:
    stderr = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
    return redact(stderr or str(exc), token)


def _configure_committer(repo: Repo, name: Optional[str], email: Optional[str]) -> None:
    if name:
        repo.git.config("user.name", name)
    if email:
        repo.git.config("user.email", email)


def _clone(url: str, work_dir: str, config: Config) -> Repo:
    token = config.token
    logger.info("git clone %s %s", url, work_dir)
    try:
        repo = Repo.clone_from(authenticated_url(url, token), work_dir)
        _configure_committer(repo, config.committer_name, config.committer_email)
    except GitCommandError as exc:
        raise CloneFailedError(f"{url}: {_error_text(exc, token)}") from exc
    return repo


def _checkout_target(repo: Repo, target_base_branch: str, token: str) -> None:
    tracking_ref = f"refs/remotes/origin/{target_base_branch}"
    logger.info("git checkout %s", tracking_ref)
    try:
        repo.git.checkout(tracking_ref)
    except GitCommandError as exc:
        raise TargetBranchNotFoundError(
            f"branch '{target_base_branch}' not found in origin: {_error_text(exc, token)}"
        ) from exc


def _create_branch(repo: Repo, branch_name: str, token: str) -> None:
    logger.info("git checkout -b %s", branch_name)
    try:
        repo.git.checkout("-b", branch_name)
    except GitCommandError as exc:
        raise BranchCreateFailedError(f"branch '{branch_name}': {_error_text(exc, token)}") from exc


def _prepare_remote(repo: Repo, plan: DuplicationPlan, token: str) -> None:
    topology = plan.topology
    if isinstance(topology, SameRemote):
        logger.debug("Head and base share a repository; no extra remote needed")
        return

    logger.info("git remote add %s %s", topology.name, topology.url)
    try:
        repo.create_remote(topology.name, authenticated_url(topology.url, token))
        logger.info("git fetch %s", topology.name)
        repo.git.fetch(topology.name)
    except GitCommandError as exc:
        raise RemoteFetchFailedError(
            f"remote {topology.name} ({topology.url}): {_error_text(exc, token)}"
        ) from exc


def replay_commits(repo: Repo, commits: Iterable[str], token: str = "") -> int:
    """Cherry-pick ``commits`` onto the current branch, strictly in order.

    Stops at the first commit that does not apply cleanly. Commits replayed
    before it stay on the local branch.

    Returns:
        Number of commits replayed.

    Raises:
        ReplayConflictError: Naming the first commit that failed.
    """
    replayed = 0
    for sha in commits:
        logger.info("git cherry-pick %s", sha)
        try:
            repo.git.cherry_pick(sha)
        except GitCommandError as exc:
            logger.error("cherry-pick failed", extra={"sha": sha, "replayed": replayed})
            raise ReplayConflictError(sha, _error_text(exc, token)) from exc
        replayed += 1
    return replayed


def _push(repo: Repo, plan: DuplicationPlan, token: str) -> None:
    branch = plan.new_branch_name
    logger.info("git push %s %s", plan.push_remote, branch)
    try:
        repo.git.push(plan.push_remote, f"refs/heads/{branch}:refs/heads/{branch}")
    except GitCommandError as exc:
        raise PushFailedError(f"{branch} to {plan.push_remote}: {_error_text(exc, token)}") from exc


def build_duplicate_branch(
    snapshot: PullRequestSnapshot,
    target_base_branch: str,
    commits: Sequence[str],
    config: Config,
) -> str:
    """Create ``<head_ref>-for-<target>`` with ``commits`` replayed and push it.

    Args:
        snapshot: The source pull request.
        target_base_branch: Branch the duplicate is built on.
        commits: Commit SHAs of the source pull request, in replay order.
        config: Runtime configuration; supplies the git credential and the
            optional committer identity.

    Returns:
        The name of the pushed branch.

    Raises:
        CloneFailedError, TargetBranchNotFoundError, BranchCreateFailedError,
        RemoteFetchFailedError, ReplayConflictError, PushFailedError: From the
            step that failed. Nothing is pushed unless every commit replayed.
    """
    plan = plan_duplication(snapshot, target_base_branch)
    token = config.token

    with tempfile.TemporaryDirectory(prefix=TEMP_DIR_PREFIX) as work_dir:
        repo = _clone(snapshot.base_clone_url, work_dir, config)
        try:
            _checkout_target(repo, plan.target_base_branch, token)
            _create_branch(repo, plan.new_branch_name, token)
            _prepare_remote(repo, plan, token)
            replayed = replay_commits(repo, commits, token)
            _push(repo, plan, token)
        finally:
            repo.close()

    logger.info(
        "Duplicate branch pushed",
        extra={
            "branch": plan.new_branch_name,
            "remote": plan.push_remote,
            "commits": replayed,
        },
    )
    return plan.new_branch_name
