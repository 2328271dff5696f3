"""Composition of the duplicated pull request.

Pure helpers with no I/O: the branch-naming rule shared with the working tree
orchestrator, and the title/body/head/base of the new pull request.
"""

from __future__ import annotations

from .models import NewPullRequest, PullRequestSnapshot


def duplicate_branch_name(head_ref: str, target_base_branch: str) -> str:
    """Return ``<head_ref>-for-<target_base_branch>``."""
    return f"{head_ref}-for-{target_base_branch}"


def compose_duplicate_pull_request(
    snapshot: PullRequestSnapshot,
    target_base_branch: str,
    new_branch_name: str,
) -> NewPullRequest:
    """Build the pull request that duplicates ``snapshot`` onto ``target_base_branch``.

    The head is qualified with the owner of the source head repository so the
    pull request also resolves when the branch was pushed to a fork.
    """
    return NewPullRequest(
        title=f"{snapshot.title} for {target_base_branch}",
        body=f"duplicated PR for {target_base_branch} from #{snapshot.number}\n",
        head=f"{snapshot.head_owner_login}:{new_branch_name}",
        base=target_base_branch,
    )
