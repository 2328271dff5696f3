"""Domain models for pull request duplication.

The pull request dataclasses model only the subset of GitHub payload fields
needed to replay a pull request onto another branch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PullRequestRef:
    """Identifies a pull request as ``owner/repository#number``."""

    owner: str
    repository: str
    number: int

    def __str__(self) -> str:
        return f"{self.owner}/{self.repository}/pull/{self.number}"


@dataclass(frozen=True)
class PullRequestSnapshot:
    """Read-only projection of the source pull request used for replay."""

    number: int
    title: str
    body: str
    base_branch: str
    base_clone_url: str
    base_full_name: str
    head_ref: str
    head_clone_url: str
    head_full_name: str
    head_owner_login: str

    @property
    def same_remote(self) -> bool:
        return self.base_full_name == self.head_full_name


@dataclass(frozen=True)
class NewPullRequest:
    """Payload for the duplicated pull request."""

    title: str
    body: str
    head: str
    base: str


@dataclass(slots=True)
class CreatedPullRequest:
    """Represents the pull request GitHub created for the duplicate."""

    number: int
    html_url: str


@dataclass(frozen=True)
class SameRemote:
    """Head and base live in the same repository; push back to ``origin``."""

    name: str = "origin"


@dataclass(frozen=True)
class ForkRemote:
    """Head lives in a fork; it is added as a second remote and pushed to."""

    url: str
    name: str = "pr"


RemoteTopology = Union[SameRemote, ForkRemote]


@dataclass(frozen=True)
class DuplicationPlan:
    """Everything the working tree steps need, resolved once per run."""

    target_base_branch: str
    new_branch_name: str
    topology: RemoteTopology

    @property
    def same_remote(self) -> bool:
        return isinstance(self.topology, SameRemote)

    @property
    def push_remote(self) -> str:
        return self.topology.name
