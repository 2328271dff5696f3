"""GitHub REST API client for reading and creating pull requests."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import ApiError, AuthenticationError, NotFoundError, ValidationError
from .models import CreatedPullRequest, NewPullRequest, PullRequestRef, PullRequestSnapshot

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small, typed client for the GitHub pull request APIs.

    Every call is a single blocking request. Failures are terminal for the run
    and are never retried.
    """

    _API_VERSION = "2022-11-28"
    _COMMIT_PAGE_SIZE = 100

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including token and API URL.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._base_url = config.api_base_url

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.token}",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._base_url}{path.lstrip('/')}"

    def _raise_for_status(self, method: str, url: str, response: requests.Response) -> None:
        status_code = response.status_code
        if status_code < 400:
            return

        detail = f"{method} {url} returned {status_code} - {response.text}"
        if status_code in (401, 403):
            raise AuthenticationError(f"GitHub rejected the access token: {detail}")
        if status_code == 404:
            raise NotFoundError(f"GitHub resource not found: {detail}")
        if status_code == 422:
            raise ValidationError(f"GitHub rejected the request: {detail}")
        raise ApiError(f"GitHub API request failed: {detail}")

    def _request_json(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Execute a single request and decode its JSON body.

        Raises:
            AuthenticationError: On HTTP 401/403.
            NotFoundError: On HTTP 404.
            ValidationError: On HTTP 422.
            ApiError: On any other HTTP >= 400, transport failure or invalid JSON.
        """
        url = self._build_url(path)
        logger.debug("GitHub request", extra={"method": method, "url": url})

        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=payload,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ApiError(f"GitHub request failed: {method} {url}: {exc}") from exc

        self._raise_for_status(method, url, response)

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub API returned invalid JSON: {method} {url}") from exc

    def _get_object(self, path: str) -> Dict[str, Any]:
        payload = self._request_json("GET", path)
        if not isinstance(payload, dict):
            raise ApiError(f"GitHub API returned unexpected payload shape: GET {path}")
        return payload

    def get_pull_request(self, ref: PullRequestRef) -> PullRequestSnapshot:
        """Fetch the source pull request and project the fields needed for replay.

        Raises:
            ApiError: If the payload lacks the base/head repository information,
                for example when the head fork has been deleted.
        """
        item = self._get_object(f"repos/{ref.owner}/{ref.repository}/pulls/{ref.number}")

        base = item.get("base") or {}
        head = item.get("head") or {}
        base_repo = base.get("repo") or {}
        head_repo = head.get("repo") or {}
        head_owner = head_repo.get("owner") or {}

        required = {
            "base.ref": base.get("ref"),
            "base.repo.clone_url": base_repo.get("clone_url"),
            "base.repo.full_name": base_repo.get("full_name"),
            "head.ref": head.get("ref"),
            "head.repo.clone_url": head_repo.get("clone_url"),
            "head.repo.full_name": head_repo.get("full_name"),
            "head.repo.owner.login": head_owner.get("login"),
        }
        missing = sorted(name for name, value in required.items() if not value)
        if missing:
            raise ApiError(
                "GitHub pull request payload is missing required fields: "
                f"pull_request={ref}, missing={missing}"
            )

        return PullRequestSnapshot(
            number=int(item.get("number", ref.number)),
            title=str(item.get("title") or ""),
            body=str(item.get("body") or ""),
            base_branch=str(required["base.ref"]),
            base_clone_url=str(required["base.repo.clone_url"]),
            base_full_name=str(required["base.repo.full_name"]),
            head_ref=str(required["head.ref"]),
            head_clone_url=str(required["head.repo.clone_url"]),
            head_full_name=str(required["head.repo.full_name"]),
            head_owner_login=str(required["head.repo.owner.login"]),
        )

    def list_pull_request_commits(self, ref: PullRequestRef) -> List[str]:
        """List the pull request's commit SHAs in the order GitHub returns them.

        Uses ``per_page``/``page`` pagination until a short page is returned.

        Raises:
            ApiError: If a page is not a list, an item has no SHA, or the pull
                request has no commits at all.
        """
        shas: List[str] = []
        page = 1

        while True:
            page_items = self._request_json(
                "GET",
                f"repos/{ref.owner}/{ref.repository}/pulls/{ref.number}/commits",
                params={"per_page": self._COMMIT_PAGE_SIZE, "page": page},
            )
            if not isinstance(page_items, list):
                raise ApiError(f"GitHub API returned unexpected commit list shape: pull_request={ref}")

            for item in page_items:
                sha = item.get("sha") if isinstance(item, dict) else None
                if not sha:
                    raise ApiError(f"GitHub commit payload is missing 'sha': pull_request={ref}, payload={item}")
                shas.append(str(sha))

            if len(page_items) < self._COMMIT_PAGE_SIZE:
                break

            page += 1

        if not shas:
            raise ApiError(f"Pull request {ref} has no commits to duplicate.")

        logger.info("Fetched pull request commits", extra={"pull_request": str(ref), "commits": len(shas)})
        return shas

    def create_pull_request(self, ref: PullRequestRef, new_pr: NewPullRequest) -> CreatedPullRequest:
        """Open ``new_pr`` in the repository that ``ref`` belongs to.

        Raises:
            ValidationError: If GitHub refuses the pull request, for example
                because one already exists for the same head and base.
        """
        payload = self._request_json(
            "POST",
            f"repos/{ref.owner}/{ref.repository}/pulls",
            payload={
                "title": new_pr.title,
                "head": new_pr.head,
                "base": new_pr.base,
                "body": new_pr.body,
            },
        )
        if not isinstance(payload, dict) or payload.get("number") is None or not payload.get("html_url"):
            raise ApiError(
                "GitHub API returned unexpected created pull request payload: "
                f"repository={ref.owner}/{ref.repository}"
            )

        return CreatedPullRequest(number=int(payload["number"]), html_url=str(payload["html_url"]))
