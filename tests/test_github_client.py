"""Tests for GitHub API client behavior with mocked HTTP."""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from duppr.config import Config
from duppr.errors import ApiError, AuthenticationError, NotFoundError, ValidationError
from duppr.github_client import GitHubClient
from duppr.models import CreatedPullRequest, NewPullRequest, PullRequestRef

REF = PullRequestRef(owner="acme", repository="widgets", number=123)


def _build_client(api_base_url: str = "https://api.github.com/") -> GitHubClient:
    config = Config(
        from_pr="acme/widgets/pull/123",
        target_branch="release-2.0",
        token="gh-token",
        api_base_url=api_base_url,
    )
    return GitHubClient(config=config)


def _response(status_code: int, payload=None, text: str = ""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload if payload is not None else {}
    return response


def _pr_payload(head_full_name: str = "acme/widgets", head_owner: str = "acme") -> dict:
    return {
        "number": 123,
        "title": "Add widget cache",
        "body": "Caches widgets.",
        "base": {
            "ref": "main",
            "repo": {
                "clone_url": "https://github.com/acme/widgets.git",
                "full_name": "acme/widgets",
                "owner": {"login": "acme"},
            },
        },
        "head": {
            "ref": "feature-x",
            "repo": {
                "clone_url": f"https://github.com/{head_full_name}.git",
                "full_name": head_full_name,
                "owner": {"login": head_owner},
            },
        },
    }


def _commit_page(start: int, count: int) -> list:
    return [{"sha": f"{index:040x}"} for index in range(start, start + count)]


def test_client_sends_bearer_token_and_github_accept_header():
    """Verify the session is authenticated with the access token."""
    client = _build_client()

    assert client._session.headers["Authorization"] == "Bearer gh-token"
    assert client._session.headers["Accept"] == "application/vnd.github+json"


def test_get_pull_request_projects_snapshot():
    """Verify the pull request payload is projected into a snapshot."""
    client = _build_client()
    client._session.request = Mock(return_value=_response(200, _pr_payload()))

    snapshot = client.get_pull_request(REF)

    assert snapshot.number == 123
    assert snapshot.title == "Add widget cache"
    assert snapshot.base_branch == "main"
    assert snapshot.base_full_name == "acme/widgets"
    assert snapshot.head_ref == "feature-x"
    assert snapshot.head_owner_login == "acme"
    assert snapshot.same_remote is True

    method, url = client._session.request.call_args.args
    assert method == "GET"
    assert url == "https://api.github.com/repos/acme/widgets/pulls/123"


def test_get_pull_request_fork_is_not_same_remote():
    """Verify a head in a fork is recognized as a different remote."""
    client = _build_client()
    client._session.request = Mock(
        return_value=_response(200, _pr_payload(head_full_name="octocat/widgets", head_owner="octocat"))
    )

    snapshot = client.get_pull_request(REF)

    assert snapshot.same_remote is False
    assert snapshot.head_clone_url == "https://github.com/octocat/widgets.git"
    assert snapshot.head_owner_login == "octocat"


def test_get_pull_request_uses_enterprise_base_url():
    """Verify the API base URL override is used to build request URLs."""
    client = _build_client("https://ghe.example.com/api/v3/")
    client._session.request = Mock(return_value=_response(200, _pr_payload()))

    client.get_pull_request(REF)

    _, url = client._session.request.call_args.args
    assert url == "https://ghe.example.com/api/v3/repos/acme/widgets/pulls/123"


def test_get_pull_request_deleted_head_repository_raises_api_error():
    """Verify a pull request whose head fork is gone cannot be duplicated."""
    payload = _pr_payload()
    payload["head"]["repo"] = None
    client = _build_client()
    client._session.request = Mock(return_value=_response(200, payload))

    with pytest.raises(ApiError, match="head.repo.clone_url"):
        client.get_pull_request(REF)


@pytest.mark.parametrize(
    "status_code, error_type",
    [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, NotFoundError),
        (422, ValidationError),
        (500, ApiError),
    ],
)
def test_http_errors_map_to_error_kinds(status_code, error_type):
    """Verify HTTP error statuses are mapped to distinct exception types, without retry."""
    client = _build_client()
    client._session.request = Mock(return_value=_response(status_code, text="nope"))

    with pytest.raises(error_type):
        client.get_pull_request(REF)

    assert client._session.request.call_count == 1


def test_transport_failure_raises_api_error():
    """Verify requests exceptions are wrapped in ApiError."""
    client = _build_client()
    client._session.request = Mock(side_effect=requests.ConnectionError("unreachable"))

    with pytest.raises(ApiError):
        client.get_pull_request(REF)


def test_invalid_json_raises_api_error():
    """Verify a response that is not JSON raises ApiError."""
    client = _build_client()
    response = _response(200)
    response.json.side_effect = ValueError("no json")
    client._session.request = Mock(return_value=response)

    with pytest.raises(ApiError):
        client.get_pull_request(REF)


def test_list_pull_request_commits_paginates_and_preserves_order():
    """Verify commit listing pages through results and keeps host order."""
    client = _build_client()
    first_page = _commit_page(1, 100)
    second_page = _commit_page(101, 2)
    client._request_json = Mock(side_effect=[first_page, second_page])

    shas = client.list_pull_request_commits(REF)

    assert shas == [item["sha"] for item in first_page + second_page]
    assert client._request_json.call_count == 2
    first_call, second_call = client._request_json.call_args_list
    assert first_call.kwargs["params"] == {"per_page": 100, "page": 1}
    assert second_call.kwargs["params"] == {"per_page": 100, "page": 2}


def test_list_pull_request_commits_empty_raises_api_error():
    """Verify a pull request without commits is rejected."""
    client = _build_client()
    client._request_json = Mock(return_value=[])

    with pytest.raises(ApiError):
        client.list_pull_request_commits(REF)


def test_list_pull_request_commits_missing_sha_raises_api_error():
    """Verify a commit item without a SHA is rejected."""
    client = _build_client()
    client._request_json = Mock(return_value=[{"commit": {}}])

    with pytest.raises(ApiError):
        client.list_pull_request_commits(REF)


def test_create_pull_request_posts_composed_payload():
    """Verify the duplicated pull request is posted to the source repository."""
    client = _build_client()
    client._session.request = Mock(
        return_value=_response(201, {"number": 456, "html_url": "https://github.com/acme/widgets/pull/456"})
    )
    new_pr = NewPullRequest(
        title="Add widget cache for release-2.0",
        body="duplicated PR for release-2.0 from #123\n",
        head="acme:feature-x-for-release-2.0",
        base="release-2.0",
    )

    created = client.create_pull_request(REF, new_pr)

    assert created == CreatedPullRequest(number=456, html_url="https://github.com/acme/widgets/pull/456")
    call = client._session.request.call_args
    assert call.args == ("POST", "https://api.github.com/repos/acme/widgets/pulls")
    assert call.kwargs["json"] == {
        "title": "Add widget cache for release-2.0",
        "head": "acme:feature-x-for-release-2.0",
        "base": "release-2.0",
        "body": "duplicated PR for release-2.0 from #123\n",
    }


def test_create_pull_request_duplicate_raises_validation_error():
    """Verify GitHub's 422 for an existing pull request surfaces as ValidationError."""
    client = _build_client()
    client._session.request = Mock(
        return_value=_response(422, text='{"message":"A pull request already exists"}')
    )
    new_pr = NewPullRequest(title="t", body="b", head="acme:x", base="main")

    with pytest.raises(ValidationError, match="already exists"):
        client.create_pull_request(REF, new_pr)
