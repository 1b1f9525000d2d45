from __future__ import annotations

import logging

import requests
from github import Github, GithubException

from prdigest_core.config import DEFAULT_PATCH_HOST
from prdigest_core.errors import PatchFetchError, PublishError

logger = logging.getLogger(__name__)

USER_AGENT = "prdigest review bot"
_TIMEOUT = 30


def get_repo(repo_name: str, token: str | None):
    return Github(token).get_repo(repo_name)


def patch_url(owner: str, repo: str, pr_number: int, host: str = DEFAULT_PATCH_HOST) -> str:
    return f"https://{host}/raw/{owner}/{repo}/pull/{pr_number}.patch"


def fetch_patch(url: str, session: requests.Session | None = None) -> str:
    """Download a PR's .patch file and decode it as UTF-8.

    Malformed byte sequences are replaced rather than rejected: a patch may
    touch binary-ish files and the review only needs readable text.
    """
    http = session or requests
    try:
        response = http.get(
            url,
            headers={"Accept": "application/vnd.github+json", "User-Agent": USER_AGENT},
            timeout=_TIMEOUT,
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise PatchFetchError(f"Could not fetch {url}: {e}") from e
    return response.content.decode("utf-8", errors="replace")


def post_comment(repo, pr_number: int, body: str) -> None:
    """Post ``body`` as a single new conversation comment on the pull request.

    PR conversation comments are issue comments in the GitHub API.
    """
    try:
        repo.get_issue(pr_number).create_comment(body)
    except (GithubException, requests.exceptions.RequestException) as e:
        raise PublishError(f"Could not comment on PR #{pr_number}: {e}") from e
    logger.info("Posted review comment on PR #%d", pr_number)


def publish_report(pr, report: str, token: str | None) -> None:
    """Post the finished report on the pull request identified by ``pr``."""
    try:
        repo = get_repo(pr.full_repo, token=token)
    except (GithubException, requests.exceptions.RequestException) as e:
        raise PublishError(f"Could not open {pr.full_repo}: {e}") from e
    post_comment(repo, pr.number, report)
