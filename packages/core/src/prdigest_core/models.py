from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

# Actions that close the pull request; everything else (opened, synchronize,
# reopened, edited, ...) is reviewable.
_SKIPPED_ACTIONS = {"closed"}


@dataclass(frozen=True)
class PullRequestRef:
    """Identifies the pull request a review run belongs to."""

    owner: str
    repo: str
    number: int
    title: Optional[str] = None
    author: Optional[str] = None

    @property
    def session_id(self) -> str:
        """Conversation key shared by every completion call for this PR."""
        return f"PR#{self.number}"

    @property
    def full_repo(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class ReviewSummary:
    """Result of one pipeline run, returned for logging and the CLI dry-run output."""

    pr: PullRequestRef
    report: str
    chunk_count: int
    review_count: int
    posted: bool = False
    reviewed_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def pull_request_from_event(payload: dict, owner: str, repo: str) -> PullRequestRef | None:
    """Extract a PullRequestRef from a GitHub ``pull_request`` webhook payload.

    Returns None for anything that should not be reviewed: closed PRs,
    payloads without a ``pull_request`` object, or a missing PR number.
    Title and author are optional; their absence is never an error.
    """
    action = payload.get("action")
    if action in _SKIPPED_ACTIONS:
        logger.info("Ignoring %s pull request event", action)
        return None

    pull = payload.get("pull_request")
    if not isinstance(pull, dict):
        logger.info("Ignoring payload without a pull_request object")
        return None

    number = pull.get("number", payload.get("number"))
    if not isinstance(number, int):
        logger.warning("Ignoring pull request event with no usable PR number: %r", number)
        return None

    user = pull.get("user") or {}
    return PullRequestRef(
        owner=owner,
        repo=repo,
        number=number,
        title=pull.get("title"),
        author=user.get("login") if isinstance(user, dict) else None,
    )
