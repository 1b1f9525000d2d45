"""Per-commit review requests."""

from __future__ import annotations

import logging

from prdigest_core.providers.base import BaseCompleter

logger = logging.getLogger(__name__)

REVIEW_PROMPT = """You will act as a reviewer for GitHub Pull Requests. The next message is a GitHub patch for a single commit. Please review and provide feedback about the patch in the following format, filling the information and keeping the format intact:
# Code Review Request for Pull Request

**PR Number:** [insert PR number]
**PR Title:** [insert PR title]
**Code Version:** [insert code version]
**File Name(s):** [insert file name(s) of files changed in the PR]
**Code Overview:** [insert brief description of what the code changes do]
**Review Type:** [general review]
**Review Goals:** [identify bugs, improve readability, optimize performance]
**Additional Comments:** [alignment with the roadmap and objectives of the whole program]"""  # noqa: E501


async def review_chunk(
    completer: BaseCompleter,
    chunk: str,
    session_id: str,
    model: str | None = None,
) -> str | None:
    return await completer.complete(session_id, REVIEW_PROMPT, chunk, model=model, restart=True)


async def review_commits(
    completer: BaseCompleter,
    chunks: list[str],
    session_id: str,
    model: str | None = None,
) -> list[str]:
    """Review each chunk in order and return the reviews that came back.

    Calls are awaited one at a time: they share ``session_id`` and the
    backend may rely on seeing them in commit order. A chunk whose
    completion returns nothing is left out and the loop moves on.
    """
    reviews: list[str] = []
    for i, chunk in enumerate(chunks, 1):
        review = await review_chunk(completer, chunk, session_id, model)
        if review is None:
            logger.warning("No review returned for chunk %d/%d of %s; skipping", i, len(chunks), session_id)
            continue
        logger.info("Got a review for chunk %d/%d of %s", i, len(chunks), session_id)
        reviews.append(review)
    return reviews
