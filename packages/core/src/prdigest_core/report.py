"""Compose per-commit reviews into the single comment posted on the PR."""

from __future__ import annotations

import logging

from prdigest_core.providers.base import BaseCompleter

logger = logging.getLogger(__name__)

PREAMBLE = (
    "Hello, I am a serverless review bot powered by prdigest. "
    "Here are my reviews of code commits in this PR.\n\n------\n\n"
)

REVIEW_SEPARATOR = "------"

SUMMARY_PROMPT = (
    "In the next message, I will provide a set of reviews for code patches. "
    f"Each review starts with a {REVIEW_SEPARATOR} line. Please write a summary of all the reviews"
)


def format_review_log(reviews: list[str]) -> str:
    """Concatenate reviews, each introduced by a separator line, for the summary prompt."""
    return "".join(f"{REVIEW_SEPARATOR}\n{review}\n" for review in reviews)


def build_report(reviews: list[str], summary: str | None = None) -> str:
    """
    Render the comment body.

    Layout: preamble, then (when a summary exists) the summary and a
    ``## Details`` heading, then one ``### Commit i`` section per review in
    the order the commits were reviewed.
    """
    parts = [PREAMBLE]
    if summary:
        parts.append(f"{summary}\n\n## Details\n\n")
    for i, review in enumerate(reviews, 1):
        parts.append(f"### Commit {i}\n{review}\n\n")
    return "".join(parts)


async def summarize(
    completer: BaseCompleter,
    reviews: list[str],
    session_id: str,
    model: str | None = None,
) -> str | None:
    summary = await completer.complete(session_id, SUMMARY_PROMPT, format_review_log(reviews), model=model, restart=True)
    if summary is None:
        logger.warning("No overall summary returned for %s; posting commit reviews only", session_id)
    return summary


async def aggregate(
    completer: BaseCompleter,
    reviews: list[str],
    session_id: str,
    model: str | None = None,
) -> str:
    """Build the report, asking the model for an overall summary only when there is more than one review."""
    summary = None
    if len(reviews) > 1:
        summary = await summarize(completer, reviews, session_id, model)
    return build_report(reviews, summary)
