"""Core PR review orchestration: fetch → split → review → aggregate → publish."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Callable

from prdigest_core.config import Config
from prdigest_core.errors import EmptyPatchError, PrdigestError
from prdigest_core.gh.pull_request import fetch_patch, patch_url, publish_report
from prdigest_core.models import PullRequestRef, ReviewSummary, pull_request_from_event
from prdigest_core.providers.base import BaseCompleter
from prdigest_core.report import aggregate
from prdigest_core.reviewer import review_commits
from prdigest_core.splitter import split_commits
from prdigest_core.tokenizer import TokenCounter, Tokenizer

logger = logging.getLogger(__name__)

PatchFetcher = Callable[[str], str]
Publisher = Callable[[PullRequestRef, str], None]


def _get_completer(config: Config) -> BaseCompleter:
    if config.provider == "openai":
        from prdigest_core.providers.openai import OpenAICompleter

        return OpenAICompleter(api_key=config.api_key, model=config.model_name)
    if config.provider == "anthropic":
        from prdigest_core.providers.anthropic import AnthropicCompleter

        return AnthropicCompleter(api_key=config.api_key, model=config.model_name)
    raise ValueError(f"Unknown model provider: {config.provider!r}. Choose 'openai' or 'anthropic'.")


class Pipeline:
    """Runs one review per pull-request event.

    Collaborators are injected so tests (and alternative hosts) can replace
    the network-facing pieces. Blocking collaborators (the patch download
    and the GitHub comment call) run in worker threads so several events
    can be in flight on one event loop. Nothing produced for one event is
    kept on the instance.
    """

    def __init__(
        self,
        config: Config,
        completer: BaseCompleter,
        count_tokens: TokenCounter,
        fetch: PatchFetcher = fetch_patch,
        publish: Publisher | None = None,
    ):
        self.config = config
        self.completer = completer
        self.count_tokens = count_tokens
        self.fetch = fetch
        self.publish = publish

    @classmethod
    def from_config(cls, config: Config) -> "Pipeline":
        publish = None if config.dry_run else functools.partial(publish_report, token=config.github_token)
        return cls(
            config=config,
            completer=_get_completer(config),
            count_tokens=Tokenizer().count_tokens,
            publish=publish,
        )

    async def handle_event(self, payload: dict) -> ReviewSummary | None:
        """Entry point for a raw ``pull_request`` webhook payload."""
        pr = pull_request_from_event(payload, self.config.owner, self.config.repo)
        if pr is None:
            return None
        return await self.run(pr)

    async def run(self, pr: PullRequestRef) -> ReviewSummary | None:
        """Run the full pipeline for one pull request.

        Returns None when the event ends early on a fatal condition (patch
        download failure, empty patch, publish failure); the reason is
        logged. Returns a ReviewSummary otherwise, including dry runs.

        The completer's conversation history for the PR is released when the
        run ends, whatever the outcome.
        """
        try:
            return await self._run(pr)
        except PrdigestError as e:
            logger.error("Review of %s %s aborted: %s", pr.full_repo, pr.session_id, e)
            return None
        finally:
            self.completer.forget(pr.session_id)

    async def _run(self, pr: PullRequestRef) -> ReviewSummary:
        url = patch_url(pr.owner, pr.repo, pr.number, self.config.patch_host)
        logger.info("Fetching patch for %s %s from %s", pr.full_repo, pr.session_id, url)
        patch_text = await asyncio.to_thread(self.fetch, url)

        chunks = split_commits(
            patch_text,
            self.count_tokens,
            token_ceiling=self.config.token_ceiling,
            overflow=self.config.overflow,
        )
        if not chunks:
            raise EmptyPatchError("Cannot parse any commit from the patch file")
        logger.info("Reviewing %d commit chunk(s) for %s", len(chunks), pr.session_id)

        model = self.config.model_name
        reviews = await review_commits(self.completer, chunks, pr.session_id, model)
        report = await aggregate(self.completer, reviews, pr.session_id, model)

        summary = ReviewSummary(
            pr=pr,
            report=report,
            chunk_count=len(chunks),
            review_count=len(reviews),
        )
        if self.publish is None:
            logger.info("Dry run: not posting the report for %s", pr.session_id)
            return summary

        await asyncio.to_thread(self.publish, pr, report)
        summary.posted = True
        return summary
