"""Tests for composing per-commit reviews into the posted report."""

import pytest

from prdigest_core.providers.base import BaseCompleter
from prdigest_core.report import PREAMBLE, SUMMARY_PROMPT, aggregate, build_report, format_review_log


class _ScriptedCompleter(BaseCompleter):
    """Returns queued replies in order and records every call it receives."""

    def __init__(self, replies):
        super().__init__(model="stub-model")
        self._replies = list(replies)
        self.calls = []

    async def _call_api(self, model, system_prompt, messages, session_id):
        self.calls.append({"model": model, "system": system_prompt, "messages": messages, "session": session_id})
        return self._replies.pop(0)


class TestBuildReport:
    def test_no_reviews_is_preamble_only(self):
        report = build_report([])
        assert report == PREAMBLE
        assert "## Details" not in report
        assert "### Commit" not in report

    def test_single_review_has_one_commit_section(self):
        report = build_report(["A"])
        assert report == PREAMBLE + "### Commit 1\nA\n\n"

    def test_summary_precedes_details_and_commits(self):
        report = build_report(["A", "B"], summary="Overall fine")
        assert report == PREAMBLE + "Overall fine\n\n## Details\n\n### Commit 1\nA\n\n### Commit 2\nB\n\n"

    def test_missing_summary_keeps_commit_sections(self):
        report = build_report(["A", "B"], summary=None)
        assert "## Details" not in report
        assert report.index("### Commit 1") < report.index("### Commit 2")

    def test_reviews_are_included_verbatim(self):
        review = "**PR Number:** 42\n**File Name(s):** `src/x.py`"
        assert review in build_report([review])


class TestFormatReviewLog:
    def test_each_review_starts_with_separator_line(self):
        assert format_review_log(["A", "B"]) == "------\nA\n------\nB\n"

    def test_empty(self):
        assert format_review_log([]) == ""


class TestAggregate:
    @pytest.mark.asyncio
    async def test_no_reviews_makes_no_model_call(self):
        completer = _ScriptedCompleter([])
        report = await aggregate(completer, [], "PR#1")
        assert report == PREAMBLE
        assert completer.calls == []

    @pytest.mark.asyncio
    async def test_single_review_makes_no_model_call(self):
        completer = _ScriptedCompleter([])
        report = await aggregate(completer, ["A"], "PR#1")
        assert "### Commit 1" in report
        assert "A" in report
        assert completer.calls == []

    @pytest.mark.asyncio
    async def test_multiple_reviews_make_one_summary_call(self):
        completer = _ScriptedCompleter(["Summary of both"])
        report = await aggregate(completer, ["A", "B"], "PR#7")

        assert len(completer.calls) == 1
        call = completer.calls[0]
        assert call["system"] == SUMMARY_PROMPT
        assert call["session"] == "PR#7"
        assert call["messages"] == [{"role": "user", "content": "------\nA\n------\nB\n"}]

        assert "Summary of both\n\n## Details" in report
        assert "### Commit 1\nA" in report
        assert "### Commit 2\nB" in report

    @pytest.mark.asyncio
    async def test_failed_summary_still_reports_commits(self):
        completer = _ScriptedCompleter([None])
        report = await aggregate(completer, ["A", "B"], "PR#7")
        assert "## Details" not in report
        assert "### Commit 1\nA" in report
        assert "### Commit 2\nB" in report

    @pytest.mark.asyncio
    async def test_summary_uses_requested_model(self):
        completer = _ScriptedCompleter(["S"])
        await aggregate(completer, ["A", "B"], "PR#7", model="gpt-4o")
        assert completer.calls[0]["model"] == "gpt-4o"
