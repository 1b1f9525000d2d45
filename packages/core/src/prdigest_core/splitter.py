"""Split a multi-commit GitHub patch into per-commit chunks under a token ceiling."""

from __future__ import annotations

import logging

from prdigest_core.config import TOKEN_CEILING
from prdigest_core.tokenizer import TokenCounter

logger = logging.getLogger(__name__)

# `git format-patch` (and GitHub's .patch view) opens every commit with an mbox
# separator such as "From 1a2b3c... Mon Sep 17 00:00:00 2001".
COMMIT_MARKER = "From "


def _patch_lines(patch_text: str):
    r"""Yield the lines of a patch, split on "\n" only.

    str.splitlines() would also break on form feeds, vertical tabs and Unicode
    line separators, which occur inside changed source lines. A trailing "\r"
    is removed and a final newline does not produce an empty last line.
    """
    lines = patch_text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


def split_commits(
    patch_text: str,
    count_tokens: TokenCounter,
    token_ceiling: int = TOKEN_CEILING,
    overflow: str = "drop",
) -> list[str]:
    """
    Return one chunk per commit, in the order the commits appear in the patch.

    Before a line is appended, the chunk built so far is measured; the line is
    kept only while that count is strictly below ``token_ceiling``. With
    ``overflow="drop"`` later lines of an oversized commit are discarded. With
    ``overflow="split"`` the full chunk is closed and the line opens a new one,
    so nothing is lost but a large commit spans several chunks.

    The marker line belongs to the commit it introduces. Text before the first
    marker (if any) becomes a chunk of its own.
    """
    chunks: list[str] = []
    current = ""
    dropped = 0

    for line in _patch_lines(patch_text):
        if line.startswith(COMMIT_MARKER):
            if current:
                chunks.append(current)
            current = ""

        if count_tokens(current) < token_ceiling:
            current += line + "\n"
        elif overflow == "split":
            chunks.append(current)
            current = line + "\n"
        else:
            dropped += 1

    if current:
        chunks.append(current)

    if dropped:
        logger.warning("Dropped %d patch line(s) past the %d-token ceiling", dropped, token_ceiling)
    logger.debug("Split patch into %d chunk(s)", len(chunks))
    for i, chunk in enumerate(chunks, 1):
        logger.debug("Chunk %d starts with: %s", i, chunk.split("\n", 1)[0])
    return chunks
