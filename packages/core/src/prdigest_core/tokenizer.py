"""Token counting for the chat model's context accounting."""

from __future__ import annotations

from typing import Callable

import tiktoken

ENCODING_NAME = "cl100k_base"

TokenCounter = Callable[[str], int]


class Tokenizer:
    """Counts model tokens with a fixed tiktoken encoding.

    The encoding is loaded lazily because tiktoken may download its BPE ranks
    on first use; constructing a Tokenizer must stay cheap.
    """

    def __init__(self, encoding_name: str = ENCODING_NAME):
        self.encoding_name = encoding_name
        self._encoding = None

    @property
    def encoding(self):
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self.encoding_name)
        return self._encoding

    def count_tokens(self, text: str) -> int:
        if not text:
            return 0
        # encode_ordinary: patches routinely contain strings like "<|endoftext|>"
        # and must be measured as plain text, never as special tokens.
        return len(self.encoding.encode_ordinary(text))

    __call__ = count_tokens
