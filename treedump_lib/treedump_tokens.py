# -*- coding: utf-8 -*-
"""
Token counting for treedump, using the tiktoken library.
"""

from typing import Optional

import tiktoken

from .treedump_utils import SetupError


class TokenCounter:
    """
    Counts tokens of emitted text.

    ``model`` may be a tiktoken encoding name ('cl100k_base', 'o200k_base', ...)
    or an OpenAI model name ('gpt-4o', ...), which is mapped to its encoding.
    """

    def __init__(self, model: str = "cl100k_base"):
        self.model = model
        self._encoding: Optional[tiktoken.Encoding] = None
        try:
            if model in tiktoken.list_encoding_names():
                self._encoding = tiktoken.get_encoding(model)
            else:
                self._encoding = tiktoken.encoding_for_model(model)
        except (KeyError, ValueError) as e:
            raise SetupError(f"unknown tokenizer model '{model}': {e}") from e

    def count(self, text: str) -> int:
        """Number of tokens in ``text``. Special-token markers are counted as plain text."""
        if not text:
            return 0
        return len(self._encoding.encode(text, disallowed_special=()))
