"""
Text normalisation and content fingerprinting for embedding inputs.
"""

from __future__ import annotations

import hashlib
import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str, max_tokens: int) -> str:
    """
    Collapse whitespace runs, trim, and keep at most ``max_tokens`` tokens.

    Tokens are the space-separated words of the collapsed text. Anything past
    the cap is dropped, so long documents lose their trailing content.
    """
    if max_tokens <= 0:
        raise ValueError("max_tokens must be > 0")

    collapsed = _WHITESPACE_RE.sub(" ", text).strip()
    if not collapsed:
        return ""
    tokens = collapsed.split(" ")
    if len(tokens) <= max_tokens:
        return collapsed
    return " ".join(tokens[:max_tokens])


def fingerprint(text: str) -> str:
    """Return the lowercase hex SHA-256 digest of the UTF-8 encoded text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
