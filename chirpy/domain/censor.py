"""Domain helpers for chirp body filtering."""
from __future__ import annotations

MAX_CHIRP_LENGTH = 140
MASK = "****"
BLOCKED_WORDS = {
    "kerfuffle",
    "sharbert",
    "fornax",
}


def censor(body: str, blocked: set[str] | frozenset[str] = frozenset(BLOCKED_WORDS)) -> str:
    """Mask whole words found in the block-list, case-insensitively.

    Tokens are split on single spaces and rejoined with one space. A word with
    punctuation attached ("fornax!") is not a match.
    """
    words = body.split(" ")
    return " ".join(MASK if word.lower() in blocked else word for word in words)
