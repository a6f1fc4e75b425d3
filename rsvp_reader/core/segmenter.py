"""Text tokenization, short-word merging, and chunk sequence construction.

WHY: Showing every word for a full interval wastes time on articles and
prepositions, while math spans must stay whole so they can be typeset.
This module turns raw text into the display units the player paces.

HOW: A single regex walks the text left to right, matching a $$...$$
span, else a $...$ span, else a run of non-whitespace. Each token is
trimmed and either becomes a new chunk or is appended to the previous
one when it is short enough. Merge state alternates: a token that was
merged cannot be followed by another merge.

RULES:
- Tokens: $$...$$ first, then $...$, then \\S+ (whitespace discarded)
- Empty tokens after trimming are skipped without touching merge state
- Sentence end: token ends with "."
- Merge iff merge enabled, len(token) <= 3, previous token not merged,
  a chunk exists, token does not start with "$", and the previous chunk
  is not a math span
- A merged sentence-ending token sets sentence_end on the host chunk
  (never unsets it)
- Same (text, merge) always yields the same sequence
"""

from __future__ import annotations

import dataclasses
import re
from typing import List

from rsvp_reader.core.ir import Chunk, ChunkSequence

_TOKEN_RE = re.compile(r"(\$\$.*?\$\$)|(\$.*?\$)|(\S+)")

_MAX_MERGE_LENGTH = 3

_MATH_PREFIX = "$"


def tokenize(text: str) -> List[str]:
    """Split text into candidate tokens (words and math spans), in order."""
    return [m.group(0) for m in _TOKEN_RE.finditer(text or "")]


def _is_sentence_end(token: str) -> bool:
    return token.endswith(".")


def segment(text: str, merge: bool) -> ChunkSequence:
    """Build the chunk sequence for a text snapshot.

    Args:
        text: Raw text from the input surface.
        merge: The "merge short words" preference.

    Returns:
        Tuple of Chunk objects, empty when the text has no
        non-whitespace content.
    """
    chunks: List[Chunk] = []
    merged = False

    for raw in tokenize(text):
        token = raw.strip()
        if not token:
            continue

        sentence_end = _is_sentence_end(token)

        should_merge = (
            merge
            and len(token) <= _MAX_MERGE_LENGTH
            and not merged  # never two merges in a row
            and bool(chunks)
            and not token.startswith(_MATH_PREFIX)
            and not chunks[-1].is_math
        )

        if should_merge:
            host = chunks[-1]
            chunks[-1] = dataclasses.replace(
                host,
                text="{} {}".format(host.text, token),
                sentence_end=host.sentence_end or sentence_end,
            )
            merged = True
        else:
            chunks.append(Chunk(text=token, sentence_end=sentence_end))
            merged = False

    return tuple(chunks)
