"""
Matching Extractor
==================
Detects matching tasks from cue phrases ("Match: cat - animal, rose -
flower") and from two-column "left | right" tables.
"""

from __future__ import annotations

import logging
import re

from .models import ParseMode, Question
from .tokenizers import (
    SEGMENT_SEPARATOR_PATTERN,
    TWO_COLUMN_ROW_PATTERN,
    QuestionCollector,
    find_line_runs,
    split_items,
    split_lines,
    split_two_columns,
)

logger = logging.getLogger(__name__)

MATCHING_CUE_PATTERN = re.compile(
    r"(?:match|connect|pair).*?:\s*([^.!?\n]+)", re.IGNORECASE
)

# "cat - animal", "H2O = water", "dog: bark"
PAIR_PATTERN = re.compile(r"(.+?)\s*[-=:]\s*(.+)")

MIN_CUE_RUN_LENGTH = 5


def _format(pairs: list[str]) -> str:
    return f"Match the following: {', '.join(pairs)}"


def _pairs_from_cue(pairs_text: str) -> list[str]:
    pairs = []
    for segment in split_items(pairs_text, SEGMENT_SEPARATOR_PATTERN):
        pair_match = PAIR_PATTERN.search(segment)
        if pair_match:
            left = pair_match.group(1).strip()
            right = pair_match.group(2).strip()
            pairs.append(f"{left} - {right}")
        elif len(segment) > 3:
            # Unpaired list entry
            pairs.append(segment)
    return pairs


def _pairs_from_columns(rows: list[str]) -> list[str]:
    pairs = []
    for row in rows:
        sides = split_two_columns(row)
        if sides and sides[0] and sides[1]:
            pairs.append(f"{sides[0]} - {sides[1]}")
        elif row.strip():
            pairs.append(row.strip())
    return pairs


def parse_matching_tasks(text: str) -> list[Question]:
    """Extract matching questions from cue phrases and two-column tables."""
    collector = QuestionCollector(ParseMode.MATCHING.prefix)

    for match in MATCHING_CUE_PATTERN.finditer(text):
        pairs_text = match.group(1).strip()
        if len(pairs_text) <= MIN_CUE_RUN_LENGTH:
            continue

        pairs = _pairs_from_cue(pairs_text)
        if len(pairs) >= 2:
            collector.add(_format(pairs))

    for run in find_line_runs(split_lines(text), TWO_COLUMN_ROW_PATTERN):
        pairs = _pairs_from_columns(run)
        if len(pairs) >= 2:
            logger.debug(f"Two-column table with {len(pairs)} rows")
            collector.add(_format(pairs))

    return collector.questions
