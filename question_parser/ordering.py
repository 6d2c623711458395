"""
Ordering Extractor
==================
Detects sequencing tasks from two independent cues:

    - Cue phrases: "Put these in order: wake up, brush teeth, eat"
    - Lettered lists: consecutive "A. ...", "B. ..." lines

Cue-phrase results always come before lettered-list results.
"""

from __future__ import annotations

import logging
import re

from .models import ParseMode, Question
from .tokenizers import (
    LETTERED_LINE_PATTERN,
    QuestionCollector,
    find_line_runs,
    split_items,
    split_lines,
    strip_lettered_prefix,
)

logger = logging.getLogger(__name__)

# ─── Cue Patterns ─────────────────────────────────────────────────────────────

ORDERING_CUE_PATTERNS = [
    re.compile(
        r"(?:order|arrange|put|sequence|sort).*?:\s*([^.!?\n]+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:in\s+order|chronological|sequence).*?:\s*([^.!?\n]+)",
        re.IGNORECASE,
    ),
]

# Captured runs this short are too small to hold two items
MIN_CUE_RUN_LENGTH = 5


def _format(items: list[str]) -> str:
    return f"Order the following: {', '.join(items)}"


def parse_ordering_tasks(text: str) -> list[Question]:
    """Extract ordering questions from cue phrases and lettered lists."""
    collector = QuestionCollector(ParseMode.ORDERING.prefix)

    for pattern in ORDERING_CUE_PATTERNS:
        for match in pattern.finditer(text):
            items_text = match.group(1).strip()
            if len(items_text) <= MIN_CUE_RUN_LENGTH:
                continue

            items = split_items(items_text)
            if len(items) < 2:
                logger.debug(f"Ordering cue with a single item: {items_text!r}")
                continue

            collector.add(_format(items))

    for run in find_line_runs(split_lines(text), LETTERED_LINE_PATTERN):
        items = [strip_lettered_prefix(line) for line in run]
        items = [item for item in items if item]
        if len(items) >= 2:
            logger.debug(f"Lettered list with {len(items)} items")
            collector.add(_format(items))

    return collector.questions
