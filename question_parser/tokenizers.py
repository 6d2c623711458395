"""
Line / Row / Column Tokenizers
==============================
Small helpers shared by the ordering, matching and graphic-organizer
extractors: split text into lines, find runs of structurally similar
lines, split rows into cells and cue runs into items.

Also hosts QuestionCollector, the per-call accumulator that enforces the
minimum length, case-insensitive deduplication and id numbering.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .models import MIN_QUESTION_LENGTH, Question

logger = logging.getLogger(__name__)

# ─── Line Patterns ────────────────────────────────────────────────────────────

# "Name | Age" style row: a pipe with content on both sides
PIPE_ROW_PATTERN = re.compile(r".+\|.+")

# Exactly one pipe with at least one character on each side
TWO_COLUMN_ROW_PATTERN = re.compile(r"([^|]+)\|([^|]+)")

# "A. Mix the flour", "  B. Add water"
LETTERED_LINE_PATTERN = re.compile(r"\s*[A-Z]\.\s*(\S.*)")

# "- item", "  • item", "* item"; group 1 is the indentation
BULLET_LINE_PATTERN = re.compile(r"([ \t]*)[-•*]\s*(\S.*)")

# Separators inside a cue run: commas, semicolons, line breaks
ITEM_SEPARATOR_PATTERN = re.compile(r"[,;]\s*|\n")

# Commas and semicolons only
SEGMENT_SEPARATOR_PATTERN = re.compile(r"[,;]\s*")


def dedup_key(text: str) -> str:
    """Normalized form used for duplicate detection."""
    return text.strip().casefold()


def split_lines(text: str) -> list[str]:
    """Split text into raw lines, keeping indentation."""
    return text.splitlines()


def find_line_runs(
    lines: list[str],
    pattern: re.Pattern,
    min_length: int = 2,
) -> list[list[str]]:
    """
    Group consecutive lines that fully match ``pattern``.

    Only runs of at least ``min_length`` lines are returned, in
    document order.
    """
    runs: list[list[str]] = []
    current: list[str] = []

    for line in lines:
        if pattern.fullmatch(line):
            current.append(line)
            continue
        if len(current) >= min_length:
            runs.append(current)
        current = []

    if len(current) >= min_length:
        runs.append(current)

    return runs


def split_items(
    text: str,
    pattern: re.Pattern = ITEM_SEPARATOR_PATTERN,
) -> list[str]:
    """Split a cue run into trimmed, non-empty items."""
    return [
        item.strip() for item in pattern.split(text)
        if item.strip()
    ]


def split_cells(row: str, keep_empty: bool = True) -> list[str]:
    """Split a table row on ``|`` into trimmed cells."""
    cells = [cell.strip() for cell in row.split("|")]
    if keep_empty:
        return cells
    return [cell for cell in cells if cell]


def split_two_columns(row: str) -> Optional[tuple[str, str]]:
    """Return the trimmed (left, right) sides of a two-column row."""
    match = TWO_COLUMN_ROW_PATTERN.fullmatch(row)
    if not match:
        return None
    return match.group(1).strip(), match.group(2).strip()


def strip_lettered_prefix(line: str) -> str:
    """'B. Add water' -> 'Add water'."""
    match = LETTERED_LINE_PATTERN.fullmatch(line)
    if not match:
        return line.strip()
    return match.group(1).strip()


# ─── Collector ────────────────────────────────────────────────────────────────


class QuestionCollector:
    """
    Accumulates questions for a single extraction call.

    Candidates of MIN_QUESTION_LENGTH characters or fewer are dropped,
    as are texts already seen (case-insensitive, trimmed). Ids are
    ``<prefix>-<n>`` numbered in emission order unless an explicit
    ordinal is supplied.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.questions: list[Question] = []
        self._seen: set[str] = set()

    def add(self, text: str, ordinal: Optional[int] = None) -> bool:
        """Add a candidate; returns False when it was discarded."""
        if len(text.strip()) <= MIN_QUESTION_LENGTH:
            return False

        key = dedup_key(text)
        if key in self._seen:
            logger.debug(f"Skipping duplicate {self.prefix} candidate: {text!r}")
            return False
        self._seen.add(key)

        number = ordinal if ordinal is not None else len(self.questions) + 1
        self.questions.append(Question(
            id=f"{self.prefix}-{number}",
            text=text,
        ))
        return True

    def new_section(self):
        """Forget seen texts while keeping ids sequential."""
        self._seen = set()

    def __len__(self) -> int:
        return len(self.questions)
