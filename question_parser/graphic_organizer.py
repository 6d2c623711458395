"""
Graphic-Organizer Extractor
===========================
Turns tables, labeled categories, bullet hierarchies and connection lines
into fill-in-the-blank prompts.

Sub-detectors run in a fixed order and share one id sequence:
    1. Pipe tables        "Name | Capital"
    2. Labeled categories "Mammals: dog, cat, whale"
    3. Bullet hierarchies "- Plants" / "    - Roots absorb water"
    4. Connections        "Sun → Energy"

Exact duplicates are dropped within a sub-detector, never across them, so
one fragment can yield overlapping prompts from several sub-detectors.
"""

from __future__ import annotations

import logging
import re

from .models import BLANK, ParseMode, Question
from .tokenizers import (
    BULLET_LINE_PATTERN,
    PIPE_ROW_PATTERN,
    QuestionCollector,
    find_line_runs,
    split_cells,
    split_items,
    split_lines,
)

logger = logging.getLogger(__name__)

# ─── Patterns ─────────────────────────────────────────────────────────────────

# "Mammals: dog, cat" -> ("Mammals", "dog, cat")
LABELED_PATTERN = re.compile(r"([A-Z][^:\n]+):\s*([^\n.!?]+)")

# Items that look like a placeholder rather than content
PLACEHOLDER_ITEM_PATTERN = re.compile(r"[a-z]+|[A-Z]")

# Anchored at the first letter of the line so each line is scanned once
CONNECTION_PATTERN = re.compile(
    r"[^A-Za-z\n]*([A-Za-z][^\n]+?)\s*[-=:>→]\s*([A-Za-z][^\n]+?)$"
)

FIRST_WORD_PATTERN = re.compile(r"\w+")

# Bullets indented by at most this many characters are category labels
CATEGORY_INDENT = 2

MIN_CELL_LENGTH = 3
MIN_CONTEXT_CELL_LENGTH = 3
MIN_LABELED_ITEM_LENGTH = 5
MIN_BULLET_ITEM_LENGTH = 3
MIN_CONNECTION_SIDE_LENGTH = 2


# ─── Sub-detectors ────────────────────────────────────────────────────────────


def _table_questions(text: str, collector: QuestionCollector):
    for run in find_line_runs(split_lines(text), PIPE_ROW_PATTERN):
        headers = split_cells(run[0], keep_empty=False)

        for row in run[1:]:
            cells = split_cells(row)

            for j in range(min(len(headers), len(cells))):
                header = headers[j]
                if len(cells[j]) >= MIN_CELL_LENGTH:
                    continue

                context = ", ".join(
                    f"{headers[idx]}: {cell}"
                    for idx, cell in enumerate(cells)
                    if idx != j
                    and idx < len(headers)
                    and len(cell) > MIN_CONTEXT_CELL_LENGTH
                )

                if context:
                    collector.add(
                        f"In the {header} row, given {context}, "
                        f"fill in: {header} = {BLANK}"
                    )
                else:
                    collector.add(f"Fill in the {header}: {BLANK}")


def _labeled_questions(text: str, collector: QuestionCollector):
    for match in LABELED_PATTERN.finditer(text):
        category = match.group(1).strip()

        for item in split_items(match.group(2).strip()):
            if (
                len(item) < MIN_LABELED_ITEM_LENGTH
                or PLACEHOLDER_ITEM_PATTERN.fullmatch(item)
            ):
                collector.add(f"Under {category}, fill in: {BLANK}")
            else:
                collector.add(f"{category}: {item} (complete or identify)")


def _bullet_questions(text: str, collector: QuestionCollector):
    for run in find_line_runs(split_lines(text), BULLET_LINE_PATTERN):
        category = ""

        for line in run:
            match = BULLET_LINE_PATTERN.fullmatch(line)
            indent = len(match.group(1))
            content = match.group(2).strip()

            if indent <= CATEGORY_INDENT:
                category = content
                continue

            if len(content) <= MIN_BULLET_ITEM_LENGTH:
                continue

            blanked = FIRST_WORD_PATTERN.sub(BLANK, content, count=1)
            if category:
                collector.add(f"Complete: {category} - {blanked}")
            else:
                collector.add(f"Fill in: {blanked}")


def _connection_questions(text: str, collector: QuestionCollector):
    for line in split_lines(text):
        match = CONNECTION_PATTERN.match(line)
        if not match:
            continue

        left = match.group(1).strip()
        right = match.group(2).strip()
        if (
            len(left) > MIN_CONNECTION_SIDE_LENGTH
            and len(right) > MIN_CONNECTION_SIDE_LENGTH
        ):
            collector.add(f"Complete the connection: {left} → {BLANK}")
            collector.add(f"Complete the connection: {BLANK} → {right}")


SUB_DETECTORS = [
    _table_questions,
    _labeled_questions,
    _bullet_questions,
    _connection_questions,
]


def parse_graphic_organizers(text: str) -> list[Question]:
    """Convert structured fragments into graphic-organizer prompts."""
    collector = QuestionCollector(ParseMode.GRAPHIC_ORGANIZER.prefix)

    for detector in SUB_DETECTORS:
        collector.new_section()
        before = len(collector)
        detector(text, collector)
        logger.debug(
            f"{detector.__name__} produced {len(collector) - before} questions"
        )

    return collector.questions
