"""
Plain-Question Extractor
========================
Pulls ready-made questions out of OCR text using three regex strategies
that share one seen-set, with a looser fallback when none of them finds
anything.
"""

from __future__ import annotations

import logging
import re

from .models import MIN_QUESTION_LENGTH, ParseMode, Question
from .tokenizers import QuestionCollector

logger = logging.getLogger(__name__)

# ─── Strategy Patterns ────────────────────────────────────────────────────────

# "1. What is ...  2) Why ..." up to the next numbered marker
NUMBERED_QUESTION_PATTERN = re.compile(r"(\d+[.)]\s*\D+?)(?=\d+[.)]|\Z)")

# Capitalized run ending in '?'
CAPITALIZED_QUESTION_PATTERN = re.compile(r"([A-Z][^.!?]*\?)")

# Start of a line up to its first '?'
LINE_QUESTION_PATTERN = re.compile(r"^([^\n]+?\?)", re.MULTILINE)

QUESTION_STRATEGIES = [
    NUMBERED_QUESTION_PATTERN,
    CAPITALIZED_QUESTION_PATTERN,
    LINE_QUESTION_PATTERN,
]

LEADING_NUMBER_PATTERN = re.compile(r"^\d+[.)]\s*")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Fallback split: blank lines, or right after each '?'
FALLBACK_SPLIT_PATTERN = re.compile(r"\n\s*\n|(?<=\?)")


def clean_question_text(text: str) -> str:
    """Trim, drop leading numbering and collapse whitespace."""
    cleaned = LEADING_NUMBER_PATTERN.sub("", text.strip())
    return WHITESPACE_PATTERN.sub(" ", cleaned).strip()


def is_valid_question(text: str) -> bool:
    """Loose check that a string reads like a question or prompt."""
    stripped = text.strip()
    return len(stripped) > MIN_QUESTION_LENGTH and (
        "?" in text or len(text) > 20
    )


def parse_plain_questions(text: str) -> list[Question]:
    """Extract numbered and '?'-terminated questions."""
    collector = QuestionCollector(ParseMode.QUESTIONS.prefix)

    for pattern in QUESTION_STRATEGIES:
        for match in pattern.finditer(text):
            collector.add(clean_question_text(match.group(1)))

    if not collector.questions:
        for fragment in FALLBACK_SPLIT_PATTERN.split(text):
            cleaned = clean_question_text(fragment)
            if "?" in cleaned:
                collector.add(cleaned)
        logger.debug(f"Fallback split produced {len(collector)} questions")

    return collector.questions
