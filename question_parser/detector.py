"""
Mode Detector
=============
Dispatches OCR text to the extractor for one ParseMode, or runs all of
them and merges the results (auto-detect).

Usage:
    questions = parse_questions(text, ParseMode.ORDERING)
    result = auto_detect_questions(text)
    result.detected_types  # [ParseMode.QUESTIONS, ParseMode.ORDERING, ...]
"""

from __future__ import annotations

import logging
from typing import Callable, Union

from .graphic_organizer import parse_graphic_organizers
from .matching import parse_matching_tasks
from .models import DetectionResult, ParseMode, Question
from .ordering import parse_ordering_tasks
from .questions import parse_plain_questions
from .sentences import parse_fill_in_the_blank
from .tokenizers import QuestionCollector

logger = logging.getLogger(__name__)

EXTRACTORS: dict[ParseMode, Callable[[str], list[Question]]] = {
    ParseMode.QUESTIONS: parse_plain_questions,
    ParseMode.FILL_IN_THE_BLANK: parse_fill_in_the_blank,
    ParseMode.ORDERING: parse_ordering_tasks,
    ParseMode.MATCHING: parse_matching_tasks,
    ParseMode.GRAPHIC_ORGANIZER: parse_graphic_organizers,
}


def parse_questions(
    text: str,
    mode: Union[ParseMode, str] = ParseMode.QUESTIONS,
) -> list[Question]:
    """
    Extract questions from OCR text with a single parse mode.

    Args:
        text: Raw OCR output. May be empty or malformed.
        mode: ParseMode or its string value. ``auto-detect`` returns the
            merged question list of all extractors.

    Returns:
        Ordered list of questions; empty when nothing was recognized.

    Raises:
        ValueError: If ``mode`` is not a known parse mode.
    """
    mode = ParseMode(mode)

    if not text.strip():
        return []

    if mode == ParseMode.AUTO_DETECT:
        return auto_detect_questions(text).questions

    questions = EXTRACTORS[mode](text)
    logger.debug(f"{mode.value}: {len(questions)} questions")
    return questions


def auto_detect_questions(text: str) -> DetectionResult:
    """
    Run every extractor in scan order and merge their questions.

    A mode counts as detected when its extractor returns at least one
    question. Merged questions are renumbered ``auto-<n>``; a text already
    produced by an earlier mode suppresses later copies.
    """
    if not text.strip():
        return DetectionResult()

    collector = QuestionCollector(ParseMode.AUTO_DETECT.prefix)
    detected_types: list[ParseMode] = []

    for mode in ParseMode.extractor_modes():
        questions = EXTRACTORS[mode](text)
        if not questions:
            continue

        detected_types.append(mode)
        for question in questions:
            collector.add(question.text)

    logger.info(
        f"Auto-detect found {len(collector)} questions "
        f"({', '.join(m.value for m in detected_types) or 'no types'})"
    )

    return DetectionResult(
        questions=collector.questions,
        detected_types=detected_types,
    )
