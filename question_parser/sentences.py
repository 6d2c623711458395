"""
Sentences & Fill-in-the-Blank
=============================
Sentence splitting and single-blank cloze generation.

The blank is chosen by position, not by meaning: the first content-looking
word in the middle of the sentence wins.
"""

from __future__ import annotations

import logging
import re

from .models import BLANK, MIN_QUESTION_LENGTH, ParseMode, Question
from .tokenizers import QuestionCollector

logger = logging.getLogger(__name__)

# Split point: sentence terminator followed by whitespace
SENTENCE_BOUNDARY_PATTERN = re.compile(r"(?<=[.!?])\s+")

TERMINAL_PUNCTUATION_PATTERN = re.compile(r"[.!?]$")

# Words and standalone punctuation marks
TOKEN_PATTERN = re.compile(r"\b\w+\b|[^\w\s]")

ALPHA_WORD_PATTERN = re.compile(r"[A-Za-z]+")

# Articles, prepositions, auxiliaries, demonstratives and pronouns
SKIP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "are", "was", "were", "be",
    "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "this", "that", "these",
    "those", "it", "its", "they", "them", "their",
})


def split_into_sentences(text: str) -> list[str]:
    """
    Split text on '.', '!' or '?' followed by whitespace.

    The terminator stays on the preceding sentence. Text without any
    terminator comes back as a single sentence.
    """
    return [
        sentence.strip()
        for sentence in SENTENCE_BOUNDARY_PATTERN.split(text)
        if sentence.strip()
    ]


def _is_blank_candidate(token: str) -> bool:
    return (
        len(token) > 3
        and token.lower() not in SKIP_WORDS
        and ALPHA_WORD_PATTERN.fullmatch(token) is not None
    )


def create_fill_in_the_blank(sentence: str) -> str:
    """
    Replace one word of ``sentence`` with the blank marker.

    Tokens are rejoined with single spaces, so punctuation ends up
    space-separated ("... of the cell .").
    """
    cleaned = sentence.strip()
    if not TERMINAL_PUNCTUATION_PATTERN.search(cleaned):
        cleaned += "."

    tokens = TOKEN_PATTERN.findall(cleaned)
    count = len(tokens)

    blank_index = -1
    start = max(2, int(count * 0.2))
    end = min(count - 2, int(count * 0.8))

    for i in range(start, end):
        if _is_blank_candidate(tokens[i]):
            blank_index = i
            break

    if blank_index == -1 and count > 4:
        blank_index = count // 2

    if 0 <= blank_index < count:
        before = " ".join(tokens[:blank_index])
        after = " ".join(tokens[blank_index + 1:])
        return f"{before} {BLANK} {after}"

    # Too short to pick a word: split the raw string in half
    midpoint = len(cleaned) // 2
    return f"{cleaned[:midpoint]} {BLANK}{cleaned[midpoint:]}"


def parse_fill_in_the_blank(text: str) -> list[Question]:
    """
    One fill-in-the-blank question per sentence longer than 10 characters.

    Ids carry the 1-based index of the source sentence.
    """
    collector = QuestionCollector(ParseMode.FILL_IN_THE_BLANK.prefix)

    for index, sentence in enumerate(split_into_sentences(text)):
        if len(sentence) <= MIN_QUESTION_LENGTH:
            continue
        collector.add(create_fill_in_the_blank(sentence), ordinal=index + 1)

    logger.debug(f"Fill-in-the-blank produced {len(collector)} questions")
    return collector.questions
