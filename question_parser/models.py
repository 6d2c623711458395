"""
Data Models
===========
Pydantic models for question extraction output.
All models are serializable to JSON for downstream prompt builders.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, computed_field

# Blank marker inserted in place of a removed word.
BLANK = "______"

# Candidates at or below this many characters are discarded.
MIN_QUESTION_LENGTH = 10


# ─── Enums ────────────────────────────────────────────────────────────────────


class ParseMode(str, Enum):
    """Content-type strategy selecting which extractor(s) run."""
    QUESTIONS = "questions"
    FILL_IN_THE_BLANK = "fill-in-the-blank"
    ORDERING = "ordering"
    MATCHING = "matching"
    GRAPHIC_ORGANIZER = "graphic-organizer"
    AUTO_DETECT = "auto-detect"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self][0]

    @property
    def description(self) -> str:
        return _MODE_LABELS[self][1]

    @property
    def prefix(self) -> str:
        """Id prefix of the questions this mode produces."""
        return _MODE_PREFIXES[self]

    @classmethod
    def extractor_modes(cls) -> list[ParseMode]:
        """The five extractor modes in auto-detect scan order."""
        return [
            cls.QUESTIONS,
            cls.FILL_IN_THE_BLANK,
            cls.ORDERING,
            cls.MATCHING,
            cls.GRAPHIC_ORGANIZER,
        ]


_MODE_LABELS = {
    ParseMode.QUESTIONS: (
        "Questions", "Extract numbered or listed questions"),
    ParseMode.FILL_IN_THE_BLANK: (
        "Fill-in-the-Blank", "Create blanks from paragraph sentences"),
    ParseMode.ORDERING: (
        "Ordering Tasks", "Parse sequencing and ordering activities"),
    ParseMode.MATCHING: (
        "Matching Tasks", "Extract matching pairs and connections"),
    ParseMode.GRAPHIC_ORGANIZER: (
        "Graphic Organizer", "Parse tables, diagrams, and structured data"),
    ParseMode.AUTO_DETECT: (
        "Auto-Detect", "Run every extractor and merge the results"),
}

_MODE_PREFIXES = {
    ParseMode.QUESTIONS: "q",
    ParseMode.FILL_IN_THE_BLANK: "fill",
    ParseMode.ORDERING: "order",
    ParseMode.MATCHING: "match",
    ParseMode.GRAPHIC_ORGANIZER: "graphic",
    ParseMode.AUTO_DETECT: "auto",
}


# ─── Question Models ──────────────────────────────────────────────────────────


class Question(BaseModel):
    """
    A single extracted question.
    The id is only unique within one extraction call.
    """
    id: str = Field(
        description="Display key of the form <prefix>-<ordinal>"
    )
    text: str = Field(
        description="Prompt, question or task text"
    )


class DetectionResult(BaseModel):
    """Merged output of the auto-detect aggregator."""
    questions: list[Question] = Field(default_factory=list)
    detected_types: list[ParseMode] = Field(default_factory=list)

    @computed_field
    @property
    def question_count(self) -> int:
        return len(self.questions)


# ─── Report / Parse Result Models ─────────────────────────────────────────────


class ValidationReport(BaseModel):
    """Post-extraction validation report."""
    total_questions: int = 0
    unique_questions: int = 0
    duplicate_texts: list[str] = Field(default_factory=list)
    short_question_ids: list[str] = Field(default_factory=list)
    invalid_question_ids: list[str] = Field(default_factory=list)
    prefix_breakdown: dict[str, int] = Field(default_factory=dict)

    @computed_field
    @property
    def valid_rate(self) -> float:
        if self.total_questions == 0:
            return 0.0
        valid = self.total_questions - len(self.invalid_question_ids)
        return round(valid / self.total_questions * 100, 2)


class SourceMetadata(BaseModel):
    """Metadata about the OCR text that was parsed."""
    name: str = ""
    char_count: int = 0
    line_count: int = 0
    text_hash: str = ""

    @classmethod
    def from_text(cls, text: str, name: str = "") -> SourceMetadata:
        return cls(
            name=name,
            char_count=len(text),
            line_count=len(text.splitlines()),
            text_hash=hashlib.sha256(text.encode("utf-8")).hexdigest(),
        )


class ParseVersion(BaseModel):
    """Version tracking for a parse run."""
    parser_version: str = "1.0.0"
    parse_timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    mode: ParseMode = ParseMode.AUTO_DETECT
    question_count: int = 0


class ParseResult(BaseModel):
    """
    Complete output of a parse run.
    This is the top-level JSON structure written to disk and returned
    by the HTTP service.
    """
    source: SourceMetadata
    parse_version: ParseVersion
    questions: list[Question] = Field(default_factory=list)
    detected_types: list[ParseMode] = Field(default_factory=list)
    validation: ValidationReport = Field(
        default_factory=ValidationReport
    )
