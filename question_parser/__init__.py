"""
Question Parser Engine
======================
Heuristic extraction of classroom questions from raw OCR text of
photographed textbook pages.

Architecture:
    - Tokenizers: Shared line / row / column splitting and per-call dedup
    - Sentences: Sentence splitting and fill-in-the-blank generation
    - Extractors: Ordering, matching, graphic-organizer and plain questions
    - Detector: Mode dispatch and the auto-detect aggregator
    - Validator: Post-extraction quality report
    - Engine: Logging, file input and JSON output around the core

Version: 1.0.0
"""

__version__ = "1.0.0"

from .detector import auto_detect_questions, parse_questions  # noqa: E402
from .models import DetectionResult, ParseMode, Question  # noqa: E402
from .questions import is_valid_question  # noqa: E402
from .sentences import (  # noqa: E402
    create_fill_in_the_blank,
    split_into_sentences,
)

__all__ = [
    "__version__",
    "DetectionResult",
    "ParseMode",
    "Question",
    "auto_detect_questions",
    "create_fill_in_the_blank",
    "is_valid_question",
    "parse_questions",
    "split_into_sentences",
]
