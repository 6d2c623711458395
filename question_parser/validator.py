"""
Validation Engine
=================
Post-extraction validation and reporting.

After extracting questions from a text, generates a report:
    - Total / Unique Questions
    - Duplicate Texts (case-insensitive)
    - Questions At Or Below The Minimum Length
    - Questions Failing The "reads like a question" Heuristic
    - Breakdown by id prefix (extractor)
"""

from __future__ import annotations

import logging
from collections import Counter

from .models import MIN_QUESTION_LENGTH, Question, ValidationReport
from .questions import is_valid_question
from .tokenizers import dedup_key

logger = logging.getLogger(__name__)


class ValidationEngine:
    """
    Validates extracted questions and produces a report.
    """

    def validate(
        self,
        questions: list[Question],
    ) -> ValidationReport:
        """
        Run full validation on extracted questions.

        Args:
            questions: List of questions to validate.

        Returns:
            ValidationReport with all detected issues.
        """
        report = ValidationReport()

        if not questions:
            logger.warning("No questions to validate")
            return report

        report.total_questions = len(questions)

        key_counts = Counter(dedup_key(q.text) for q in questions)
        report.unique_questions = len(key_counts)

        seen_duplicates: set[str] = set()
        prefix_counts: dict[str, int] = {}

        for q in questions:
            key = dedup_key(q.text)
            if key_counts[key] > 1 and key not in seen_duplicates:
                seen_duplicates.add(key)
                report.duplicate_texts.append(q.text.strip())

            if len(q.text.strip()) <= MIN_QUESTION_LENGTH:
                report.short_question_ids.append(q.id)

            if not is_valid_question(q.text):
                report.invalid_question_ids.append(q.id)

            prefix = q.id.rsplit("-", 1)[0]
            prefix_counts[prefix] = prefix_counts.get(prefix, 0) + 1

        report.prefix_breakdown = prefix_counts

        # Log summary
        logger.info("=" * 60)
        logger.info("VALIDATION REPORT")
        logger.info("=" * 60)
        logger.info(f"Total Questions: {report.total_questions}")
        logger.info(f"Unique Questions: {report.unique_questions}")
        logger.info(f"Duplicate Texts: {len(report.duplicate_texts)}")
        logger.info(f"Too Short: {len(report.short_question_ids)}")
        logger.info(
            f"Invalid Questions: {len(report.invalid_question_ids)} "
            f"(valid rate {report.valid_rate}%)"
        )

        if report.prefix_breakdown:
            logger.info("Prefix Breakdown:")
            for prefix, count in sorted(report.prefix_breakdown.items()):
                logger.info(f"  • {prefix}: {count}")

        logger.info("=" * 60)

        return report
