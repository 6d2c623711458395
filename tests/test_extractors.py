"""
Test Suite for the Extraction Core
==================================
Unit tests for tokenizers, every mode extractor and the auto-detect
aggregator.
"""

from __future__ import annotations

import time

import pytest

from question_parser.detector import auto_detect_questions, parse_questions
from question_parser.graphic_organizer import parse_graphic_organizers
from question_parser.matching import parse_matching_tasks
from question_parser.models import (
    BLANK,
    DetectionResult,
    ParseMode,
    Question,
    ValidationReport,
)
from question_parser.ordering import parse_ordering_tasks
from question_parser.questions import (
    clean_question_text,
    is_valid_question,
    parse_plain_questions,
)
from question_parser.sentences import (
    create_fill_in_the_blank,
    parse_fill_in_the_blank,
    split_into_sentences,
)
from question_parser.tokenizers import (
    LETTERED_LINE_PATTERN,
    QuestionCollector,
    dedup_key,
    find_line_runs,
    split_cells,
    split_items,
    split_two_columns,
)

SAMPLE_TEXTS = [
    "Order: Apple, Banana, Cherry.",
    "Match: cat - animal, rose - flower",
    "1. What is photosynthesis? 2. What is respiration?",
    "The mitochondria is the powerhouse of the cell. "
    "The mitochondria is the powerhouse of the cell.",
    "Animal | Habitat | Diet\nLion | Savanna | \nShark | | Fish",
    "Mammals: dog, whale, cat\nBirds: x, y",
    "Caterpillar → Butterfly\nCaterpillar → Butterfly",
    "Put these in order: seed, sprout, flower.\n"
    "A. Plant the seed\nB. Water it daily\n"
    "What do plants need? What do plants need?",
    "- Plants\n    - roots absorb water\n    - roots absorb water",
]


def _texts(questions: list[Question]) -> list[str]:
    return [q.text for q in questions]


# ═══════════════════════════════════════════════════════════════════════════════
# MODEL TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestModels:
    """Test ParseMode and result models."""

    def test_mode_values(self):
        assert ParseMode("fill-in-the-blank") == ParseMode.FILL_IN_THE_BLANK
        assert ParseMode.GRAPHIC_ORGANIZER.value == "graphic-organizer"
        assert ParseMode.AUTO_DETECT.value == "auto-detect"

    def test_extractor_modes_scan_order(self):
        assert ParseMode.extractor_modes() == [
            ParseMode.QUESTIONS,
            ParseMode.FILL_IN_THE_BLANK,
            ParseMode.ORDERING,
            ParseMode.MATCHING,
            ParseMode.GRAPHIC_ORGANIZER,
        ]

    def test_mode_labels_and_prefixes(self):
        assert ParseMode.ORDERING.label == "Ordering Tasks"
        assert ParseMode.MATCHING.description == (
            "Extract matching pairs and connections"
        )
        assert ParseMode.QUESTIONS.prefix == "q"
        assert ParseMode.GRAPHIC_ORGANIZER.prefix == "graphic"
        assert ParseMode.AUTO_DETECT.prefix == "auto"

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            ParseMode("essay")

    def test_question_serialization(self):
        q = Question(id="q-1", text="What is photosynthesis?")
        assert q.model_dump() == {
            "id": "q-1",
            "text": "What is photosynthesis?",
        }

    def test_detection_result_serialization(self):
        result = DetectionResult(
            questions=[Question(id="auto-1", text="What is a cell?")],
            detected_types=[ParseMode.QUESTIONS],
        )
        data = result.model_dump(mode="json")
        assert data["detected_types"] == ["questions"]
        assert data["question_count"] == 1

    def test_validation_report_rate(self):
        assert ValidationReport().valid_rate == 0.0
        report = ValidationReport(
            total_questions=4,
            invalid_question_ids=["q-2"],
        )
        assert report.valid_rate == 75.0


# ═══════════════════════════════════════════════════════════════════════════════
# TOKENIZER TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestTokenizers:
    """Test shared line / row / column helpers."""

    def test_find_line_runs(self):
        lines = [
            "Steps",
            "A. Mix",
            "B. Bake",
            "note",
            "C. Lonely",
            "D. Serve",
            "E. Eat",
        ]
        runs = find_line_runs(lines, LETTERED_LINE_PATTERN)
        assert runs == [
            ["A. Mix", "B. Bake"],
            ["C. Lonely", "D. Serve", "E. Eat"],
        ]

    def test_find_line_runs_min_length(self):
        lines = ["A. Only", "text", "B. One"]
        assert find_line_runs(lines, LETTERED_LINE_PATTERN) == []

    def test_split_items(self):
        assert split_items("a, b;c\n d ,, ") == ["a", "b", "c", "d"]

    def test_split_cells(self):
        assert split_cells("| Name | Age |") == ["", "Name", "Age", ""]
        assert split_cells("| Name | Age |", keep_empty=False) == [
            "Name", "Age"
        ]

    def test_split_two_columns(self):
        assert split_two_columns("cat | animal") == ("cat", "animal")
        assert split_two_columns("a | b | c") is None
        assert split_two_columns("|animal") is None

    def test_dedup_key(self):
        assert dedup_key("  What IS it? ") == dedup_key("what is it?")


class TestQuestionCollector:
    """Test the per-call question accumulator."""

    def test_sequential_ids(self):
        collector = QuestionCollector("order")
        collector.add("Order the following: a, b")
        collector.add("Order the following: c, d")
        assert [q.id for q in collector.questions] == ["order-1", "order-2"]

    def test_rejects_short_text(self):
        collector = QuestionCollector("q")
        assert collector.add("Too short.") is False
        assert collector.add("Long enough?") is True
        assert len(collector) == 1

    def test_case_insensitive_dedup(self):
        collector = QuestionCollector("q")
        assert collector.add("What is a cell?")
        assert not collector.add("  WHAT IS A CELL?")
        assert _texts(collector.questions) == ["What is a cell?"]

    def test_explicit_ordinal(self):
        collector = QuestionCollector("fill")
        collector.add("Plants need ______ to grow .", ordinal=3)
        assert collector.questions[0].id == "fill-3"

    def test_new_section_keeps_numbering(self):
        collector = QuestionCollector("graphic")
        collector.add("Fill in the Name: ______")
        collector.new_section()
        assert collector.add("Fill in the Name: ______")
        assert [q.id for q in collector.questions] == [
            "graphic-1", "graphic-2"
        ]


# ═══════════════════════════════════════════════════════════════════════════════
# SENTENCE & FILL-IN-THE-BLANK TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestSentenceSplitter:
    """Test sentence splitting."""

    def test_keeps_terminal_punctuation(self):
        assert split_into_sentences("First sentence. Second one! Third?") == [
            "First sentence.",
            "Second one!",
            "Third?",
        ]

    def test_no_terminator(self):
        assert split_into_sentences("  no punctuation here ") == [
            "no punctuation here"
        ]

    def test_decimal_is_not_a_boundary(self):
        assert split_into_sentences("Version 1.5 is out. Yes") == [
            "Version 1.5 is out.",
            "Yes",
        ]

    def test_empty(self):
        assert split_into_sentences("") == []
        assert split_into_sentences("  \n ") == []


class TestFillInTheBlank:
    """Test blank word selection."""

    def test_mitochondria(self):
        result = create_fill_in_the_blank(
            "The mitochondria is the powerhouse of the cell."
        )
        assert result == "The mitochondria is the ______ of the cell ."
        assert result.count(BLANK) == 1

    def test_appends_period(self):
        result = create_fill_in_the_blank("Plants need sunlight to grow")
        assert result == "Plants need ______ to grow ."

    def test_first_candidate_wins(self):
        result = create_fill_in_the_blank(
            "Water and sunlight help green plants grow quickly."
        )
        assert result == "Water and ______ help green plants grow quickly ."

    def test_skips_numbers(self):
        result = create_fill_in_the_blank(
            "The year 1492 marks discovery of lands."
        )
        assert result == "The year 1492 ______ discovery of lands ."

    def test_middle_token_fallback(self):
        result = create_fill_in_the_blank("It is in the box of a cat.")
        assert result == "It is in the ______ of a cat ."

    def test_character_midpoint_fallback(self):
        result = create_fill_in_the_blank("Photosynthesis rocks.")
        assert result == "Photosynth ______esis rocks."

    def test_parse_skips_short_sentences(self):
        questions = parse_fill_in_the_blank(
            "Hi there. The mitochondria is the powerhouse of the cell."
        )
        assert len(questions) == 1
        assert questions[0].id == "fill-2"
        assert BLANK in questions[0].text

    def test_parse_suppresses_duplicates(self):
        questions = parse_fill_in_the_blank(
            "Plants need sunlight to grow. Plants need sunlight to grow."
        )
        assert _texts(questions) == ["Plants need ______ to grow ."]


# ═══════════════════════════════════════════════════════════════════════════════
# ORDERING TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestOrderingExtractor:
    """Test ordering cue phrases and lettered lists."""

    def test_order_cue(self):
        questions = parse_ordering_tasks("Order: Apple, Banana, Cherry.")
        assert len(questions) == 1
        assert questions[0].id == "order-1"
        assert questions[0].text == "Order the following: Apple, Banana, Cherry"

    def test_overlapping_cues_emit_once(self):
        questions = parse_ordering_tasks(
            "Put these in order: seed, sprout, flower."
        )
        assert _texts(questions) == [
            "Order the following: seed, sprout, flower"
        ]

    def test_single_item_skipped(self):
        assert parse_ordering_tasks("Sort: apples only.") == []

    def test_short_run_skipped(self):
        assert parse_ordering_tasks("Order: a, b") == []

    def test_lettered_list(self):
        questions = parse_ordering_tasks(
            "A. Mix the flour\nB. Add the eggs\nC. Bake the cake"
        )
        assert _texts(questions) == [
            "Order the following: Mix the flour, Add the eggs, Bake the cake"
        ]

    def test_cue_before_lettered_list(self):
        questions = parse_ordering_tasks(
            "Arrange: first, second, third.\n"
            "A. Wake up\n"
            "B. Eat breakfast"
        )
        assert [q.id for q in questions] == ["order-1", "order-2"]
        assert _texts(questions) == [
            "Order the following: first, second, third",
            "Order the following: Wake up, Eat breakfast",
        ]

    def test_single_lettered_line(self):
        assert parse_ordering_tasks("A. Only one line") == []


# ═══════════════════════════════════════════════════════════════════════════════
# MATCHING TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestMatchingExtractor:
    """Test matching cue phrases and two-column tables."""

    def test_match_cue(self):
        questions = parse_matching_tasks("Match: cat - animal, rose - flower")
        assert len(questions) == 1
        assert questions[0].id == "match-1"
        assert questions[0].text == (
            "Match the following: cat - animal, rose - flower"
        )

    def test_equals_separator(self):
        questions = parse_matching_tasks(
            "Connect the pairs: H2O = water; NaCl = salt"
        )
        assert _texts(questions) == [
            "Match the following: H2O - water, NaCl - salt"
        ]

    def test_unpaired_segments_kept(self):
        questions = parse_matching_tasks(
            "Match these words: apple, banana, kiwi"
        )
        assert _texts(questions) == [
            "Match the following: apple, banana, kiwi"
        ]

    def test_two_column_table(self):
        questions = parse_matching_tasks("cat | animal\nrose | flower")
        assert _texts(questions) == [
            "Match the following: cat - animal, rose - flower"
        ]

    def test_cue_before_table(self):
        questions = parse_matching_tasks(
            "Match: cat - animal, rose - flower\n"
            "sun | star\n"
            "moon | satellite"
        )
        assert _texts(questions) == [
            "Match the following: cat - animal, rose - flower",
            "Match the following: sun - star, moon - satellite",
        ]
        assert [q.id for q in questions] == ["match-1", "match-2"]

    def test_row_with_empty_side_passes_through(self):
        questions = parse_matching_tasks("cat | animal\nrose | ")
        assert _texts(questions) == [
            "Match the following: cat - animal, rose |"
        ]

    def test_single_row_skipped(self):
        assert parse_matching_tasks("cat | animal") == []

    def test_three_columns_are_not_pairs(self):
        assert parse_matching_tasks("a | b | c\nd | e | f") == []


# ═══════════════════════════════════════════════════════════════════════════════
# GRAPHIC ORGANIZER TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestGraphicOrganizerExtractor:
    """Test the four graphic-organizer sub-detectors."""

    def test_table_gaps_with_context(self):
        text = "Animal | Habitat | Diet\nLion | Savanna | \nShark | | Fish"
        questions = parse_graphic_organizers(text)
        assert _texts(questions) == [
            "In the Diet row, given Animal: Lion, Habitat: Savanna, "
            "fill in: Diet = ______",
            "In the Habitat row, given Animal: Shark, Diet: Fish, "
            "fill in: Habitat = ______",
        ]
        assert [q.id for q in questions] == ["graphic-1", "graphic-2"]

    def test_table_gaps_without_context(self):
        questions = parse_graphic_organizers("Name | Age\nAl | 7")
        assert _texts(questions) == [
            "Fill in the Name: ______",
            "Fill in the Age: ______",
        ]

    def test_labeled_categories_overlap_with_connections(self):
        questions = parse_graphic_organizers("Planets: Mercury, Venus, x")
        assert _texts(questions) == [
            "Planets: Mercury (complete or identify)",
            "Planets: Venus (complete or identify)",
            "Under Planets, fill in: ______",
            "Complete the connection: Planets → ______",
            "Complete the connection: ______ → Mercury, Venus, x",
        ]
        assert questions[-1].id == "graphic-5"

    def test_placeholder_items_emit_once(self):
        questions = parse_graphic_organizers("Mammals: dog, whale, cat")
        labeled = [q for q in questions if q.text.startswith("Under")]
        assert _texts(labeled) == ["Under Mammals, fill in: ______"]

    def test_bullet_hierarchy(self):
        text = "\n".join([
            "- Plants",
            "    - roots absorb water",
            "    - leaves make food",
            "- Animals",
            "    - fish swim",
        ])
        questions = parse_graphic_organizers(text)
        assert _texts(questions) == [
            "Complete: Plants - ______ absorb water",
            "Complete: Plants - ______ make food",
            "Complete: Animals - ______ swim",
        ]

    def test_bullets_without_category(self):
        questions = parse_graphic_organizers(
            "    - roots absorb water\n    - leaves make food"
        )
        assert _texts(questions) == [
            "Fill in: ______ absorb water",
            "Fill in: ______ make food",
        ]

    def test_connection_emits_both_sides(self):
        questions = parse_graphic_organizers("Caterpillar → Butterfly")
        assert _texts(questions) == [
            "Complete the connection: Caterpillar → ______",
            "Complete the connection: ______ → Butterfly",
        ]

    def test_short_connection_sides_skipped(self):
        assert parse_graphic_organizers("ab - cd") == []

    def test_connection_after_leading_punctuation(self):
        questions = parse_graphic_organizers("  1) Sun → Energy")
        assert _texts(questions) == [
            "Complete the connection: Sun → ______",
            "Complete the connection: ______ → Energy",
        ]

    def test_long_line_without_separators(self):
        text = "word " * 4000

        start = time.perf_counter()
        questions = parse_graphic_organizers(text)
        elapsed = time.perf_counter() - start

        assert questions == []
        assert elapsed < 1.0


# ═══════════════════════════════════════════════════════════════════════════════
# PLAIN QUESTION TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestPlainQuestionExtractor:
    """Test numbered, capitalized and line-based question strategies."""

    def test_numbered_questions(self):
        questions = parse_plain_questions(
            "1. What is photosynthesis? 2. What is respiration?"
        )
        assert _texts(questions) == [
            "What is photosynthesis?",
            "What is respiration?",
        ]
        assert [q.id for q in questions] == ["q-1", "q-2"]

    def test_numbered_with_parenthesis(self):
        questions = parse_plain_questions(
            "1) Name the planets in order 2) Describe the sun"
        )
        assert _texts(questions) == [
            "Name the planets in order",
            "Describe the sun",
        ]

    def test_capitalized_then_line_strategy(self):
        questions = parse_plain_questions(
            "Read the passage. Why do leaves fall? Explain."
        )
        assert _texts(questions) == [
            "Why do leaves fall?",
            "Read the passage. Why do leaves fall?",
        ]

    def test_lowercase_lines(self):
        questions = parse_plain_questions(
            "how does rain form?\nwhere do rivers go?"
        )
        assert _texts(questions) == [
            "how does rain form?",
            "where do rivers go?",
        ]

    def test_case_insensitive_dedup(self):
        questions = parse_plain_questions("What is a cell?\nWHAT IS A CELL?")
        assert _texts(questions) == ["What is a cell?"]

    def test_short_questions_discarded(self):
        assert parse_plain_questions("Why?") == []

    def test_fallback_split(self):
        questions = parse_plain_questions("the big\nred fox?")
        assert _texts(questions) == ["the big red fox?"]

    def test_clean_question_text(self):
        assert clean_question_text("  12.   What   is\n it? ") == "What is it?"

    def test_is_valid_question(self):
        assert is_valid_question("What is it?")
        assert not is_valid_question("Short one")
        assert is_valid_question("This statement is long enough to pass")
        assert not is_valid_question("   ")


# ═══════════════════════════════════════════════════════════════════════════════
# DETECTOR TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestParseQuestions:
    """Test single-mode dispatch."""

    @pytest.mark.parametrize("mode", list(ParseMode))
    @pytest.mark.parametrize("text", ["", "   ", "\n\n\t"])
    def test_empty_input(self, mode, text):
        assert parse_questions(text, mode) == []

    def test_accepts_mode_strings(self):
        questions = parse_questions("Order: Apple, Banana, Cherry.", "ordering")
        assert questions[0].id == "order-1"

    def test_default_mode_is_questions(self):
        questions = parse_questions(
            "1. What is photosynthesis? 2. What is respiration?"
        )
        assert len(questions) == 2
        assert all("?" in q.text for q in questions)

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            parse_questions("Order: Apple, Banana, Cherry.", "essay")

    def test_auto_detect_mode(self):
        text = "Order: Apple, Banana, Cherry."
        assert parse_questions(text, ParseMode.AUTO_DETECT) == (
            auto_detect_questions(text).questions
        )

    @pytest.mark.parametrize("mode", list(ParseMode))
    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_texts_are_unique_and_long(self, mode, text):
        questions = parse_questions(text, mode)
        keys = [q.text.strip().casefold() for q in questions]
        assert len(keys) == len(set(keys))
        assert all(len(q.text.strip()) > 10 for q in questions)

    @pytest.mark.parametrize("mode", list(ParseMode))
    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_deterministic(self, mode, text):
        first = parse_questions(text, mode)
        second = parse_questions(text, mode)
        assert [q.model_dump() for q in first] == [
            q.model_dump() for q in second
        ]

    @pytest.mark.parametrize("mode", list(ParseMode))
    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    @pytest.mark.parametrize("reflow", [
        lambda text: text + "   \n",
        lambda text: "\n\n" + text,
        lambda text: text.replace(": ", ":\t"),
    ], ids=["trailing", "leading", "tab-after-colon"])
    def test_count_ignores_unrelated_whitespace(self, mode, text, reflow):
        assert len(parse_questions(reflow(text), mode)) == len(
            parse_questions(text, mode)
        )


class TestAutoDetect:
    """Test the auto-detect aggregator."""

    COMPOSITE = "\n".join([
        "1. What is photosynthesis?",
        "Put these in order: seed, sprout, flower.",
        "Plant | Color",
        "Rose | ",
    ])

    def test_empty_input(self):
        result = auto_detect_questions("")
        assert result.questions == []
        assert result.detected_types == []

    def test_composite_detection(self):
        result = auto_detect_questions(self.COMPOSITE)
        for mode in (
            ParseMode.QUESTIONS,
            ParseMode.ORDERING,
            ParseMode.GRAPHIC_ORGANIZER,
        ):
            assert mode in result.detected_types
        assert ParseMode.AUTO_DETECT not in result.detected_types

        keys = [q.text.strip().casefold() for q in result.questions]
        assert len(keys) == len(set(keys))
        assert (
            "In the Color row, given Plant: Rose, fill in: Color = ______"
            in _texts(result.questions)
        )

    def test_detected_types_follow_scan_order(self):
        result = auto_detect_questions(self.COMPOSITE)
        order = ParseMode.extractor_modes()
        indexes = [order.index(mode) for mode in result.detected_types]
        assert indexes == sorted(indexes)

    def test_sequential_auto_ids(self):
        result = auto_detect_questions(self.COMPOSITE)
        assert [q.id for q in result.questions] == [
            f"auto-{i}" for i in range(1, len(result.questions) + 1)
        ]

    @pytest.mark.parametrize("text", SAMPLE_TEXTS + [COMPOSITE])
    def test_merge_matches_single_modes(self, text):
        expected = []
        seen = set()
        expected_types = []
        for mode in ParseMode.extractor_modes():
            questions = parse_questions(text, mode)
            if questions:
                expected_types.append(mode)
            for q in questions:
                key = q.text.strip().casefold()
                if key not in seen:
                    seen.add(key)
                    expected.append(q.text)

        result = auto_detect_questions(text)
        assert _texts(result.questions) == expected
        assert result.detected_types == expected_types

    def test_earlier_mode_wins(self):
        result = auto_detect_questions("Order: Apple, Banana, Cherry.")
        ordering = parse_ordering_tasks("Order: Apple, Banana, Cherry.")
        assert ParseMode.ORDERING in result.detected_types
        assert ordering[0].text in _texts(result.questions)
