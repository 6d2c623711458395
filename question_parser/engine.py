"""
Question Parser Engine
======================
Main orchestrator that combines mode detection, validation and output
formatting into a complete OCR-text parsing pipeline.

Usage:
    engine = ParserEngine(config)
    result = engine.parse_file("path/to/page.txt")
    # result is a ParseResult with structured JSON output

Architecture:
    OCR text → Detector (one mode or auto-detect) → Questions →
    ValidationEngine → ParseResult (JSON)
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from . import __version__
from .detector import auto_detect_questions, parse_questions
from .models import (
    ParseMode,
    ParseResult,
    ParseVersion,
    SourceMetadata,
)
from .validator import ValidationEngine

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ParserConfig:
    """Configuration for the parser engine."""

    # Extraction
    mode: Union[ParseMode, str] = ParseMode.AUTO_DETECT

    # Output settings
    output_dir: str = "output"
    save_output: bool = True
    source_name: str = ""

    # Input
    encoding: str = "utf-8"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


class ParserEngine:
    """
    Main OCR-text parsing engine.

    Orchestrates the full pipeline:
        1. Extraction (single mode or auto-detect)
        2. Validation
        3. Output formatting

    Holds no per-call state; one engine may parse many texts.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.mode = ParseMode(self.config.mode)
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        # Configure root logger for the package
        package_logger = logging.getLogger("question_parser")
        package_logger.setLevel(log_level)

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(console)

        # File handler
        if self.config.log_file:
            log_dir = Path(self.config.log_file).parent
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                self.config.log_file, encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(file_handler)

    def parse_text(self, text: str, source_name: str = "") -> ParseResult:
        """
        Parse OCR text into structured questions.

        Args:
            text: Raw OCR output.
            source_name: Label stored in the result metadata.

        Returns:
            ParseResult containing questions, detected types and validation.
        """
        start_time = time.time()
        name = source_name or self.config.source_name

        # ── Step 1: Extraction ────────────────────────────────────────
        logger.info(f"Phase 1: Extraction ({self.mode.value})")
        if self.mode == ParseMode.AUTO_DETECT:
            detection = auto_detect_questions(text)
            questions = detection.questions
            detected_types = detection.detected_types
        else:
            questions = parse_questions(text, self.mode)
            detected_types = [self.mode] if questions else []

        # ── Step 2: Validation ────────────────────────────────────────
        logger.info("Phase 2: Validation")
        validation = ValidationEngine().validate(questions)

        # ── Step 3: Build result ──────────────────────────────────────
        result = ParseResult(
            source=SourceMetadata.from_text(text, name=name),
            parse_version=ParseVersion(
                parser_version=__version__,
                mode=self.mode,
                question_count=len(questions),
            ),
            questions=questions,
            detected_types=detected_types,
            validation=validation,
        )

        elapsed = time.time() - start_time
        logger.info(
            f"Parse complete in {elapsed:.3f}s — "
            f"{len(questions)} questions extracted"
        )

        return result

    def parse_file(self, text_path: str) -> ParseResult:
        """
        Parse an OCR text file and optionally save the JSON result.

        Raises:
            FileNotFoundError: If the text file doesn't exist.
        """
        text_path = os.path.abspath(text_path)

        if not os.path.exists(text_path):
            raise FileNotFoundError(f"Text file not found: {text_path}")

        logger.info(f"Starting parse of: {text_path}")
        with open(text_path, "r", encoding=self.config.encoding) as f:
            text = f.read()

        result = self.parse_text(
            text,
            source_name=self.config.source_name or os.path.basename(text_path),
        )

        if self.config.save_output:
            output_dir = Path(self.config.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            output_file = output_dir / f"{self._generate_output_id(text_path)}_parsed.json"
            self._save_json(result, output_file)

        return result

    def _generate_output_id(self, text_path: str) -> str:
        """Filesystem-safe id derived from the input file name."""
        name = Path(text_path).stem
        clean_name = "".join(
            c if c.isalnum() or c in "-_" else "_"
            for c in name
        )
        return clean_name[:50]

    def _save_json(self, result: ParseResult, filepath: Path):
        """Save ParseResult to JSON file."""
        try:
            data = result.model_dump(mode="json")
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.info(f"Saved JSON output: {filepath}")
        except OSError as e:
            logger.error(f"Failed to save JSON: {e}")
