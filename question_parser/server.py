"""
HTTP Microservice
=================
Flask-based HTTP API for the question parser engine.

Lets the OCR front end and the prompt builder call the parser as a
service instead of importing it.

Endpoints:
    POST   /api/parse         → Extract questions with one parse mode
    POST   /api/detect        → Auto-detect all content types
    GET    /api/modes         → Available parse modes
    GET    /api/health        → Health check
    GET    /api/info          → Parser version info
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from . import __version__
from .engine import ParserConfig, ParserEngine
from .models import ParseMode

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)


def create_app(config: dict = None) -> Flask:
    """Create and configure the Flask app."""
    if config:
        app.config.update(config)

    app.config.setdefault("OUTPUT_DIR", "output")
    app.config.setdefault("MAX_CONTENT_LENGTH", 5 * 1024 * 1024)  # 5MB
    app.config.setdefault("LOG_LEVEL", "INFO")

    return app


def _read_text_payload():
    """Return (text, error_response) from a JSON request body."""
    if not request.is_json:
        return None, (jsonify({"error": "Expected a JSON body"}), 400)

    data = request.get_json(silent=True) or {}
    text = data.get("text")
    if not isinstance(text, str):
        return None, (jsonify({"error": "'text' must be a string"}), 400)

    return text, None


def _run_engine(text: str, mode: str):
    config = ParserConfig(
        mode=mode,
        output_dir=app.config.get("OUTPUT_DIR", "output"),
        save_output=False,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
    )
    try:
        result = ParserEngine(config).parse_text(text, source_name="api")
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Parse request failed")
        return jsonify({"error": str(e)}), 500

    return jsonify(result.model_dump(mode="json")), 200


# ─── Health Check ─────────────────────────────────────────────────────────────


@app.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "question-parser",
        "version": __version__,
    })


@app.route("/api/info", methods=["GET"])
def info():
    """Parser version and capability info."""
    return jsonify({
        "version": __version__,
        "engine": "regex-heuristics",
        "capabilities": [mode.value for mode in ParseMode],
        "supported_formats": ["text/plain"],
    })


@app.route("/api/modes", methods=["GET"])
def modes():
    """List parse modes with display labels."""
    return jsonify([
        {
            "value": mode.value,
            "label": mode.label,
            "description": mode.description,
        }
        for mode in ParseMode
    ])


# ─── Parse Endpoints ──────────────────────────────────────────────────────────


@app.route("/api/parse", methods=["POST"])
def parse_text():
    """
    Extract questions from OCR text.

    JSON body:
        text: OCR output (required)
        mode: parse mode value (default: questions)
    """
    text, error = _read_text_payload()
    if error:
        return error

    mode = (request.get_json(silent=True) or {}).get(
        "mode", ParseMode.QUESTIONS.value
    )
    return _run_engine(text, mode)


@app.route("/api/detect", methods=["POST"])
def detect_text():
    """Auto-detect every content type in OCR text."""
    text, error = _read_text_payload()
    if error:
        return error

    return _run_engine(text, ParseMode.AUTO_DETECT.value)


# ─── Run Server ──────────────────────────────────────────────────────────────


def run_server(
    host: str = "0.0.0.0",
    port: int = 5000,
    debug: bool = False,
):
    """Start the microservice server."""
    create_app()
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_server(debug=True)
