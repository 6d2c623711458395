"""
Module entry point for: python -m question_parser

Allows running the parser directly as a module:
    python -m question_parser parse <text_path> [options]
    python -m question_parser detect <text_path>
    python -m question_parser serve [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
