"""Line grammar, question counting and parsing of generated quiz text."""

from .grammar import RULES, GrammarContext, GrammarMatch, LineRule, prepare_lines, scan, strip_label
from .parser import parse, parse_flashcards
from .validator import count_questions, expected_counts, validate

__all__ = [
    "RULES",
    "GrammarContext",
    "GrammarMatch",
    "LineRule",
    "prepare_lines",
    "scan",
    "strip_label",
    "parse",
    "parse_flashcards",
    "count_questions",
    "expected_counts",
    "validate",
]
