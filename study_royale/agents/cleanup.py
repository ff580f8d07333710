"""Strip boilerplate models wrap around generated questions."""

import re

from study_royale.models.quiz import QuestionType
from study_royale.parsing.grammar import is_matching_header

INTRO_RE = re.compile(r"^(Here are|Here's|Below are|I've generated).*?:\s*", re.I)
FILL_INTRO_RE = re.compile(
    r"^(Here are|Here's|Below are|I've|This is|Generate).*?:[ \t]*\n?", re.I | re.M
)
SECTION_HEADER_RE = re.compile(
    r"^(Case Study|Multiple Choice|True/False|Identification|Odd One Out|Enumeration|"
    r"Matching|Association|Flashcard|Fill|Except)[^|\n]*\n",
    re.I | re.M,
)
MATCHING_HEADER_LINE = "Column A | Column B"


def clean_primary_output(text: str) -> str:
    """Drop a leading "Here are ..." sentence."""
    return INTRO_RE.sub("", text.strip(), count=1).strip()


def clean_fill_output(text: str, question_type: QuestionType) -> str:
    """
    Aggressive cleanup for gap-filling output.

    Removes intro sentences and section-header lines anywhere in the text and
    makes sure matching output starts with the column header.
    """
    cleaned = FILL_INTRO_RE.sub("", text.strip() + "\n")
    cleaned = SECTION_HEADER_RE.sub("", cleaned).strip()
    if question_type == QuestionType.MATCHING and cleaned and not is_matching_header(cleaned):
        cleaned = f"{MATCHING_HEADER_LINE}\n{cleaned}"
    return cleaned
