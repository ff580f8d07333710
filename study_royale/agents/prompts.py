"""Prompt templates for question generation and gap filling."""

from study_royale.models.quiz import QuestionType, TrueFalseVariant

DEFAULT_SOURCE_CHAR_LIMIT = 3000
DEFAULT_FILL_CHAR_LIMIT = 2500

# Line formats each type must be written in. Placeholders are filled per call.
FORMATS = {
    QuestionType.IDENTIFICATION: """Q: [question]
A: [1-3 word answer]""",
    QuestionType.MULTIPLE_CHOICE: """Q: [question]
A) [option]
B) [option]
C) [option]
D) [option]
Correct: [A/B/C/D]""",
    QuestionType.TRUE_FALSE: """Statement: [statement]
Answer: [True/False]
Explanation: [brief reason]""",
    QuestionType.TRUE_FALSE_CONDITIONAL: """Statement: [which of the following statements is/are true?]
I. [first statement]
II. [second statement]
A) Only I is true
B) Only II is true
C) Both I and II are true
D) Neither I nor II is true
Correct: [A/B/C/D]""",
    QuestionType.FLASHCARD: """Front: [term or question]
Back: [definition or answer]""",
    QuestionType.ENUMERATION: """Q: [question asking to list items]
A: 1. [item], 2. [item], 3. [item]""",
    QuestionType.MATCHING: """Column A | Column B
[term 1] | [definition 1]
[term 2] | [definition 2]
[term 3] | [definition 3]""",
    QuestionType.ASSOCIATION: """Statement: [characteristic or description]
I. [first item]
II. [second item]
A) If "I" is associated
B) If "II" is associated
C) If both are associated
D) Neither are associated
Correct: [A/B/C/D]""",
    QuestionType.CASE_STUDY: """Scenario: [2-4 sentence situation]
Question: [what should be done or analysed?]
ModelAnswer: [2-3 sentence answer]""",
    QuestionType.ODD_ONE_OUT: """Q: Which is the odd one out?
A) [item]
B) [item]
C) [item]
D) [item]
Correct: [A/B/C/D]""",
    QuestionType.EXCEPT_QUESTIONS: """Q: All of the following are [category] EXCEPT:
A) [option]
B) [option]
C) [option]
D) [option]
Correct: [A/B/C/D]""",
}

# What one unit of the count is called in the prompt
UNIT_NAMES = {
    QuestionType.MULTIPLE_CHOICE: "multiple choice questions",
    QuestionType.TRUE_FALSE: "true/false questions",
    QuestionType.TRUE_FALSE_CONDITIONAL: "conditional true/false questions",
    QuestionType.IDENTIFICATION: "identification questions",
    QuestionType.ENUMERATION: "enumeration questions",
    QuestionType.FLASHCARD: "flashcards",
    QuestionType.MATCHING: "matching pairs",
    QuestionType.ASSOCIATION: "association questions",
    QuestionType.CASE_STUDY: "case study questions",
    QuestionType.ODD_ONE_OUT: "odd one out questions",
    QuestionType.EXCEPT_QUESTIONS: "EXCEPT questions",
}


def truncate_source(source_text: str, char_limit: int = DEFAULT_SOURCE_CHAR_LIMIT) -> str:
    """Keep only the leading part of the study material."""
    return (source_text or "")[:char_limit]


def resolve_type(
    question_type: QuestionType,
    true_false_variant: TrueFalseVariant = TrueFalseVariant.TRADITIONAL,
) -> QuestionType:
    """Map true-false onto its conditional template when that variant is selected."""
    if question_type == QuestionType.TRUE_FALSE and true_false_variant == TrueFalseVariant.CONDITIONAL:
        return QuestionType.TRUE_FALSE_CONDITIONAL
    return question_type


def build_system_prompt(question_type: QuestionType, count: int) -> str:
    """System message for a primary generation call."""
    return (
        f"You are a quiz generator. Generate EXACTLY {count} {UNIT_NAMES[question_type]} "
        "in the EXACT format specified. No extra text, no numbering, no section headers. "
        "Just the questions."
    )


def build_prompt(
    source_text: str,
    question_type: QuestionType,
    count: int,
    special_instructions: str = "",
    true_false_variant: TrueFalseVariant = TrueFalseVariant.TRADITIONAL,
    char_limit: int = DEFAULT_SOURCE_CHAR_LIMIT,
) -> str:
    """
    Build the user prompt for generating one question type.

    Args:
        source_text: Extracted study material (only a prefix is used)
        question_type: Type to generate
        count: Exact number of questions (pairs for matching)
        special_instructions: Extra requirement every question must reflect
        true_false_variant: Template choice for true-false
        char_limit: Source prefix length

    Returns:
        Prompt text
    """
    question_type = resolve_type(question_type, true_false_variant)
    unit = UNIT_NAMES[question_type]
    material = truncate_source(source_text, char_limit)

    if question_type == QuestionType.MATCHING:
        rules = (
            'CRITICAL: Always start with the "Column A | Column B" header line, '
            "then list one pair per line below it. Do not skip the header."
        )
        heading = "FORMAT (MANDATORY - MUST INCLUDE HEADER):"
    else:
        rules = f"Repeat this pattern exactly {count} times, one question after another."
        heading = "FORMAT (MANDATORY - NO NUMBERING - NO BULLETS):"

    prompt = f"""Generate EXACTLY {count} {unit}.

{heading}
{FORMATS[question_type]}

{rules}
Do not number the questions and do not add section headers.

Study material: {material}

Generate exactly {count} {unit} now:"""

    if special_instructions and special_instructions.strip():
        prompt += (
            "\n\nADDITIONAL REQUIREMENT (every question must reflect this): "
            f"{special_instructions.strip()}"
        )
    return prompt


def build_fill_system_prompt(question_type: QuestionType, count: int) -> str:
    """System message for a secondary gap-filling call."""
    return (
        f"Generate EXACTLY {count} {UNIT_NAMES[question_type]}. "
        "Use ONLY the exact format shown. No intro text. No numbering. No headers."
    )


def build_fill_prompt(
    source_text: str,
    question_type: QuestionType,
    count: int,
    char_limit: int = DEFAULT_FILL_CHAR_LIMIT,
) -> str:
    """
    Narrow single-type prompt asking the secondary model for the missing count.

    Args:
        source_text: Extracted study material (only a prefix is used)
        question_type: Type that fell short
        count: Number still needed
        char_limit: Source prefix length

    Returns:
        Prompt text
    """
    unit = UNIT_NAMES[question_type]
    material = truncate_source(source_text, char_limit)

    if question_type == QuestionType.MATCHING:
        return f"""You MUST generate EXACTLY {count} matching pairs.

CRITICAL FORMATTING RULES:
1. ALWAYS start with this exact line first: Column A | Column B
2. Then list each pair on a new line with format: term | definition
3. NO extra text, NO numbering, NO sections

{FORMATS[question_type]}

Material: {material}

NOW GENERATE EXACTLY {count} PAIRS:"""

    return f"""Generate EXACTLY {count} {unit}. Use only this format with NO numbering, NO bullets, NO headers:

{FORMATS[question_type]}

Repeat {count} times.

Material: {material}"""
