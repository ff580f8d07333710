"""Ordered line grammar shared by the question counter and the parser.

Generated quiz text is a loose, line-oriented format. Both counting and
parsing walk the same non-blank lines with a cursor and try the rules in
``RULES`` top to bottom. A rule has a cheap predicate on the current line and
a consumer that inspects the following lines. The first rule whose predicate
holds and whose consumer accepts the block wins; a consumer that rejects lets
the next rule try. When nothing matches the cursor moves one line.

Priority matters because the formats overlap: a ``Statement:`` line starts
association, conditional true/false and plain true/false blocks, and ``Q:``
starts odd-one-out, EXCEPT, multiple choice, identification and enumeration.
"""

import re
from collections.abc import Callable, Collection, Iterator, Sequence
from dataclasses import dataclass, field

from pydantic import ValidationError

from study_royale.models.quiz import (
    CHOICE_LABELS,
    AssociationQuestion,
    CaseStudyQuestion,
    ChoiceQuestion,
    ConditionalTrueFalseQuestion,
    FlashcardQuestion,
    FreeTextQuestion,
    MatchingPair,
    MatchingQuestion,
    ParsedQuestion,
    QuestionType,
    TrueFalseQuestion,
)

OPTION_RE = re.compile(r"^([A-D])\)\s*(.*)$")
NUMBERED_SCENARIO_RE = re.compile(r"^\d+\.\s*Scenario:")
NUMBER_PREFIX_RE = re.compile(r"^\d+\.\s*")
ENUMERATION_ANSWER_RE = re.compile(r"^\d+\.\s")

# Intro sentences and bare section headings models put around the questions
PREAMBLE_RE = re.compile(r"^(here are|here's|and here are|below are|i've generated)\b.*:\s*$", re.I)
SECTION_HEADING_RE = re.compile(
    r"^(case stud(y|ies)|multiple choice|true ?/ ?false|conditional true ?/ ?false|"
    r"identification|enumeration|association|matching( type)?|flashcards?|"
    r"fill in the blanks?|odd one out|except)"
    r"( questions?)?( \(\d+( questions?| pairs?)?\))?:?$",
    re.I,
)

ODD_ONE_OUT_PROMPT = "Q: Which is the odd one out?"
MATCHING_HEADER = "Column A |"
PAIR_SEPARATOR = " | "

# Lines scanned after a question line for its options and answer
ROMAN_BLOCK_WINDOW = 10
CHOICE_WINDOW = 7

# Lines that open another question and end an option scan
QUESTION_STARTS = ("Q:", "A:", "Statement:", "Scenario:", "Front:")


def strip_label(line: str, label: str) -> str:
    """
    Remove a literal label such as ``"ModelAnswer:"`` from the start of a line.

    Args:
        line: Line of generated text
        label: Exact label including its trailing colon or period

    Returns:
        The remaining text, stripped; the line unchanged if it lacks the label
    """
    if line.startswith(label):
        return line[len(label) :].strip()
    return line.strip()


def prepare_lines(raw_text: str) -> list[str]:
    """
    Split generated text into trimmed, non-blank lines.

    Intro sentences ("Here are 5 questions:") and bare section headings
    ("Multiple Choice Questions:") are dropped.
    """
    lines = []
    for line in raw_text.splitlines():
        line = line.strip()
        if not line:
            continue
        if PREAMBLE_RE.match(line) or SECTION_HEADING_RE.match(line):
            continue
        lines.append(line)
    return lines


@dataclass(frozen=True)
class GrammarContext:
    """Request information some rules need to disambiguate blocks."""

    requested_types: frozenset[QuestionType] = field(default_factory=frozenset)

    @classmethod
    def for_types(cls, types: Collection[QuestionType] | None) -> "GrammarContext":
        return cls(frozenset(QuestionType(t) for t in types or ()))


@dataclass(frozen=True)
class GrammarMatch:
    """A block consumed by a rule; ``question`` is None for skipped lines."""

    consumed: int
    question: ParsedQuestion | None = None

    @property
    def question_type(self) -> QuestionType | None:
        return self.question.question_type if self.question else None

    @property
    def units(self) -> int:
        return self.question.units if self.question else 0


Consumer = Callable[[Sequence[str], int, GrammarContext], GrammarMatch | None]


@dataclass(frozen=True)
class LineRule:
    """One grammar rule: trigger predicate on the current line plus block consumer."""

    name: str
    predicate: Callable[[str], bool]
    consume: Consumer


def _line(lines: Sequence[str], index: int) -> str:
    return lines[index] if 0 <= index < len(lines) else ""


def _build(model: type, **fields) -> ParsedQuestion | None:
    # A block that looks right but yields invalid fields is not a question
    try:
        return model(**fields)
    except ValidationError:
        return None


def _resolve_label(answer: str, options: dict[str, str]) -> str | None:
    """Turn ``B``, ``B)``, ``B) Paris`` or ``Paris`` into an option key."""
    answer = answer.strip()
    if not answer:
        return None
    label = answer[0].upper()
    if label in options and (len(answer) == 1 or not answer[1].isalnum()):
        return label
    for key, text in options.items():
        if text.strip().lower() == answer.lower():
            return key
    return None


@dataclass
class _ChoiceBlock:
    options: dict[str, str]
    answer: str
    answer_index: int


def _scan_choice_block(lines: Sequence[str], start: int, window: int) -> _ChoiceBlock | None:
    """
    Collect ``A)``-``D)`` options up to a ``Correct:``/``Answer:`` line.

    The answer line must appear within ``window`` lines of ``start``, before
    any line that opens another question, and the block must hold exactly
    four distinct option labels.
    """
    options: dict[str, str] = {}
    duplicate = False
    for j in range(start, min(start + window, len(lines))):
        line = lines[j]
        option = OPTION_RE.match(line)
        if option:
            label, text = option.groups()
            if label in options:
                duplicate = True
            options[label] = text.strip()
            continue
        if line.startswith("Correct:") or line.startswith("Answer:"):
            if duplicate or len(options) != len(CHOICE_LABELS):
                return None
            answer = line.split(":", 1)[1].strip()
            return _ChoiceBlock(options=options, answer=answer, answer_index=j)
        if line.startswith(QUESTION_STARTS):
            return None
    return None


# Rule consumers


def _consume_case_study(lines, i, ctx):
    scenario = strip_label(NUMBER_PREFIX_RE.sub("", lines[i]), "Scenario:")
    question_line = _line(lines, i + 1)
    answer_line = _line(lines, i + 2)
    if not (question_line.startswith("Question:") and answer_line.startswith("ModelAnswer:")):
        return None
    question = _build(
        CaseStudyQuestion,
        scenario=scenario,
        prompt=strip_label(question_line, "Question:"),
        model_answer=strip_label(answer_line, "ModelAnswer:"),
    )
    return GrammarMatch(consumed=3, question=question) if question else None


def _skip_line(lines, i, ctx):
    return GrammarMatch(consumed=1)


def _consume_legacy_case(lines, i, ctx):
    question = _build(CaseStudyQuestion, scenario=strip_label(lines[i], "Case:"))
    return GrammarMatch(consumed=1, question=question) if question else None


def _classify_roman_block(options: dict[str, str], ctx: GrammarContext) -> QuestionType:
    """
    Decide whether a Statement/I./II. block is association or conditional true/false.

    The two share one layout. If the request asked for exactly one of them the
    block is that type; otherwise the option wording decides.
    """
    association = QuestionType.ASSOCIATION in ctx.requested_types
    conditional = QuestionType.TRUE_FALSE_CONDITIONAL in ctx.requested_types
    if association != conditional:
        return QuestionType.ASSOCIATION if association else QuestionType.TRUE_FALSE_CONDITIONAL
    if any("associated" in text.lower() for text in options.values()):
        return QuestionType.ASSOCIATION
    return QuestionType.TRUE_FALSE_CONDITIONAL


def _consume_roman_block(lines, i, ctx):
    if _line(lines, i + 1).startswith("Answer:"):
        return None
    item_line = _line(lines, i + 1)
    second_line = _line(lines, i + 2)
    if not (item_line.startswith("I.") and second_line.startswith("II.")):
        return None

    block = _scan_choice_block(lines, i + 3, ROMAN_BLOCK_WINDOW - 3)
    if block is None:
        return None
    label = _resolve_label(block.answer, block.options)
    if label is None:
        return None

    statement = strip_label(lines[i], "Statement:")
    fields = dict(
        item_i=strip_label(item_line, "I."),
        item_ii=strip_label(second_line, "II."),
        options=block.options,
        correct_label=label,
    )
    if _classify_roman_block(block.options, ctx) == QuestionType.ASSOCIATION:
        question = _build(AssociationQuestion, statement=statement, **fields)
    else:
        question = _build(ConditionalTrueFalseQuestion, header=statement, **fields)
    if question is None:
        return None
    return GrammarMatch(consumed=block.answer_index - i + 1, question=question)


def _parse_bool(answer: str) -> bool | None:
    answer = answer.strip().lower()
    if answer.startswith("true"):
        return True
    if answer.startswith("false"):
        return False
    return None


def _consume_true_false(lines, i, ctx):
    answer_line = _line(lines, i + 1)
    if not answer_line.startswith("Answer:"):
        return None
    value = _parse_bool(strip_label(answer_line, "Answer:"))
    if value is None:
        return None

    consumed = 2
    explanation = ""
    explanation_line = _line(lines, i + 2)
    if explanation_line.startswith("Explanation:"):
        explanation = strip_label(explanation_line, "Explanation:")
        consumed = 3

    question = _build(
        TrueFalseQuestion,
        statement=strip_label(lines[i], "Statement:"),
        correct_value=value,
        explanation=explanation,
    )
    return GrammarMatch(consumed=consumed, question=question) if question else None


def is_matching_header(line: str) -> bool:
    return line.startswith(MATCHING_HEADER)


def _split_pair(line: str) -> MatchingPair | None:
    if PAIR_SEPARATOR not in line or is_matching_header(line):
        return None
    parts = [part.strip() for part in line.split("|")]
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return MatchingPair(left=parts[0], right=parts[1])


def _is_matching_line(line: str) -> bool:
    if is_matching_header(line):
        return True
    return (
        PAIR_SEPARATOR in line
        and not line.startswith(("Q:", "Statement:", "Scenario:"))
        and not OPTION_RE.match(line)
    )


def _consume_matching(lines, i, ctx):
    j = i + 1 if is_matching_header(lines[i]) else i
    pairs = []
    while j < len(lines):
        pair = _split_pair(lines[j])
        if pair is None:
            break
        pairs.append(pair)
        j += 1

    if not pairs:
        # a header with nothing under it is skipped, a malformed pipe line is not a match
        return GrammarMatch(consumed=1) if is_matching_header(lines[i]) else None
    return GrammarMatch(consumed=j - i, question=MatchingQuestion(pairs=pairs))


def _consume_flashcard(lines, i, ctx):
    back_line = _line(lines, i + 1)
    has_back = back_line.startswith("Back:")
    question = _build(
        FlashcardQuestion,
        front=strip_label(lines[i], "Front:"),
        back=strip_label(back_line, "Back:") if has_back else "",
    )
    if question is None:
        return None
    return GrammarMatch(consumed=2 if has_back else 1, question=question)


def _choice_consumer(question_type: QuestionType) -> Consumer:
    def consume(lines, i, ctx):
        block = _scan_choice_block(lines, i + 1, CHOICE_WINDOW)
        if block is None:
            return None
        label = _resolve_label(block.answer, block.options)
        if label is None:
            return None
        question = _build(
            ChoiceQuestion,
            type=question_type.value,
            prompt=strip_label(lines[i], "Q:"),
            options=block.options,
            correct_label=label,
        )
        if question is None:
            return None
        return GrammarMatch(consumed=block.answer_index - i + 1, question=question)

    return consume


def is_enumeration_answer(answer: str) -> bool:
    """Numbered or comma separated answers are enumerations."""
    return bool(ENUMERATION_ANSWER_RE.match(answer)) or len(answer.split(",")) >= 2


def _consume_short_answer(lines, i, ctx):
    answer_line = _line(lines, i + 1)
    if not answer_line.startswith("A:"):
        return None
    answer = strip_label(answer_line, "A:")
    question_type = (
        QuestionType.ENUMERATION if is_enumeration_answer(answer) else QuestionType.IDENTIFICATION
    )
    question = _build(
        FreeTextQuestion,
        type=question_type.value,
        prompt=strip_label(lines[i], "Q:"),
        reference_answer=answer,
    )
    return GrammarMatch(consumed=2, question=question) if question else None


RULES: tuple[LineRule, ...] = (
    LineRule(
        "case-study",
        lambda line: line.startswith("Scenario:") or bool(NUMBERED_SCENARIO_RE.match(line)),
        _consume_case_study,
    ),
    LineRule("numbered-scenario", lambda line: bool(NUMBERED_SCENARIO_RE.match(line)), _skip_line),
    LineRule("legacy-case", lambda line: line.startswith("Case:"), _consume_legacy_case),
    LineRule("roman-block", lambda line: line.startswith("Statement:"), _consume_roman_block),
    LineRule("true-false", lambda line: line.startswith("Statement:"), _consume_true_false),
    LineRule("matching", _is_matching_line, _consume_matching),
    LineRule("flashcard", lambda line: line.startswith("Front:"), _consume_flashcard),
    LineRule(
        "odd-one-out",
        lambda line: line.startswith(ODD_ONE_OUT_PROMPT),
        _choice_consumer(QuestionType.ODD_ONE_OUT),
    ),
    LineRule(
        "except",
        lambda line: "EXCEPT:" in line,
        _choice_consumer(QuestionType.EXCEPT_QUESTIONS),
    ),
    LineRule(
        "multiple-choice",
        lambda line: line.startswith("Q:"),
        _choice_consumer(QuestionType.MULTIPLE_CHOICE),
    ),
    LineRule("short-answer", lambda line: line.startswith("Q:"), _consume_short_answer),
)


def scan(
    lines: Sequence[str],
    context: GrammarContext | None = None,
    rules: Sequence[LineRule] = RULES,
) -> Iterator[GrammarMatch]:
    """
    Walk prepared lines and yield every block a rule consumed.

    Skipped blocks (numbered scenarios, bare matching headers) are yielded
    with ``question=None``; lines no rule accepts are passed over silently.

    Args:
        lines: Output of ``prepare_lines``
        context: Requested types, used to tell association from conditional
        rules: Rule order to apply

    Yields:
        GrammarMatch for each consumed block, in text order
    """
    context = context or GrammarContext()
    i = 0
    while i < len(lines):
        line = lines[i]
        for rule in rules:
            if not rule.predicate(line):
                continue
            match = rule.consume(lines, i, context)
            if match is not None:
                yield match
                i += max(match.consumed, 1)
                break
        else:
            i += 1
