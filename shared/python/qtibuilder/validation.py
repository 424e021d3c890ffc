"""Authoring checks run before a question is serialized.

Validation never raises: every problem becomes a :class:`ValidationIssue` with
a stable ``code`` and the camelCase ``path`` of the offending field.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
import re

from qtibuilder.enums import QuestionType
from qtibuilder.schemas import (
    ContentBlock,
    HottextQuestion,
    MatchQuestion,
    MultipleChoiceQuestion,
    OrderQuestion,
    QuestionBase,
    TextEntryQuestion,
    ValidationIssue,
    ValidationResult,
)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")


def _has_content(blocks: Sequence[ContentBlock]) -> bool:
    return any(block.content.strip() for block in blocks)


def _check_identifier(issues: list[ValidationIssue], value: str, path: str) -> None:
    if not value.strip():
        issues.append(
            ValidationIssue(code="missing_identifier", message="Identifier is required.", path=path)
        )
    elif not IDENTIFIER_PATTERN.match(value):
        issues.append(
            ValidationIssue(
                code="invalid_identifier",
                message=f"'{value}' is not a valid QTI identifier.",
                path=path,
            )
        )


def _check_identifiers(issues: list[ValidationIssue], values: Iterable[str], path: str) -> None:
    """Check each identifier of one list, then report the repeated ones."""

    values = list(values)
    for index, value in enumerate(values):
        _check_identifier(issues, value, f"{path}[{index}]")
    for value, count in Counter(value for value in values if value.strip()).items():
        if count > 1:
            issues.append(
                ValidationIssue(
                    code="duplicate_identifier",
                    message=f"Identifier '{value}' is used {count} times.",
                    path=path,
                )
            )


def _check_options_present(issues: list[ValidationIssue], count: int, path: str) -> None:
    if count == 0:
        issues.append(
            ValidationIssue(code="missing_options", message="At least one entry is required.", path=path)
        )


def _check_max_choices(issues: list[ValidationIssue], max_choices: int, correct_count: int) -> None:
    if max_choices < 0:
        issues.append(
            ValidationIssue(
                code="invalid_max_choices",
                message="maxChoices cannot be negative.",
                path="maxChoices",
            )
        )
    elif max_choices > 0 and correct_count > max_choices:
        issues.append(
            ValidationIssue(
                code="too_many_correct_answers",
                message=f"{correct_count} correct answers exceed maxChoices={max_choices}.",
                path="maxChoices",
            )
        )


def _validate_hottext(question: HottextQuestion, issues: list[ValidationIssue]) -> None:
    identifiers = [item.identifier for item in question.hottext_items]
    _check_options_present(issues, len(identifiers), "hottextItems")
    _check_identifiers(issues, identifiers, "hottextItems")

    known = set(identifiers)
    for index, answer in enumerate(question.correct_answers):
        if answer not in known:
            issues.append(
                ValidationIssue(
                    code="dangling_correct_answer",
                    message=f"Correct answer '{answer}' does not match any hottext item.",
                    path=f"correctAnswers[{index}]",
                )
            )
    if not question.correct_answers:
        issues.append(
            ValidationIssue(
                code="missing_correct_answer",
                message="Select at least one correct hottext.",
                path="correctAnswers",
            )
        )
    _check_max_choices(issues, question.max_choices, len(set(question.correct_answers)))


def _validate_choice(question: MultipleChoiceQuestion, issues: list[ValidationIssue]) -> None:
    _check_options_present(issues, len(question.options), "options")
    _check_identifiers(issues, (option.identifier for option in question.options), "options")

    correct_count = sum(1 for option in question.options if option.is_correct)
    if question.options and correct_count == 0:
        issues.append(
            ValidationIssue(
                code="missing_correct_answer",
                message="Mark at least one option as correct.",
                path="options",
            )
        )
    _check_max_choices(issues, question.max_choices, correct_count)


def _validate_order(question: OrderQuestion, issues: list[ValidationIssue]) -> None:
    _check_options_present(issues, len(question.options), "options")
    _check_identifiers(issues, (option.identifier for option in question.options), "options")

    ranks = sorted(option.correct_order for option in question.options)
    if ranks != list(range(1, len(ranks) + 1)):
        issues.append(
            ValidationIssue(
                code="invalid_order_ranks",
                message="Correct orders must number the options 1..N without gaps or repeats.",
                path="options",
            )
        )


def _validate_match(question: MatchQuestion, issues: list[ValidationIssue]) -> None:
    _check_options_present(issues, len(question.pairs), "pairs")
    _check_identifiers(issues, (pair.left_id for pair in question.pairs), "pairs.leftId")
    _check_identifiers(issues, (pair.right_id for pair in question.pairs), "pairs.rightId")

    if question.max_associations < 0:
        issues.append(
            ValidationIssue(
                code="invalid_max_associations",
                message="maxAssociations cannot be negative.",
                path="maxAssociations",
            )
        )
    elif 0 < question.max_associations < len(question.pairs):
        issues.append(
            ValidationIssue(
                code="invalid_max_associations",
                message=(
                    f"maxAssociations={question.max_associations} is lower than "
                    f"the {len(question.pairs)} expected pairs."
                ),
                path="maxAssociations",
            )
        )


def _validate_text_entry(question: TextEntryQuestion, issues: list[ValidationIssue]) -> None:
    if not any(answer.strip() for answer in question.correct_answers):
        issues.append(
            ValidationIssue(
                code="missing_correct_answer",
                message="At least one accepted answer is required.",
                path="correctAnswers",
            )
        )
    if question.expected_length is not None and question.expected_length <= 0:
        issues.append(
            ValidationIssue(
                code="invalid_expected_length",
                message="expectedLength must be a positive number.",
                path="expectedLength",
            )
        )
    if question.pattern_mask:
        try:
            re.compile(question.pattern_mask)
        except re.error as exc:
            issues.append(
                ValidationIssue(
                    code="invalid_pattern_mask",
                    message=f"patternMask does not compile: {exc}.",
                    path="patternMask",
                )
            )


_VALIDATORS = {
    QuestionType.HOTTEXT: _validate_hottext,
    QuestionType.CHOICE: _validate_choice,
    QuestionType.ORDER: _validate_order,
    QuestionType.MATCH: _validate_match,
    QuestionType.TEXT_ENTRY: _validate_text_entry,
}


def validate_question(question_type: QuestionType, question: QuestionBase) -> ValidationResult:
    issues: list[ValidationIssue] = []
    _check_identifier(issues, question.identifier, "identifier")
    if not _has_content(question.prompt_blocks):
        issues.append(
            ValidationIssue(code="missing_prompt", message="The prompt is empty.", path="promptBlocks")
        )
    _VALIDATORS[question_type](question, issues)
    return ValidationResult(valid=not issues, issues=issues)
