"""
Response grading for screening test items.

Grading is a pure function of (Question, submission): it decides whether a
single submitted answer is correct and, for multi-item kinds, how much
partial credit it earns.

Grading Rules
=============
- single_choice:    correct iff the selected option index equals the expected
                    index. Binary credit (max 1).
- ordered_sequence: 1 point per item in the right position, plus
                    DISPLACED_ITEM_CREDIT for each remaining submitted item
                    that exists among the remaining expected items (each
                    expected item consumed at most once). Max = len(expected).
                    Correct iff credit / max >= ordered pass ratio (0.7).
- free_recall:      1 point per distinct expected item recalled, compared
                    trimmed and case-insensitive. Max = len(expected).
                    Correct iff credit / max >= recall pass ratio (0.6).
- spelling_blank:   trimmed, case-insensitive exact match. Binary credit.

Empty submissions always grade to zero credit and never raise. Submitted
entries beyond the expected length are never matched and are not otherwise
penalised.
"""

from collections import Counter
from typing import Any, Callable, Dict, List

from libs.domain_types import QuestionKind

from app.core.screening._constants import (
    DISPLACED_ITEM_CREDIT,
    FREE_RECALL_PASS_RATIO,
    ORDERED_SEQUENCE_PASS_RATIO,
)
from app.core.screening._types import Grade, Question
from app.core.screening.errors import InvalidArgumentError

# Separator accepted when a multi-item answer arrives as a single string
ITEM_SEPARATOR = ","


def normalize_answer(value: Any) -> str:
    """Trim and case-fold an answer item for comparison."""
    return str(value).strip().casefold()


def is_empty_submission(submission: Any) -> bool:
    """Return True for None, blank strings and empty collections."""
    if submission is None:
        return True
    if isinstance(submission, str):
        return not submission.strip()
    if isinstance(submission, (list, tuple, set, frozenset)):
        return all(is_empty_submission(item) for item in submission)
    return False


def _submitted_items(submission: Any) -> List[str]:
    """Normalise a multi-item submission into a list of non-blank items.

    Accepts a list/tuple/set of items or a single comma-separated string.
    Blank entries are dropped before positional comparison.
    """
    if isinstance(submission, str):
        raw_items: List[Any] = submission.split(ITEM_SEPARATOR)
    elif isinstance(submission, (list, tuple)):
        raw_items = list(submission)
    elif isinstance(submission, (set, frozenset)):
        raw_items = sorted(submission, key=str)
    else:
        raw_items = [submission]

    items = []
    for item in raw_items:
        if item is None:
            continue
        normalized = normalize_answer(item)
        if normalized:
            items.append(normalized)
    return items


def _grade_single_choice(question: Question, submission: Any, **_: float) -> Grade:
    # bool is an int subclass; True must not select option 1
    selected_valid = isinstance(submission, int) and not isinstance(submission, bool)
    is_correct = selected_valid and submission == question.expected
    return Grade(
        is_correct=is_correct,
        partial_score=1.0 if is_correct else 0.0,
        max_score=1.0,
    )


def _grade_ordered_sequence(
    question: Question, submission: Any, *, ordered_pass_ratio: float, **_: float
) -> Grade:
    expected = [normalize_answer(item) for item in question.expected]
    max_score = float(len(expected))
    submitted = _submitted_items(submission)[: len(expected)]

    positional = 0
    remaining_expected: Counter = Counter()
    unmatched: List[str] = []
    for position, expected_item in enumerate(expected):
        if position < len(submitted) and submitted[position] == expected_item:
            positional += 1
            continue
        remaining_expected[expected_item] += 1
        if position < len(submitted):
            unmatched.append(submitted[position])

    displaced = 0
    for item in unmatched:
        if remaining_expected[item] > 0:
            remaining_expected[item] -= 1
            displaced += 1

    partial_score = positional + DISPLACED_ITEM_CREDIT * displaced
    is_correct = max_score > 0 and (partial_score / max_score) >= ordered_pass_ratio
    return Grade(is_correct=is_correct, partial_score=partial_score, max_score=max_score)


def _grade_free_recall(
    question: Question, submission: Any, *, recall_pass_ratio: float, **_: float
) -> Grade:
    expected = {normalize_answer(item) for item in question.expected}
    max_score = float(len(expected))
    recalled = set(_submitted_items(submission)) & expected

    partial_score = float(len(recalled))
    is_correct = max_score > 0 and (partial_score / max_score) >= recall_pass_ratio
    return Grade(is_correct=is_correct, partial_score=partial_score, max_score=max_score)


def _grade_spelling_blank(question: Question, submission: Any, **_: float) -> Grade:
    is_correct = isinstance(submission, str) and normalize_answer(
        submission
    ) == normalize_answer(question.expected)
    return Grade(
        is_correct=is_correct,
        partial_score=1.0 if is_correct else 0.0,
        max_score=1.0,
    )


_GRADERS: Dict[QuestionKind, Callable[..., Grade]] = {
    QuestionKind.SINGLE_CHOICE: _grade_single_choice,
    QuestionKind.ORDERED_SEQUENCE: _grade_ordered_sequence,
    QuestionKind.FREE_RECALL: _grade_free_recall,
    QuestionKind.SPELLING_BLANK: _grade_spelling_blank,
}


def max_score_for(question: Question) -> float:
    """Maximum credit available for a question."""
    if question.kind == QuestionKind.ORDERED_SEQUENCE:
        return float(len(question.expected))
    if question.kind == QuestionKind.FREE_RECALL:
        return float(len({normalize_answer(item) for item in question.expected}))
    return 1.0


def grade_response(
    question: Question,
    submission: Any,
    *,
    ordered_pass_ratio: float = ORDERED_SEQUENCE_PASS_RATIO,
    recall_pass_ratio: float = FREE_RECALL_PASS_RATIO,
) -> Grade:
    """
    Grade one submitted answer against a question.

    Args:
        question: The question being answered.
        submission: The caller-supplied answer. Expected shape by kind:
            option index (int) for single_choice, list of items for
            ordered_sequence and free_recall, a string for spelling_blank.
        ordered_pass_ratio: Credit ratio needed for an ordered_sequence
            item to count as correct.
        recall_pass_ratio: Credit ratio needed for a free_recall item to
            count as correct.

    Returns:
        Grade with the correctness verdict and partial/max credit.

    Raises:
        InvalidArgumentError: If the question kind is not recognised.

    Example:
        >>> q = Question(QuestionKind.ORDERED_SEQUENCE, "Recall in reverse",
        ...              ["6", "1", "3", "9", "5"], DifficultyLevel.MEDIUM)
        >>> grade_response(q, ["6", "1", "9", "3", "5"])
        Grade(is_correct=True, partial_score=4.0, max_score=5.0)
    """
    grader = _GRADERS.get(question.kind)
    if grader is None:
        raise InvalidArgumentError(f"Unrecognised question kind: {question.kind!r}")

    if is_empty_submission(submission):
        return Grade(
            is_correct=False, partial_score=0.0, max_score=max_score_for(question)
        )

    return grader(
        question,
        submission,
        ordered_pass_ratio=ordered_pass_ratio,
        recall_pass_ratio=recall_pass_ratio,
    )
