"""
Scoring rules for quiz attempts

Pure functions: no database, no framework. The attempt service feeds them
the quiz's per-question option counts and answer keys.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence

from app.utils.validators import is_strict_int

PERFORMANCE_BANDS = (
    (90, "Excellent work!"),
    (80, "Great job!"),
    (70, "Good effort!"),
    (60, "Not bad, keep practicing!"),
)
FALLBACK_MESSAGE = "Keep studying and try again!"


@dataclass(frozen=True)
class SubmittedAnswer:
    question_index: int
    selected_index: int

    def to_dict(self) -> dict:
        return {"questionIndex": self.question_index, "selectedIndex": self.selected_index}


@dataclass(frozen=True)
class ScoreResult:
    score: int
    correct: int
    total: int


def filter_valid_answers(raw_answers: Iterable[Any], option_counts: Sequence[int]) -> List[SubmittedAnswer]:
    """
    Keep the answers that point at a real question and a real option

    Elements that are not objects, carry non-integer indices, or fall out of
    range are dropped individually. When a question is answered more than
    once, the first answer in submission order wins.

    Args:
        raw_answers: Elements as received from the client
        option_counts: Number of options for each question, in quiz order

    Returns:
        Valid answers, at most one per question, in submission order
    """
    seen = set()
    valid = []
    for item in raw_answers:
        if not isinstance(item, dict):
            continue
        question_index = item.get("questionIndex")
        selected_index = item.get("selectedIndex")
        if not (is_strict_int(question_index) and is_strict_int(selected_index)):
            continue
        if not 0 <= question_index < len(option_counts):
            continue
        if not 0 <= selected_index < option_counts[question_index]:
            continue
        if question_index in seen:
            continue
        seen.add(question_index)
        valid.append(SubmittedAnswer(question_index, selected_index))
    return valid


def percentage(correct: int, total: int) -> int:
    """round(100 * correct / total) with halves rounded up, in exact integer math"""
    return (200 * correct + total) // (2 * total)


def compute_score(correct_indices: Sequence[int], answers: Iterable[SubmittedAnswer]) -> ScoreResult:
    """
    Score valid answers against the answer key

    Unanswered questions count as wrong: ``total`` is the number of questions
    in the quiz, not the number of answers supplied.
    """
    total = len(correct_indices)
    if total == 0:
        raise ValueError("cannot score a quiz without questions")

    selected = {}
    for answer in answers:
        selected.setdefault(answer.question_index, answer.selected_index)

    correct = sum(
        1 for index, correct_index in enumerate(correct_indices)
        if selected.get(index) == correct_index
    )
    return ScoreResult(score=percentage(correct, total), correct=correct, total=total)


def performance_message(score: int) -> str:
    for threshold, message in PERFORMANCE_BANDS:
        if score >= threshold:
            return message
    return FALLBACK_MESSAGE
