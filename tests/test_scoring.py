# =============================================================================
# UNIT TESTS - scoring rules (no database)
# =============================================================================

import pytest

from app.services.scoring import (
    FALLBACK_MESSAGE,
    SubmittedAnswer,
    compute_score,
    filter_valid_answers,
    percentage,
    performance_message,
)

OPTION_COUNTS = [3, 3]  # JS Basics: two questions, three options each
ANSWER_KEY = [1, 0]


def answer(question_index, selected_index):
    return {"questionIndex": question_index, "selectedIndex": selected_index}


class TestFilterValidAnswers:
    """Per-element filtering of raw submissions."""

    def test_keeps_in_range_answers_in_submission_order(self):
        valid = filter_valid_answers([answer(1, 0), answer(0, 2)], OPTION_COUNTS)

        assert valid == [SubmittedAnswer(1, 0), SubmittedAnswer(0, 2)]

    @pytest.mark.parametrize(
        "item",
        [
            answer(2, 0),          # no such question
            answer(-1, 0),
            answer(0, 3),          # no such option
            answer(0, -1),
            answer(True, 1),       # booleans are not indices
            answer(0, 1.0),        # floats are not indices
            answer("0", "1"),
            {"questionIndex": 0},  # missing selectedIndex
            [0, 1],
            "0:1",
            None,
        ],
    )
    def test_drops_malformed_or_out_of_range_elements(self, item):
        assert filter_valid_answers([item], OPTION_COUNTS) == []

    def test_bad_elements_do_not_spoil_good_ones(self):
        valid = filter_valid_answers([answer(9, 9), answer(0, 1), None], OPTION_COUNTS)

        assert valid == [SubmittedAnswer(0, 1)]

    def test_first_answer_for_a_question_wins(self):
        valid = filter_valid_answers([answer(0, 1), answer(0, 0), answer(1, 0)], OPTION_COUNTS)

        assert valid == [SubmittedAnswer(0, 1), SubmittedAnswer(1, 0)]

    def test_option_bound_is_per_question(self):
        valid = filter_valid_answers([answer(0, 3), answer(1, 3)], [4, 2])

        assert valid == [SubmittedAnswer(0, 3)]


class TestComputeScore:
    """Score = round(100 * correct / total), halves up."""

    def test_all_correct(self):
        result = compute_score(ANSWER_KEY, [SubmittedAnswer(0, 1), SubmittedAnswer(1, 0)])

        assert (result.score, result.correct, result.total) == (100, 2, 2)

    def test_half_correct(self):
        result = compute_score(ANSWER_KEY, [SubmittedAnswer(0, 0), SubmittedAnswer(1, 0)])

        assert (result.score, result.correct, result.total) == (50, 1, 2)

    def test_all_wrong(self):
        result = compute_score(ANSWER_KEY, [SubmittedAnswer(0, 2), SubmittedAnswer(1, 1)])

        assert result.score == 0
        assert result.correct == 0

    def test_unanswered_questions_count_against_the_score(self):
        result = compute_score([0, 0, 0, 0], [SubmittedAnswer(0, 0)])

        assert (result.score, result.correct, result.total) == (25, 1, 4)

    def test_duplicate_answers_count_once(self):
        result = compute_score(ANSWER_KEY, [SubmittedAnswer(0, 1), SubmittedAnswer(0, 0)])

        assert (result.correct, result.total) == (1, 2)

    def test_quiz_without_questions_cannot_be_scored(self):
        with pytest.raises(ValueError):
            compute_score([], [SubmittedAnswer(0, 0)])


class TestPercentage:
    @pytest.mark.parametrize(
        "correct,total,expected",
        [
            (1, 3, 33),
            (2, 3, 67),
            (1, 2, 50),
            (1, 8, 13),   # 12.5 rounds up
            (5, 8, 63),   # 62.5 rounds up
            (0, 5, 0),
            (7, 7, 100),
        ],
    )
    def test_rounds_half_up(self, correct, total, expected):
        assert percentage(correct, total) == expected


class TestPerformanceMessage:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (100, "Excellent work!"),
            (90, "Excellent work!"),
            (89, "Great job!"),
            (80, "Great job!"),
            (70, "Good effort!"),
            (60, "Not bad, keep practicing!"),
            (59, FALLBACK_MESSAGE),
            (0, FALLBACK_MESSAGE),
        ],
    )
    def test_bands(self, score, expected):
        assert performance_message(score) == expected
