"""Tests for goal alignment scoring and requirement drift."""

from __future__ import annotations

import pytest

from codeinsight.errors import InputError
from codeinsight.goals import GoalAligner
from tests._fixtures.snippets import VALIDATION

VALIDATE_EMAIL = "function validateEmail(email){ regex.test(email) }"


def test_goal_aligned_with_matching_identifiers() -> None:
    result = GoalAligner().score("Validate email format", VALIDATE_EMAIL)

    assert result.aligned is True
    assert result.score == pytest.approx(2 / 3, abs=1e-4)
    assert ("validate", "validateEmail") in result.matches
    assert result.missing == ("format",)


def test_matches_follow_goal_keyword_order() -> None:
    result = GoalAligner().score("Validate email format", VALIDATE_EMAIL)

    keywords = [keyword for keyword, _ in result.matches]
    assert keywords == sorted(keywords, key=["validate", "email", "format"].index)
    assert result.matches[0] == ("validate", "validateEmail")


def test_comment_words_count_as_code_terms() -> None:
    result = GoalAligner().score("Retry failed uploads", "// retry uploads on failure\nrun();")

    assert result.aligned is True
    assert ("retry", "retry") in result.matches


@pytest.mark.parametrize("goal", ["", "   ", None, "a an the"])
def test_empty_goal_scores_zero(goal: object) -> None:
    result = GoalAligner().score(goal, VALIDATE_EMAIL)

    assert result.score == 0
    assert result.aligned is False
    assert result.matches == ()


def test_unrelated_goal_is_not_aligned() -> None:
    result = GoalAligner().score("Render dashboard chart", VALIDATE_EMAIL)

    assert result.aligned is False
    assert result.score == 0
    assert result.missing == ("render", "dashboard", "chart")


def test_threshold_is_configurable() -> None:
    strict = GoalAligner(threshold=0.9)

    assert strict.score("Validate email format", VALIDATE_EMAIL).aligned is False


def test_measure_drift_reports_misaligned_requirements() -> None:
    report = GoalAligner().measure_drift(
        ["Validate email format", {"description": "Send welcome newsletter"}],
        VALIDATION,
    )

    assert report.total_requirements == 2
    assert report.misaligned == 1
    assert report.drift_score == 0.5
    assert report.details == (("Send welcome newsletter", 0.0),)


def test_measure_drift_with_no_requirements() -> None:
    report = GoalAligner().measure_drift([], VALIDATION)

    assert report.drift_score == 1.0
    assert report.misaligned == 0


@pytest.mark.parametrize("requirements", ["validate email", [42], 7])
def test_measure_drift_rejects_malformed_requirements(requirements: object) -> None:
    with pytest.raises(InputError):
        GoalAligner().measure_drift(requirements, VALIDATION)  # type: ignore[arg-type]
