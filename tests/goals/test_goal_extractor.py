"""Tests for goal extraction from comments."""

from __future__ import annotations

from codeinsight.goals import GoalExtractor
from codeinsight.goals.extractor import goal_priority
from tests._fixtures.snippets import GOALS


def test_single_todo_comment_yields_one_medium_goal() -> None:
    goals = GoalExtractor().extract("// TODO: add validation")

    assert len(goals) == 1
    assert goals[0].type == "TODO"
    assert goals[0].priority == "medium"
    assert goals[0].text == "add validation"
    assert goals[0].line == 1


def test_goals_follow_source_line_order_across_comment_styles() -> None:
    goals = GoalExtractor().extract(GOALS)

    assert [(goal.type, goal.priority, goal.line) for goal in goals] == [
        ("TODO", "medium", 1),
        ("FIXME", "high", 3),
        ("NOTE", "low", 4),
        ("OPTIMIZE", "medium", 7),
    ]


def test_unmarked_and_prose_comments_are_ignored() -> None:
    code = "// plain comment\n// note that this is prose\nx = 1  # todo: tidy later\n"
    goals = GoalExtractor().extract(code)

    assert [(goal.type, goal.text) for goal in goals] == [("TODO", "tidy later")]


def test_extended_vocabulary() -> None:
    goals = GoalExtractor().extract("// BUG: off by one\n// HACK: skip cache\n")

    assert [(goal.type, goal.priority) for goal in goals] == [("BUG", "high"), ("HACK", "low")]
    assert goal_priority("fixme") == "high"


def test_markers_inside_strings_are_not_goals() -> None:
    assert GoalExtractor().extract('const label = "// TODO: not a comment";') == []


def test_empty_input_yields_no_goals() -> None:
    assert GoalExtractor().extract("") == []
    assert GoalExtractor().extract(None) == []


def test_hash_markers_without_a_space_are_goals() -> None:
    code = "def fetch():\n    #TODO: handle errors\n    return 1\n#FIXME\n"
    goals = GoalExtractor().extract(code)

    assert [(goal.type, goal.priority, goal.text, goal.line) for goal in goals] == [
        ("TODO", "medium", "handle errors", 2),
        ("FIXME", "high", "", 4),
    ]


def test_js_private_fields_are_not_goals() -> None:
    code = "class Job {\n  #todo = [];\n  run() { return this.#todo.length; }\n}\n"

    assert GoalExtractor().extract(code) == []
