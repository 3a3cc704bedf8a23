"""Tests for the code smell pass."""

from __future__ import annotations

import pytest

from codeinsight.anomalies import SmellDetector, SmellThresholds
from tests._fixtures.snippets import FACTORY

MAGIC = """\
const RETRY_LIMIT = 500;
function wait(ms) {
  return setTimeout(done, ms * 1000);
}
"""

WIDE_SIGNATURE = """\
def connect(self, host, port, user, password, timeout):
    return open_socket(host, port)
"""

DUPLICATED = """\
function render(user) {
  element.textContent = user.firstName + ' ' + user.lastName;
  refresh();
  element.textContent = user.firstName + ' ' + user.lastName;
}
"""

NESTED_CONDITION = """\
function notify(user) {
  if (user && user.profile && user.profile.settings && user.profile.settings.notifications && user.profile.settings.notifications.email) {
    send(user);
  }
}
"""

LONG_JS = "function process(items) {\n" + "\n".join(f"  step{index}(items);" for index in range(30)) + "\n}\n"
LONG_PY = "def process(items):\n" + "".join(f"    record_{index}(items)\n" for index in range(30)) + "\nprint('done')\n"

_BRANCHES = "\n".join(f"  if (x === {index}) {{ y += {index}; }}" for index in range(12))
BRANCHY = f"function busy(x) {{\n  let y = 0;\n{_BRANCHES}\n  return y;\n}}"


def _kinds(report) -> list[str]:
    return [smell.kind for smell in report.smells]


def test_magic_numbers_skip_named_constants() -> None:
    report = SmellDetector().detect(MAGIC)

    assert _kinds(report) == ["magic-numbers"]
    smell = report.smells[0]
    assert (smell.severity, smell.line, smell.occurrences) == ("low", 3, 1)
    assert 0 < smell.confidence <= 0.95


def test_numbers_in_comments_and_strings_are_ignored() -> None:
    report = SmellDetector().detect('// retry after 5000 ms\nconst label = "error 404";\n')

    assert report.smells == ()
    assert report.confidence == 0.9


def test_python_signature_with_too_many_parameters() -> None:
    report = SmellDetector().detect(WIDE_SIGNATURE)

    assert _kinds(report) == ["too-many-params"]
    assert report.smells[0].line == 1


def test_repeated_lines_are_duplicate_code() -> None:
    report = SmellDetector().detect(DUPLICATED)

    assert _kinds(report) == ["duplicate-code"]
    assert report.smells[0].severity == "medium"
    assert report.smells[0].line == 4


def test_long_condition_is_complex() -> None:
    report = SmellDetector().detect(NESTED_CONDITION)

    assert _kinds(report) == ["complex-condition"]
    assert report.smells[0].line == 2
    assert report.complexity.cyclomatic == 6


@pytest.mark.parametrize("code", [LONG_JS, LONG_PY])
def test_long_function_bodies(code: str) -> None:
    report = SmellDetector().detect(code)

    assert _kinds(report) == ["long-method"]
    assert report.smells[0].line == 1


def test_branchy_code_reports_complexity_issues() -> None:
    report = SmellDetector().detect(BRANCHY)

    assert report.complexity.cyclomatic == 13
    assert report.complexity.cognitive == 16
    assert [(smell.kind, smell.severity, smell.message) for smell in report.smells] == [
        ("long-method", "medium", "Function is too long and complex"),
        ("high-complexity", "high", "Cyclomatic complexity too high: 13"),
        ("high-cognitive", "medium", "Cognitive complexity too high: 16"),
    ]
    assert report.smells[1].line is None
    assert report.to_dict()["summary"]["by_severity"] == {"high": 1, "medium": 2, "low": 0}


def test_thresholds_are_configurable() -> None:
    report = SmellDetector(SmellThresholds(nesting=2)).detect(FACTORY)

    assert [(smell.kind, smell.message) for smell in report.smells] == [
        ("deep-nesting", "Nesting depth too deep: 3")
    ]


def test_kinds_filter_limits_the_report() -> None:
    report = SmellDetector().detect(BRANCHY, kinds=["High-Cognitive"])

    assert _kinds(report) == ["high-cognitive"]
    with pytest.raises(ValueError, match="spaghetti"):
        SmellDetector().detect(BRANCHY, kinds=["spaghetti"])


def test_empty_input_has_no_smells() -> None:
    report = SmellDetector().detect("")

    assert report.smells == ()
    assert report.complexity.cyclomatic == 1
    assert report.complexity.line_count == 0
    assert SmellDetector().detect(None).to_dict() == report.to_dict()
