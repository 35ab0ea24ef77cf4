from __future__ import annotations

import pytest

from discon_facts.parsers.errors import MarkerNotFound, UnbalancedBraces, UnexpectedToken
from discon_facts.parsers.locator import NaiveBraceScanner, locate_fact_literal


def test_extracts_exact_balanced_span() -> None:
    html = 'var x = 1; DisconSchedule.fact =\n   {"a":{"b":1},"c":[{}]}; var y = {};'

    extraction = locate_fact_literal(html)

    assert extraction.text == '{"a":{"b":1},"c":[{}]}'
    assert extraction.start_offset == html.index("{")
    assert html[extraction.start_offset : extraction.end_offset] == extraction.text


def test_missing_marker() -> None:
    with pytest.raises(MarkerNotFound):
        locate_fact_literal("<html><script>DisconSchedule.preset = {}</script></html>")


def test_non_brace_after_marker() -> None:
    with pytest.raises(UnexpectedToken):
        locate_fact_literal("DisconSchedule.fact = [1, 2]")


def test_marker_at_end_of_input() -> None:
    with pytest.raises(UnexpectedToken):
        locate_fact_literal("DisconSchedule.fact =   ")


def test_unbalanced_braces() -> None:
    with pytest.raises(UnbalancedBraces):
        locate_fact_literal('DisconSchedule.fact = {"a": {"b": 1}')


def test_braces_inside_strings_count_as_structural() -> None:
    extraction = locate_fact_literal('DisconSchedule.fact = {"a": "}"}; rest }')

    assert extraction.text == '{"a": "}'


def test_scanner_can_be_substituted() -> None:
    class FixedScanner:
        def find_closing(self, text: str, start: int) -> int | None:
            return text.index("!") - 1

    extraction = locate_fact_literal("DisconSchedule.fact = {x}!", scanner=FixedScanner())

    assert extraction.text == "{x}"


def test_naive_scanner_returns_none_when_unclosed() -> None:
    assert NaiveBraceScanner().find_closing("{{}", 0) is None
