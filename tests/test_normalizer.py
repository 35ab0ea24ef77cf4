from __future__ import annotations

from datetime import date
from zoneinfo import ZoneInfo

import pytest

from discon_facts.core.normalizer import GroupNormalizer
from discon_facts.core.timezones import zoned_iso
from discon_facts.parsers.locator import locate_fact_literal
from discon_facts.parsers.structural import parse_structure


def test_fixed_offset_zone_scenario() -> None:
    html = (
        '... DisconSchedule.fact = {"GPV1.1":[{"date":"2025-03-30",'
        '"start":"2:00","end":"4:00"}]}; ...'
    )
    value = parse_structure(locate_fact_literal(html).text).value

    fact = GroupNormalizer("Etc/GMT-2").normalize(value)

    assert fact.data["GPV1.1"][0] == {
        "date": "2025-03-30",
        "startLocal": "2025-03-30T02:00:00+02:00",
        "endLocal": "2025-03-30T04:00:00+02:00",
    }
    assert fact.data_empty_reason == "no-data-field-present"
    assert fact.raw_fact_included is True


@pytest.mark.parametrize(
    ("day", "hour", "minute", "expected"),
    [
        (date(2025, 3, 30), 2, 30, "2025-03-30T02:30:00+02:00"),
        (date(2025, 3, 30), 4, 0, "2025-03-30T04:00:00+03:00"),
        (date(2025, 10, 26), 2, 0, "2025-10-26T02:00:00+03:00"),
        (date(2025, 10, 26), 5, 0, "2025-10-26T05:00:00+02:00"),
    ],
)
def test_dst_transitions_in_kyiv(day: date, hour: int, minute: int, expected: str) -> None:
    assert zoned_iso(day, hour, minute, ZoneInfo("Europe/Kyiv")) == expected


def test_hour_24_rolls_into_next_day() -> None:
    fact = GroupNormalizer("Europe/Kyiv").normalize(
        {"data": {"GPV3.1": [{"date": "2025-06-01", "start": "22:00", "end": "24:00"}]}}
    )

    assert fact.data["GPV3.1"][0]["endLocal"] == "2025-06-02T00:00:00+03:00"
    assert fact.data_empty_reason is None
    assert fact.raw_fact_included is False


def test_aliases_and_padding() -> None:
    entries = [
        {"day": "2025-01-10", "from": "9:00", "to": "12:30"},
        {"d": "2025-01-10", "begin": "18:00", "finish": "20:00"},
        {"date": "2025-01-10", "s": "0:00", "e": "1:00"},
    ]

    fact = GroupNormalizer("Europe/Kyiv").normalize({"data": {"GPV2.1": entries}})

    assert [item["startLocal"] for item in fact.data["GPV2.1"]] == [
        "2025-01-10T09:00:00+02:00",
        "2025-01-10T18:00:00+02:00",
        "2025-01-10T00:00:00+02:00",
    ]


def test_unrecognized_entries_are_preserved() -> None:
    entries = [
        {"date": "2025-01-10", "start": "9am", "end": "11am"},
        {"date": "10.01.2025", "start": "9:00", "end": "11:00"},
        {"date": "2025-02-30", "start": "9:00", "end": "11:00"},
        {"start": "9:00", "end": "11:00"},
        {"date": "2025-01-10", "start": 9, "end": 11},
        "09:00-11:00",
        None,
    ]

    fact = GroupNormalizer("Europe/Kyiv").normalize({"data": {"GPV4.2": entries}})

    assert fact.data["GPV4.2"] == entries


def test_non_group_keys_are_dropped_and_non_lists_kept() -> None:
    payload = {
        "GPV1.1": [],
        "gpv5.2": {"note": "no schedule"},
        "ГПВ6.1": [],
        "update": "x",
        "GPV1": [],
        "A1.1": [],
    }

    fact = GroupNormalizer("Europe/Kyiv").normalize({"data": payload})

    assert fact.data == {"GPV1.1": [], "gpv5.2": {"note": "no schedule"}, "ГПВ6.1": []}


def test_unknown_shape_is_stored_verbatim() -> None:
    payload = {"rows": [[1, 2, 3]], "update": "today"}

    fact = GroupNormalizer("Europe/Kyiv").normalize({"data": payload})

    assert fact.data == payload
    assert fact.data_empty_reason == "stored-as-is-unrecognized-structure"


def test_unknown_shape_without_data_field_keeps_whole_value() -> None:
    value = {"rows": [], "update": "today", "data": None}

    fact = GroupNormalizer("Europe/Kyiv").normalize(value)

    assert fact.data == value
    assert fact.data_empty_reason == "stored-as-is-unrecognized-structure"
    assert fact.raw_fact_included is True
