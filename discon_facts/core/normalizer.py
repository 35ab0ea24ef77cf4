from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any
from zoneinfo import ZoneInfo

from discon_facts.core.constants import (
    DATE_ALIASES,
    DATE_RE,
    END_ALIASES,
    GROUP_KEY_RE,
    PAYLOAD_FIELD,
    REASON_NO_DATA_FIELD,
    REASON_UNRECOGNIZED,
    START_ALIASES,
    TIME_RE,
)
from discon_facts.core.models import NormalizedFact
from discon_facts.core.timezones import zoned_iso


def _first_present(entry: Mapping[str, Any], aliases: tuple[str, ...]) -> Any:
    for alias in aliases:
        value = entry.get(alias)
        if value:
            return value
    return None


def _parse_date(raw: Any) -> date | None:
    match = DATE_RE.match(str(raw))
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _split_time(raw: Any) -> tuple[int, int] | None:
    if not isinstance(raw, str) or TIME_RE.match(raw) is None:
        return None
    hours, minutes = raw.split(":")
    return int(hours), int(minutes)


class GroupNormalizer:
    """Reshape per-group schedule entries into zone-qualified intervals."""

    def __init__(self, zone: ZoneInfo | str = "Europe/Kyiv") -> None:
        self.zone = zone if isinstance(zone, ZoneInfo) else ZoneInfo(zone)

    def normalize(self, value: Any) -> NormalizedFact:
        reason: str | None = None
        raw_fact_included = False

        if isinstance(value, Mapping) and value.get(PAYLOAD_FIELD) is not None:
            payload = value[PAYLOAD_FIELD]
        else:
            payload = value
            reason = REASON_NO_DATA_FIELD
            raw_fact_included = True

        groups = self.extract_groups(payload)
        if groups:
            return NormalizedFact(
                data=groups,
                data_empty_reason=reason,
                raw_fact_included=raw_fact_included,
            )

        return NormalizedFact(
            data=payload,
            data_empty_reason=REASON_UNRECOGNIZED,
            raw_fact_included=raw_fact_included,
        )

    def extract_groups(self, payload: Any) -> dict[str, Any]:
        if not isinstance(payload, Mapping):
            return {}

        groups: dict[str, Any] = {}
        for key, entries in payload.items():
            if not isinstance(key, str) or GROUP_KEY_RE.match(key) is None:
                continue
            if not isinstance(entries, list):
                groups[key] = entries
                continue
            groups[key] = [self.normalize_entry(entry) for entry in entries]
        return groups

    def normalize_entry(self, entry: Any) -> Any:
        """Return the ISO-timestamped interval, or ``entry`` untouched if unrecognized."""
        if not isinstance(entry, Mapping):
            return entry

        raw_date = _first_present(entry, DATE_ALIASES)
        start = _split_time(_first_present(entry, START_ALIASES))
        end = _split_time(_first_present(entry, END_ALIASES))
        if raw_date is None or start is None or end is None:
            return entry

        day = _parse_date(raw_date)
        if day is None:
            return entry

        try:
            start_local = zoned_iso(day, *start, self.zone)
            end_local = zoned_iso(day, *end, self.zone)
        except (ValueError, OverflowError):
            return entry

        return {"date": str(raw_date), "startLocal": start_local, "endLocal": end_local}
