from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ParseMethod(str, Enum):
    STRICT = "strict"
    LITERAL_FALLBACK = "literal-fallback"


FactDocument = dict[str, Any]


@dataclass(frozen=True)
class RawExtraction:
    text: str
    start_offset: int
    end_offset: int


@dataclass(frozen=True)
class ParsedValue:
    value: Any
    method: ParseMethod


@dataclass(frozen=True)
class NormalizedFact:
    data: Any
    data_empty_reason: str | None = None
    raw_fact_included: bool = False


@dataclass(frozen=True)
class DocumentDefaults:
    timezone: str = "Europe/Kyiv"
    ttl_seconds: int = 300


@dataclass(frozen=True)
class RunOutcome:
    region_id: str
    output_path: str
    status: str
    code: int
    message: str | None = None
    method: ParseMethod | None = None
    persisted: bool = True

    @property
    def ok(self) -> bool:
        return self.code == 200


@dataclass(frozen=True)
class BatchSummary:
    processed: int = 0
    parsed: int = 0
    failed: int = 0
    outcomes: list[RunOutcome] = field(default_factory=list)


@dataclass(frozen=True)
class FetchSummary:
    total: int = 0
    ok: int = 0
    skipped: int = 0
