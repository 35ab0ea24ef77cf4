from __future__ import annotations

import re
from typing import Final

FACT_MARKER: Final[str] = "DisconSchedule.fact ="

SCHEMA_VERSION: Final[str] = "1.0.0"
SOURCE_TYPE: Final[str] = "proxy"
SOURCE_NOTES: Final[str] = "Extracted from DisconSchedule.fact in upstream HTML"
TEMPLATE_NOTES: Final[str] = "Initialized by parser"

# Two or more letters followed by N.N, e.g. GPV1.2.
GROUP_KEY_RE: Final[re.Pattern[str]] = re.compile(
    r"^[A-ZА-ЯЁІЇЄҐ]{2,}\d+\.\d+$",
    flags=re.IGNORECASE,
)
TIME_RE: Final[re.Pattern[str]] = re.compile(r"^\d{1,2}:\d{2}$")
DATE_RE: Final[re.Pattern[str]] = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

DATE_ALIASES: Final[tuple[str, ...]] = ("date", "day", "d")
START_ALIASES: Final[tuple[str, ...]] = ("start", "from", "begin", "s")
END_ALIASES: Final[tuple[str, ...]] = ("end", "to", "finish", "e")

PAYLOAD_FIELD: Final[str] = "data"

REASON_INITIALIZED: Final[str] = "initialized"
REASON_NO_DATA_FIELD: Final[str] = "no-data-field-present"
REASON_UNRECOGNIZED: Final[str] = "stored-as-is-unrecognized-structure"
REASON_EMPTY_AFTER_PARSE: Final[str] = "empty-data-after-parse"

STATUS_IDLE: Final[str] = "idle"
STATUS_PARSED: Final[str] = "parsed"
STATUS_ERROR: Final[str] = "error"

CODE_OK: Final[int] = 200
