from __future__ import annotations

import json
import logging

from discon_facts.core.models import ParsedValue, ParseMethod
from discon_facts.parsers.errors import LiteralSyntaxError, StructuralParseError
from discon_facts.parsers.literal import LiteralParser

logger = logging.getLogger("discon.parser")


def _reject_constant(name: str) -> float:
    raise ValueError(f"Non-standard JSON constant {name}")


def parse_structure(text: str) -> ParsedValue:
    """Parse an extracted object literal, strict JSON first."""
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        logger.debug("Strict JSON parse failed, trying literal fallback: %s", exc)
    else:
        return ParsedValue(value=value, method=ParseMethod.STRICT)

    try:
        value = LiteralParser(text).parse()
    except LiteralSyntaxError as exc:
        raise StructuralParseError(f"Failed to parse object: {exc}") from exc
    except RecursionError as exc:
        raise StructuralParseError("Failed to parse object: nesting too deep") from exc

    return ParsedValue(value=value, method=ParseMethod.LITERAL_FALLBACK)
