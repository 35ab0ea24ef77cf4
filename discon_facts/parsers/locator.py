from __future__ import annotations

from discon_facts.core.constants import FACT_MARKER
from discon_facts.core.models import RawExtraction
from discon_facts.parsers.base import BraceScanner
from discon_facts.parsers.errors import MarkerNotFound, UnbalancedBraces, UnexpectedToken


class NaiveBraceScanner:
    """
    Depth counter over ``{`` and ``}`` that ignores string quoting.

    A brace inside a quoted string counts as structural. The extracted span is
    hashed verbatim, so this behaviour is kept stable.
    """

    def find_closing(self, text: str, start: int) -> int | None:
        depth = 0
        for index in range(start, len(text)):
            ch = text[index]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return index
        return None


def locate_fact_literal(
    html: str,
    *,
    marker: str = FACT_MARKER,
    scanner: BraceScanner | None = None,
) -> RawExtraction:
    idx = html.find(marker)
    if idx == -1:
        raise MarkerNotFound(f"Marker `{marker}` not found")

    i = idx + len(marker)
    while i < len(html) and html[i].isspace():
        i += 1

    if i >= len(html) or html[i] != "{":
        raise UnexpectedToken(f"Expected `{{` after `{marker}`")

    closing = (scanner or NaiveBraceScanner()).find_closing(html, i)
    if closing is None:
        raise UnbalancedBraces("Unbalanced braces while extracting fact object")

    return RawExtraction(text=html[i : closing + 1], start_offset=i, end_offset=closing + 1)
