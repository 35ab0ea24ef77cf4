from __future__ import annotations

import re
import string
from typing import Any

from discon_facts.parsers.errors import LiteralSyntaxError

_NUMBER_RE = re.compile(
    r"[+-]?(?:0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_LINE_CONTINUATIONS = {"\n", "\u2028", "\u2029"}
_KEYWORDS: dict[str, Any] = {"true": True, "false": False, "null": None}


def _is_ident_start(ch: str) -> bool:
    return bool(ch) and (ch.isalpha() or ch in "_$")


def _is_ident_part(ch: str) -> bool:
    return bool(ch) and (ch.isalnum() or ch in "_$")


def _number_key(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class LiteralParser:
    """
    Recursive-descent reader for JavaScript object literals.

    Accepts objects, arrays, strings, numbers, ``true``/``false``/``null``,
    unquoted or single-quoted keys, trailing commas and comments. Every other
    construct (identifiers in value position, calls, operators) is rejected;
    nothing is evaluated.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def parse(self) -> Any:
        value = self._parse_value()
        self._skip_ignorable()
        if self.pos != len(self.text):
            raise self._error("Unexpected trailing content")
        return value

    def _error(self, message: str, position: int | None = None) -> LiteralSyntaxError:
        return LiteralSyntaxError(message, self.pos if position is None else position)

    def _peek(self) -> str:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return ""

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            raise self._error(f"Expected `{ch}`")
        self.pos += 1

    def _skip_ignorable(self) -> None:
        text = self.text
        while self.pos < len(text):
            if text[self.pos].isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end + 1
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise self._error("Unterminated comment")
                self.pos = end + 2
            else:
                return

    def _parse_value(self) -> Any:
        self._skip_ignorable()
        ch = self._peek()
        if ch == "{":
            return self._parse_object()
        if ch == "[":
            return self._parse_array()
        if ch in ("'", '"'):
            return self._parse_string()
        if ch and (ch in "+-." or ch in string.digits):
            return self._parse_number()
        if _is_ident_start(ch):
            start = self.pos
            word = self._read_identifier()
            if word in _KEYWORDS:
                return _KEYWORDS[word]
            raise self._error(f"Identifier `{word}` is not a literal", start)
        if not ch:
            raise self._error("Unexpected end of input")
        raise self._error(f"Unexpected character {ch!r}")

    def _parse_object(self) -> dict[str, Any]:
        self.pos += 1
        result: dict[str, Any] = {}
        while True:
            self._skip_ignorable()
            if self._peek() == "}":
                self.pos += 1
                return result

            key = self._parse_key()
            self._skip_ignorable()
            self._expect(":")
            result[key] = self._parse_value()

            self._skip_ignorable()
            ch = self._peek()
            if ch == ",":
                self.pos += 1
                continue
            if ch == "}":
                self.pos += 1
                return result
            raise self._error("Expected `,` or `}` in object")

    def _parse_key(self) -> str:
        ch = self._peek()
        if ch and ch in ("'", '"'):
            return self._parse_string()
        if _is_ident_start(ch):
            return self._read_identifier()
        if ch and (ch == "." or ch in string.digits):
            return _number_key(self._parse_number())
        raise self._error("Expected property name")

    def _parse_array(self) -> list[Any]:
        self.pos += 1
        items: list[Any] = []
        while True:
            self._skip_ignorable()
            if self._peek() == "]":
                self.pos += 1
                return items

            items.append(self._parse_value())

            self._skip_ignorable()
            ch = self._peek()
            if ch == ",":
                self.pos += 1
                continue
            if ch == "]":
                self.pos += 1
                return items
            raise self._error("Expected `,` or `]` in array")

    def _read_identifier(self) -> str:
        start = self.pos
        while _is_ident_part(self._peek()):
            self.pos += 1
        return self.text[start : self.pos]

    def _parse_string(self) -> str:
        quote = self.text[self.pos]
        start = self.pos
        self.pos += 1
        chunks: list[str] = []
        while True:
            if self.pos >= len(self.text):
                raise self._error("Unterminated string", start)
            ch = self.text[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(chunks)
            if ch in ("\n", "\r"):
                raise self._error("Unterminated string", start)
            if ch == "\\":
                self.pos += 1
                chunks.append(self._read_escape())
                continue
            chunks.append(ch)
            self.pos += 1

    def _read_escape(self) -> str:
        if self.pos >= len(self.text):
            raise self._error("Unterminated escape sequence")
        ch = self.text[self.pos]
        self.pos += 1

        if ch in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[ch]
        if ch == "x":
            return chr(self._read_hex(2))
        if ch == "u":
            return chr(self._read_unicode_escape())
        if ch == "\r":
            if self._peek() == "\n":
                self.pos += 1
            return ""
        if ch in _LINE_CONTINUATIONS:
            return ""
        return ch

    def _read_unicode_escape(self) -> int:
        if self._peek() == "{":
            end = self.text.find("}", self.pos)
            digits = self.text[self.pos + 1 : end] if end != -1 else ""
            if not 1 <= len(digits) <= 6 or any(c not in string.hexdigits for c in digits):
                raise self._error("Invalid unicode escape")
            code = int(digits, 16)
            if code > 0x10FFFF:
                raise self._error("Invalid unicode escape")
            self.pos = end + 1
            return code

        code = self._read_hex(4)
        # Join UTF-16 surrogate pairs written as two escapes.
        if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", self.pos):
            low_digits = self.text[self.pos + 2 : self.pos + 6]
            if len(low_digits) == 4 and all(c in string.hexdigits for c in low_digits):
                low = int(low_digits, 16)
                if 0xDC00 <= low <= 0xDFFF:
                    self.pos += 6
                    return 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
        return code

    def _read_hex(self, count: int) -> int:
        digits = self.text[self.pos : self.pos + count]
        if len(digits) != count or any(c not in string.hexdigits for c in digits):
            raise self._error("Invalid escape sequence")
        self.pos += count
        return int(digits, 16)

    def _parse_number(self) -> int | float:
        start = self.pos
        match = _NUMBER_RE.match(self.text, self.pos)
        if match is None:
            raise self._error("Invalid number", start)
        self.pos = match.end()
        if _is_ident_part(self._peek()):
            raise self._error("Invalid number", start)

        raw = match.group(0)
        sign = -1 if raw.startswith("-") else 1
        body = raw.lstrip("+-")
        if body[:2].lower() == "0x":
            return sign * int(body, 16)
        if any(c in body for c in ".eE"):
            return sign * float(body)
        return sign * int(body)
