"""
Recursive-descent JSON decoder.

Grammar (subset):
    value   := object | array | string | number | "true" | "false" | "null"
    object  := "{" [ string ":" value { "," string ":" value } ] "}"
    array   := "[" [ value { "," value } ] "]"
    number  := ["-"] digits [ "." digits ]
    string  := '"' { char | escape } '"'

Not supported: exponents, \\uXXXX escapes (the "u" passes through).

Objects and arrays nest at most MAX_DEPTH levels deep.

Null Semantics:
    By default a null value is dropped. An object key holding null is
    omitted and an array slot holding null is removed, so "present with
    null" cannot be told apart from "absent". JSONDecoder(keep_nulls=True)
    keeps them as None instead.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from structext.errors import StructureError

logger = logging.getLogger(__name__)

WHITESPACE = " \t\n\r"
DIGITS = "0123456789"
SNIPPET_LENGTH = 21
MAX_DEPTH = 200

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
}

_MISSING = object()


class JSONParseError(StructureError):
    """Raised when JSON text cannot be decoded."""

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position


class JSONDecoder:
    """
    Decoder with an explicit cursor.

    A new cursor is created for every decode() call, so one decoder can
    be reused freely.
    """

    def __init__(self, keep_nulls: bool = False):
        self.keep_nulls = keep_nulls

    def decode(self, text: str) -> Any:
        """
        Decode JSON text.

        Returns:
            The decoded value (None for a top-level null)

        Raises:
            JSONParseError: On malformed input or trailing characters
        """
        if text is None or text.strip() == "":
            raise JSONParseError("Empty JSON text", 0)
        return _Cursor(text, self.keep_nulls).parse_document()


class _Cursor:
    def __init__(self, text: str, keep_nulls: bool):
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.keep_nulls = keep_nulls
        self.depth = 0

    # -- helpers -------------------------------------------------------------

    def snippet(self) -> str:
        return self.text[self.pos:self.pos + SNIPPET_LENGTH]

    def fail(self, reason: str) -> JSONParseError:
        return JSONParseError(f"{reason} at position {self.pos}: {self.snippet()!r}", self.pos)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < self.length else ""

    def skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.fail(f"Expected '{char}'")
        self.pos += 1

    def enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise self.fail("Maximum nesting depth exceeded")

    # -- grammar -------------------------------------------------------------

    def parse_document(self) -> Any:
        self.skip_whitespace()
        value = self.parse_value()
        self.skip_whitespace()
        if self.pos < self.length:
            raise JSONParseError(
                f"Unexpected characters after JSON: {self.snippet()}", self.pos
            )
        return None if value is _MISSING else value

    def parse_value(self) -> Any:
        self.skip_whitespace()
        char = self.peek()

        if char and char in "{[":
            self.enter()
            value = self.parse_object() if char == "{" else self.parse_array()
            self.depth -= 1
            return value
        if char == '"':
            return self.parse_string()
        if char == "-" or (char and char in DIGITS):
            return self.parse_number()
        if self.text.startswith("true", self.pos):
            self.pos += 4
            return True
        if self.text.startswith("false", self.pos):
            self.pos += 5
            return False
        if self.text.startswith("null", self.pos):
            self.pos += 4
            return None if self.keep_nulls else _MISSING

        if not char:
            raise self.fail("Unexpected end of JSON")
        raise self.fail("Unexpected character")

    def parse_string(self) -> str:
        start = self.pos
        self.expect('"')
        chars: List[str] = []
        while self.pos < self.length:
            char = self.text[self.pos]
            if char == "\\":
                self.pos += 1
                if self.pos >= self.length:
                    break
                escaped = self.text[self.pos]
                chars.append(_ESCAPES.get(escaped, escaped))
            elif char == '"':
                self.pos += 1
                return "".join(chars)
            else:
                chars.append(char)
            self.pos += 1

        self.pos = start
        raise self.fail("Unterminated string")

    def parse_number(self) -> Any:
        start = self.pos
        if self.peek() == "-":
            self.pos += 1
        while self.pos < self.length and self.text[self.pos] in DIGITS:
            self.pos += 1
        is_float = False
        if self.peek() == ".":
            is_float = True
            self.pos += 1
            while self.pos < self.length and self.text[self.pos] in DIGITS:
                self.pos += 1

        literal = self.text[start:self.pos]
        try:
            return float(literal) if is_float else int(literal)
        except ValueError:
            self.pos = start
            raise self.fail("Invalid number") from None

    def parse_object(self) -> Dict[str, Any]:
        self.expect("{")
        result: Dict[str, Any] = {}
        self.skip_whitespace()
        if self.peek() == "}":
            self.pos += 1
            return result

        while True:
            self.skip_whitespace()
            if self.peek() != '"':
                raise self.fail("Expected string key")
            key = self.parse_string()
            self.skip_whitespace()
            self.expect(":")
            value = self.parse_value()
            if value is not _MISSING:
                result[key] = value
            self.skip_whitespace()
            char = self.peek()
            if char == "}":
                self.pos += 1
                return result
            if char != ",":
                raise self.fail("Expected ',' or '}' in object")
            self.pos += 1

    def parse_array(self) -> List[Any]:
        self.expect("[")
        result: List[Any] = []
        self.skip_whitespace()
        if self.peek() == "]":
            self.pos += 1
            return result

        while True:
            value = self.parse_value()
            if value is not _MISSING:
                result.append(value)
            self.skip_whitespace()
            char = self.peek()
            if char == "]":
                self.pos += 1
                return result
            if char != ",":
                raise self.fail("Expected ',' or ']' in array")
            self.pos += 1


def decode_json(text: str, keep_nulls: bool = False) -> Tuple[Any, Optional[str]]:
    """
    Decode JSON text without raising.

    Returns:
        (value, None) on success, (None, message) on failure
    """
    try:
        return JSONDecoder(keep_nulls=keep_nulls).decode(text), None
    except JSONParseError as e:
        logger.debug("JSON decode failed: %s", e)
        return None, str(e)


__all__ = ["JSONDecoder", "JSONParseError", "decode_json"]
