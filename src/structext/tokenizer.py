"""
Tokenizer / Escaper shared by the delimited-table reader and writer.

Scanning:
    TOGGLE mode is a single left-to-right pass with an in-quotes flag. The
    delimiter is a field boundary only while the flag is off. RFC4180 mode
    reads the line with csv.reader.

Escaping:
    Empty cells become the literal token ``null``. Whitespace runs become
    underscores. Cells holding a comma, a quote or the delimiter are
    wrapped in quotes with inner quotes doubled.
"""

import csv
import re
from typing import Any, List

from structext.model import QuoteMode


NULL_TOKEN = "null"
UTF8_BOM = "\ufeff"
QUOTE = '"'

_WHITESPACE_RUN = re.compile(r"\s+")


def physical_lines(content: str) -> List[str]:
    """
    Split content into physical lines.

    Every carriage return is removed. A trailing newline does not
    produce an extra empty line.
    """
    if not content:
        return []
    lines = content.replace("\r", "").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def is_blank(line: str) -> bool:
    return line.strip() == ""


def split_fields(
    line: str,
    delimiter: str = ",",
    trim: bool = True,
    quote_mode: QuoteMode = QuoteMode.TOGGLE,
) -> List[str]:
    """
    Split one line into fields.

    TOGGLE uses the in-quotes scan below. RFC4180 hands the line to the
    csv module, so a doubled quote inside a quoted field is one literal
    quote.

    Args:
        line: A physical line (no newline)
        delimiter: Single-character field separator
        trim: Strip surrounding whitespace from each field
        quote_mode: How doubled quotes inside a quoted field are read

    Returns:
        List of fields (always at least one)

    Example:
        >>> split_fields('a,"b,c",d')
        ['a', 'b,c', 'd']
    """
    if quote_mode is QuoteMode.RFC4180:
        return _split_rfc4180(line, delimiter, trim)

    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append(_finish(current, trim))
            current = []
        else:
            current.append(char)

    fields.append(_finish(current, trim))
    return fields


def _split_rfc4180(line: str, delimiter: str, trim: bool) -> List[str]:
    reader = csv.reader([line], delimiter=delimiter, quotechar=QUOTE, skipinitialspace=trim)
    row = next(reader, None)
    if not row:
        return [""]
    return [value.strip() for value in row] if trim else row


def _finish(chars: List[str], trim: bool) -> str:
    text = "".join(chars)
    return text.strip() if trim else text


def escape_field(value: Any, delimiter: str = ",", underscore_whitespace: bool = True) -> str:
    """
    Escape one cell for output.

    Examples:
        None or ""        -> null
        "   "             -> _
        "a b"             -> a_b
        'He said "hi"'    -> "He_said_""hi""\"
    """
    if value is None:
        return NULL_TOKEN
    text = str(value)
    if text == "":
        return NULL_TOKEN

    if underscore_whitespace:
        text = _WHITESPACE_RUN.sub("_", text)

    if "," in text or QUOTE in text or delimiter in text:
        text = QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE

    return text

