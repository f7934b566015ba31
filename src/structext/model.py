"""
Core Data Model Objects

Defines the data structures shared by every reader and writer in structext.

These are pure data classes representing:
    - Tables (ordered headers + header-keyed records)
    - Read/Write options for the delimited-table tokenizer
    - The JSON tagged union (JsonArray | JsonObject)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about files or I/O
        - Carry no parsing state
        - Are produced fresh per call and owned by the caller
"""

from collections import abc
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union


class QuoteMode(Enum):
    """
    How the field scanner treats double quotes.

    TOGGLE:
        Every quote flips the in-quotes flag and is dropped.
        A doubled quote ("") therefore produces nothing.
        This is the historical behaviour and the default.

    RFC4180:
        Inside quotes, a doubled quote yields one literal quote.
    """
    TOGGLE = "toggle"
    RFC4180 = "rfc4180"


@dataclass
class ReadOptions:
    """
    Options for the delimited-table reader.

    Properties:
        delimiter: Field separator (",", "\\t", ";" or any single character)
        skip_empty_lines: Drop lines that are blank after whitespace stripping
        trim_fields: Strip surrounding whitespace from every field
        quote_mode: QuoteMode used by the field scanner
    """

    delimiter: str = ","
    skip_empty_lines: bool = True
    trim_fields: bool = True
    quote_mode: QuoteMode = QuoteMode.TOGGLE


@dataclass
class WriteOptions:
    """
    Options for the delimited-table writer.

    Properties:
        delimiter: Field separator used to join headers and cells
        utf8_bom: Prefix the output with a UTF-8 byte-order-mark
            (spreadsheet applications use it to detect the encoding)
        field_map: Field name -> header name remapping for object rows
        underscore_whitespace: Replace each whitespace run in a cell with "_"
    """

    delimiter: str = ","
    utf8_bom: bool = False
    field_map: Dict[str, str] = field(default_factory=dict)
    underscore_whitespace: bool = True


@dataclass
class Table:
    """
    Ordered headers plus header-keyed records.

    This is what every reader returns and what the writers consume.

    Properties:
        headers:
            Field names in column order. Duplicates are kept verbatim;
            when a name repeats, the last column wins inside a record.

        records:
            One dict per data row. Every header is present as a key;
            fields missing from the source row are "".

        metadata:
            Heading directives from formats that carry them
            (e.g. FPS, VIDEO_FORMAT in an exchange log). Empty for CSV.
    """

    headers: List[str] = field(default_factory=list)
    records: List[Dict[str, str]] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def is_empty(self) -> bool:
        """An empty header list means nothing was parsed."""
        return not self.headers

    def column(self, name: str) -> List[str]:
        """
        Values of one column, in record order.

        Raises:
            KeyError: If name is not a header
        """
        if name not in self.headers:
            raise KeyError(name)
        return [record.get(name, "") for record in self.records]

    def rows(self, field_order: Optional[Sequence[str]] = None) -> List[List[Any]]:
        """
        Positional rows, ready for the writer.

        Args:
            field_order: Column order (defaults to headers)
        """
        order = list(field_order) if field_order is not None else self.headers
        return [[record.get(name) for name in order] for record in self.records]


# =============================================================================
# JSON tagged union
# =============================================================================


@dataclass(frozen=True)
class JsonArray:
    """A table classified as an ordered sequence."""

    items: tuple


@dataclass(frozen=True)
class JsonObject:
    """A table classified as a key -> value mapping."""

    members: Mapping[Any, Any]


JsonTable = Union[JsonArray, JsonObject]


def _is_index_key(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def is_table(value: Any) -> bool:
    """True for the container types the JSON subsystem treats as tables."""
    return isinstance(value, (list, tuple, abc.Mapping))


def classify_table(value: Union[Sequence[Any], Mapping[Any, Any]]) -> JsonTable:
    """
    Classify a table as an array or an object.

    Rules:
        - list / tuple -> JsonArray
        - mapping whose keys are exactly the integers 1..N -> JsonArray,
          ordered by key (an empty mapping is the N == 0 case)
        - any other mapping -> JsonObject

    A mapping that happens to use the keys 1..N as names cannot be told
    apart from an array. There is no type tag to resolve this.

    Raises:
        TypeError: If value is not a table
    """
    if isinstance(value, (list, tuple)):
        return JsonArray(tuple(value))

    if not isinstance(value, abc.Mapping):
        raise TypeError(f"Not a table: {type(value).__name__}")

    keys = list(value.keys())
    if all(_is_index_key(k) for k in keys) and set(keys) == set(range(1, len(keys) + 1)):
        return JsonArray(tuple(value[i] for i in range(1, len(keys) + 1)))

    return JsonObject(value)
