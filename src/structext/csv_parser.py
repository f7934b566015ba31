"""
Delimited Table Reader (raw text → Table).

Turns CSV / TSV / semicolon-separated text into ordered headers and
header-keyed records.

Format Notes:
    - First retained line is the header line
    - Quoted fields may contain the delimiter
    - Short rows are padded with "", long rows are truncated
    - Quoted fields cannot span lines (the reader is line-oriented)
"""

import dataclasses
import logging
from typing import Dict, List, Optional

from structext.errors import SourceOpenError
from structext.model import ReadOptions, Table
from structext.textio import read_text
from structext.tokenizer import is_blank, physical_lines, split_fields

logger = logging.getLogger(__name__)


def _retained_lines(content: str, options: ReadOptions) -> List[str]:
    lines = physical_lines(content)
    if options.skip_empty_lines:
        lines = [line for line in lines if not is_blank(line)]
    return lines


def _to_record(headers: List[str], values: List[str]) -> Dict[str, str]:
    record = {}
    for i, header in enumerate(headers):
        record[header] = values[i] if i < len(values) else ""
    return record


def parse_csv_string(content: str, options: Optional[ReadOptions] = None) -> Table:
    """
    Parse delimited text into a Table.

    Args:
        content: Whole file content
        options: ReadOptions (defaults: ",", skip empty lines, trim fields)

    Returns:
        Table with headers and records. Empty content gives an empty Table.
    """
    options = options or ReadOptions()
    lines = _retained_lines(content, options)

    if not lines:
        return Table()

    def split(line: str) -> List[str]:
        return split_fields(line, options.delimiter, options.trim_fields, options.quote_mode)

    headers = split(lines[0])
    records = [_to_record(headers, split(line)) for line in lines[1:]]

    logger.debug("parsed %d column(s), %d record(s)", len(headers), len(records))
    return Table(headers=headers, records=records)


def parse_csv_file(filepath: str, options: Optional[ReadOptions] = None) -> Table:
    """
    Parse a delimited file into a Table.

    A file that cannot be opened or decoded yields an empty Table rather than an
    error. Callers treat an empty header list as "nothing parsed"; this
    does not distinguish a missing file from an empty one.

    A leading UTF-8 byte-order-mark is tolerated.
    """
    try:
        content = read_text(filepath, encoding="utf-8-sig")
    except SourceOpenError as e:
        logger.warning("%s", e)
        return Table()
    return parse_csv_string(content, options)


def _with_delimiter(options: Optional[ReadOptions], delimiter: str) -> ReadOptions:
    return dataclasses.replace(options or ReadOptions(), delimiter=delimiter)


def parse_tsv_string(content: str, options: Optional[ReadOptions] = None) -> Table:
    """Parse tab-separated text. The delimiter in options is overridden."""
    return parse_csv_string(content, _with_delimiter(options, "\t"))


def parse_tsv_file(filepath: str, options: Optional[ReadOptions] = None) -> Table:
    """Parse a tab-separated file. The delimiter in options is overridden."""
    return parse_csv_file(filepath, _with_delimiter(options, "\t"))


def parse_semicolon_string(content: str, options: Optional[ReadOptions] = None) -> Table:
    """Parse semicolon-separated text. The delimiter in options is overridden."""
    return parse_csv_string(content, _with_delimiter(options, ";"))


def parse_semicolon_file(filepath: str, options: Optional[ReadOptions] = None) -> Table:
    """Parse a semicolon-separated file. The delimiter in options is overridden."""
    return parse_csv_file(filepath, _with_delimiter(options, ";"))


__all__ = [
    "parse_csv_string",
    "parse_csv_file",
    "parse_tsv_string",
    "parse_tsv_file",
    "parse_semicolon_string",
    "parse_semicolon_file",
]
