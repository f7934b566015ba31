"""
Delimited Table Writer (Table / rows → delimited text).

Supports two modes:
    - ONE-SHOT: format or write the whole table at once
    - STREAMING: write the header line now, then one row at a time,
      so very large tables never need to be held in memory

Headers are written verbatim. Every cell goes through escape_field:
empty cells become ``null`` and whitespace runs become underscores.
"""

import logging
from typing import IO, Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from structext.errors import SourceOpenError
from structext.model import Table, WriteOptions
from structext.textio import open_for_write
from structext.tokenizer import UTF8_BOM, escape_field

logger = logging.getLogger(__name__)


def _format_row(row: Iterable[Any], options: WriteOptions) -> str:
    cells = [
        escape_field(value, options.delimiter, options.underscore_whitespace)
        for value in row
    ]
    return options.delimiter.join(cells) + "\n"


def _format_header(headers: Sequence[str], options: WriteOptions) -> str:
    prefix = UTF8_BOM if options.utf8_bom else ""
    return prefix + options.delimiter.join(headers) + "\n"


def format_csv(
    headers: Sequence[str],
    rows: Iterable[Iterable[Any]],
    options: Optional[WriteOptions] = None,
) -> str:
    """
    Render headers and positional rows as delimited text.

    Args:
        headers: Header names, used as-is
        rows: Sequence of rows, each a sequence of cell values
        options: WriteOptions

    Returns:
        The full file content, every line terminated by "\\n"
    """
    options = options or WriteOptions()
    parts = [_format_header(headers, options)]
    parts.extend(_format_row(row, options) for row in rows)
    return "".join(parts)


def write_csv(
    filepath: str,
    headers: Sequence[str],
    rows: Iterable[Iterable[Any]],
    options: Optional[WriteOptions] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Write headers and positional rows to a file.

    Returns:
        (True, None) on success, (False, message) if the file cannot be opened
    """
    content = format_csv(headers, rows, options)
    try:
        with open_for_write(filepath) as f:
            f.write(content)
    except SourceOpenError as e:
        logger.warning("%s", e)
        return False, str(e)
    except OSError as e:
        logger.warning("write failed for %s: %s", filepath, e)
        return False, f"Could not write file: {filepath}"

    logger.debug("wrote %s", filepath)
    return True, None


def _object_headers(field_order: Sequence[str], options: WriteOptions) -> List[str]:
    return [options.field_map.get(name, name) for name in field_order]


def write_csv_from_objects(
    filepath: str,
    field_order: Sequence[str],
    records: Iterable[Mapping[str, Any]],
    options: Optional[WriteOptions] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Write header-keyed records to a file.

    Args:
        filepath: Output path
        field_order: Record keys in the desired column order
        records: One mapping per row; missing keys are written as null
        options: WriteOptions; field_map renames headers (key -> header)
    """
    options = options or WriteOptions()
    headers = _object_headers(field_order, options)
    rows = ([record.get(name) for name in field_order] for record in records)
    return write_csv(filepath, headers, rows, options)


def write_table(
    filepath: str,
    table: Table,
    options: Optional[WriteOptions] = None,
) -> Tuple[bool, Optional[str]]:
    """Write a Table using its own header order."""
    return write_csv_from_objects(filepath, table.headers, table.records, options)


class CSVStreamWriter:
    """
    Incremental writer returned by create_writer.

    Owns the output handle until close(). Not safe to share between
    call sites. Use it as a context manager so the handle is released
    on every exit path:

        writer, err = create_writer(path, ["Name", "Code"])
        with writer:
            for row in rows:
                writer.write_row(row)
    """

    def __init__(self, handle: IO[str], options: WriteOptions):
        self._handle = handle
        self._options = options
        self.row_count = 0

    @property
    def closed(self) -> bool:
        return self._handle is None

    def write_row(self, row: Iterable[Any]) -> None:
        """
        Escape and write one row.

        Raises:
            ValueError: If the writer is already closed
        """
        if self._handle is None:
            raise ValueError("write_row() on a closed writer")
        self._handle.write(_format_row(row, self._options))
        self.row_count += 1

    def close(self) -> None:
        """Flush and release the handle. Safe to call more than once."""
        if self._handle is None:
            return
        try:
            self._handle.close()
        finally:
            self._handle = None
        logger.debug("stream writer closed after %d row(s)", self.row_count)

    def __enter__(self) -> "CSVStreamWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_writer(
    filepath: str,
    headers: Sequence[str],
    options: Optional[WriteOptions] = None,
) -> Tuple[Optional[CSVStreamWriter], Optional[str]]:
    """
    Open a file for streaming output and write the header line immediately.

    Returns:
        (writer, None) on success, (None, message) if the file cannot be opened
    """
    options = options or WriteOptions()
    try:
        handle = open_for_write(filepath)
    except SourceOpenError as e:
        logger.warning("%s", e)
        return None, str(e)

    try:
        handle.write(_format_header(headers, options))
    except OSError as e:
        handle.close()
        logger.warning("header write failed for %s: %s", filepath, e)
        return None, f"Could not write file: {filepath}"

    return CSVStreamWriter(handle, options), None
