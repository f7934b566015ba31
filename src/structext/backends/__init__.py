"""Backends for structext output generation (delimited text, JSON)."""

from .csv_writer import (
    CSVStreamWriter,
    create_writer,
    format_csv,
    write_csv,
    write_csv_from_objects,
    write_table,
)
from .json_encoder import encode_json, encode_string

__all__ = [
    "CSVStreamWriter",
    "create_writer",
    "format_csv",
    "write_csv",
    "write_csv_from_objects",
    "write_table",
    "encode_json",
    "encode_string",
]
