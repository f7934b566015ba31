"""
structext - Structured Text Processing

Readers and writers for three text formats:
    - Delimited tables (CSV / TSV / semicolon-separated)
    - Avid Log Exchange (ALE) logs
    - Compact JSON for presets and configuration

ARCHITECTURAL GUARANTEE:
------------------------
Every reader returns a fresh Table (ordered headers + header-keyed
records). Every file-level operation reports failure as a
(None or False, message) pair and never aborts the caller.
"""

import logging

from structext.model import QuoteMode, ReadOptions, Table, WriteOptions

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["QuoteMode", "ReadOptions", "Table", "WriteOptions", "__version__"]
