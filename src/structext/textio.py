"""
File access used by the readers and writers.

Both helpers turn OSError into SourceOpenError so callers deal with a
single failure type. Bytes that are not valid in the requested encoding
raise SourceDecodeError, a SourceOpenError subclass.
"""

import logging
from typing import IO

from structext.errors import SourceDecodeError, SourceOpenError

logger = logging.getLogger(__name__)


def read_text(path: str, encoding: str = "utf-8") -> str:
    """
    Read a whole text file.

    Raises:
        SourceOpenError: If the file cannot be opened or read
        SourceDecodeError: If the content is not valid in the encoding
    """
    try:
        with open(path, "r", encoding=encoding, newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        logger.debug("decode failed for %s: %s", path, e)
        raise SourceDecodeError(f"Could not decode file as {encoding}: {path}") from e
    except OSError as e:
        logger.debug("read failed for %s: %s", path, e)
        raise SourceOpenError(f"Could not open file at path: {path}") from e


def open_for_write(path: str, encoding: str = "utf-8") -> IO[str]:
    """
    Open a text file for writing with "\\n" line endings on every platform.

    Raises:
        SourceOpenError: If the file cannot be opened
    """
    try:
        return open(path, "w", encoding=encoding, newline="")
    except OSError as e:
        logger.debug("open for write failed for %s: %s", path, e)
        raise SourceOpenError(f"Could not open file for writing: {path}") from e
