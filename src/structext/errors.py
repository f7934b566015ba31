"""
Error taxonomy for structext.

Readers and writers raise these internally. Every public file-level
operation catches them at its boundary and hands back a
(None or False, message) pair instead, so the caller is never aborted.
"""


class StructextError(Exception):
    """Base class for all structext failures."""
    pass


class SourceOpenError(StructextError):
    """Raised when a source or destination cannot be opened."""
    pass


class StructureError(StructextError):
    """Raised when required markers or sections are missing."""
    pass


class InputTypeError(StructextError):
    """Raised when a value of the wrong type is passed where a table is required."""
    pass


class SourceDecodeError(SourceOpenError):
    """Raised when a source opens but its bytes are not valid text in the expected encoding."""
    pass
