"""
Exchange-Log Reader (Avid Log Exchange text → Table).

ALE Format:
    Heading
    FIELD_DELIM	TABS
    VIDEO_FORMAT	1080
    FPS	25

    Column
    Name	Tracks	Start
                             <- ignored until "Data"
    Data
    A001C003	V	01:00:00:00

Parsing is an explicit state machine:

    HEADER --"Column"--> COLUMN --(next line)--> AWAITING_DATA --"Data"--> DATA

Each state has one pure handler taking (line, context) and returning the
next state plus at most one effect. The driver applies effects to the
context. DATA is terminal.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from structext.errors import SourceOpenError, StructureError
from structext.model import Table
from structext.textio import read_text
from structext.tokenizer import physical_lines

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = "\t"
COLUMN_MARKER = "Column"
DATA_MARKER = "Data"

_FIELD_DELIM = re.compile(r"^FIELD_DELIM\s+(.+)")
_DIRECTIVE = re.compile(r"^(\S+)\s+(.+)$")

MISSING_SECTIONS = "Parsing failed: Could not find valid 'Column' or 'Data' sections in the file."


class AleState(Enum):
    """Parser states, in the only order they can be visited."""
    HEADER = "header"
    COLUMN = "column"
    AWAITING_DATA = "awaiting_data"
    DATA = "data"


# =============================================================================
# Effects
# =============================================================================


@dataclass(frozen=True)
class SetDelimiter:
    delimiter: str


@dataclass(frozen=True)
class SetDirective:
    name: str
    value: str


@dataclass(frozen=True)
class SetHeaders:
    headers: List[str]


@dataclass(frozen=True)
class AppendRecord:
    record: Dict[str, str]


Effect = Union[SetDelimiter, SetDirective, SetHeaders, AppendRecord]


@dataclass
class AleContext:
    """Everything the handlers read and the driver updates."""
    delimiter: str = DEFAULT_DELIMITER
    headers: List[str] = field(default_factory=list)
    records: List[Dict[str, str]] = field(default_factory=list)
    directives: Dict[str, str] = field(default_factory=dict)

    def apply(self, effect: Optional[Effect]) -> None:
        if effect is None:
            return
        if isinstance(effect, SetDelimiter):
            self.delimiter = effect.delimiter
        elif isinstance(effect, SetDirective):
            self.directives[effect.name] = effect.value
        elif isinstance(effect, SetHeaders):
            self.headers = list(effect.headers)
        elif isinstance(effect, AppendRecord):
            self.records.append(effect.record)


Transition = Tuple[AleState, Optional[Effect]]


def split_plain(line: str, delimiter: str) -> List[str]:
    """
    Split on every delimiter, keeping empty fields.

    No quote handling: "a\\t\\tc" -> ["a", "", "c"].
    """
    return line.split(delimiter)


# =============================================================================
# Handlers
# =============================================================================


def on_header(line: str, context: AleContext) -> Transition:
    trimmed = line.strip()

    match = _FIELD_DELIM.match(trimmed)
    if match:
        if match.group(1).strip() == "COMMAS":
            return AleState.HEADER, SetDelimiter(",")
        return AleState.HEADER, None

    if trimmed == COLUMN_MARKER:
        return AleState.COLUMN, None

    directive = _DIRECTIVE.match(trimmed)
    if directive:
        return AleState.HEADER, SetDirective(directive.group(1), directive.group(2).strip())

    return AleState.HEADER, None


def on_column(line: str, context: AleContext) -> Transition:
    headers = [h.strip() for h in split_plain(line, context.delimiter)]
    return AleState.AWAITING_DATA, SetHeaders(headers)


def on_awaiting_data(line: str, context: AleContext) -> Transition:
    if line.strip() == DATA_MARKER:
        return AleState.DATA, None
    return AleState.AWAITING_DATA, None


def on_data(line: str, context: AleContext) -> Transition:
    if line.strip() == "":
        return AleState.DATA, None

    values = split_plain(line, context.delimiter)
    record = {}
    for i, header in enumerate(context.headers):
        record[header] = values[i].strip() if i < len(values) else ""
    return AleState.DATA, AppendRecord(record)


TRANSITIONS: Dict[AleState, Callable[[str, AleContext], Transition]] = {
    AleState.HEADER: on_header,
    AleState.COLUMN: on_column,
    AleState.AWAITING_DATA: on_awaiting_data,
    AleState.DATA: on_data,
}


# =============================================================================
# Driver
# =============================================================================


def run_state_machine(lines: Iterable[str]) -> AleContext:
    """Feed every line through the transition table and return the final context."""
    state = AleState.HEADER
    context = AleContext()
    for line in lines:
        state, effect = TRANSITIONS[state](line.replace("\r", ""), context)
        context.apply(effect)
    return context


def _build_table(lines: Iterable[str]) -> Table:
    context = run_state_machine(lines)

    if not context.headers or not context.records:
        raise StructureError(MISSING_SECTIONS)

    return Table(
        headers=context.headers,
        records=context.records,
        metadata=context.directives,
    )


def parse_ale_lines(lines: Iterable[str]) -> Tuple[Optional[Table], Optional[str]]:
    """
    Parse exchange-log lines.

    Returns:
        (Table, None) on success, (None, message) when no headers or no
        records were found
    """
    try:
        table = _build_table(lines)
    except StructureError as e:
        logger.warning("%s", e)
        return None, str(e)

    logger.debug("parsed %d column(s), %d record(s)", len(table.headers), len(table.records))
    return table, None


def parse_ale_string(content: str) -> Tuple[Optional[Table], Optional[str]]:
    """Parse exchange-log text."""
    return parse_ale_lines(physical_lines(content))


def parse_ale_file(filepath: str) -> Tuple[Optional[Table], Optional[str]]:
    """
    Parse an exchange-log file.

    Returns:
        (Table, None) on success, (None, message) on an open or structure failure
    """
    try:
        content = read_text(filepath)
    except SourceOpenError as e:
        logger.warning("%s", e)
        return None, f"Error: {e}"
    return parse_ale_string(content)


__all__ = [
    "AleState",
    "AleContext",
    "TRANSITIONS",
    "run_state_machine",
    "parse_ale_lines",
    "parse_ale_string",
    "parse_ale_file",
]
