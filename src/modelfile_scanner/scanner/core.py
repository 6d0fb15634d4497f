from io import StringIO
import string
from typing import TextIO

from modelfile_scanner.scanner.buffer import ValueBuffer
from modelfile_scanner.scanner.directives import DEFAULT_TABLE, DirectiveTable
from modelfile_scanner.scanner.errors import (
    InvalidRoleError,
    MissingBaseError,
    MissingValueError,
    ModelfileError,
    UnexpectedCharacterError,
    UnterminatedMultilineError,
)
from modelfile_scanner.scanner.reader import RuneReader
from modelfile_scanner.scanner.record import TRIPLE_QUOTE, Record
from modelfile_scanner.scanner.state import ScanState
from modelfile_scanner.utils import logging

logger = logging.get_logger(__name__)

_WORD = frozenset(string.ascii_letters + string.digits)
_KEY = _WORD | {"_"}
_SPACE = frozenset(" \t")
_NEWLINE = frozenset("\r\n")


class Scanner:
    """Turn Modelfile text into an ordered list of records.

    A scanner only holds its directive table, so one instance can serve any
    number of scans, including concurrent ones.
    """

    def __init__(self, table: DirectiveTable = DEFAULT_TABLE, chunk_size: int = 4096) -> None:
        self.table = table
        self.chunk_size = chunk_size

    def scan(self, stream: TextIO) -> list[Record]:
        return _Scan(self.table, RuneReader(stream, self.chunk_size)).run()

    def scan_string(self, text: str) -> list[Record]:
        return self.scan(StringIO(text))


class _Scan:
    """State for a single pass over one document."""

    def __init__(self, table: DirectiveTable, reader: RuneReader) -> None:
        self.table = table
        self.reader = reader
        self.state = ScanState.NAME
        self.buffer = ValueBuffer()
        self.name = ""
        self.prefix = ""
        self.records: list[Record] = []

    def run(self) -> list[Record]:
        logger.debug("Scanning Modelfile...")
        while (char := self.reader.read()) is not None:
            self.step(char)
        self.finish()
        if not any(record.name == self.table.base for record in self.records):
            raise self.fail(MissingBaseError())
        logger.debug("Scanned %d records.", len(self.records))
        return self.records

    def step(self, char: str) -> None:
        match self.state:
            case ScanState.NAME:
                self.scan_name(char)
            case ScanState.PARAMETER_KEY:
                self.scan_parameter_key(char)
            case ScanState.MESSAGE_ROLE:
                self.scan_message_role(char)
            case ScanState.VALUE:
                self.scan_value(char)
            case ScanState.QUOTED_VALUE:
                self.scan_quoted_value(char)
            case ScanState.COMMENT:
                if char in _NEWLINE:
                    self.reset()

    def finish(self) -> None:
        line, column = self.reader.line, self.reader.column + 1
        match self.state:
            case ScanState.VALUE:
                if self.buffer:
                    self.emit()
            case ScanState.QUOTED_VALUE:
                raise self.fail(UnterminatedMultilineError(line, column))
            case ScanState.NAME | ScanState.PARAMETER_KEY | ScanState.MESSAGE_ROLE:
                # an empty key or role at the end drops the pending directive
                if self.buffer:
                    raise self.fail(MissingValueError(self.buffer.text(), line, column))

    def scan_name(self, char: str) -> None:
        if char in _WORD:
            self.buffer.append(char)
        elif char == "#" and not self.buffer:
            self.state = ScanState.COMMENT
        elif char in _SPACE:
            if self.buffer:
                self.name = self.table.canonical(self.buffer.text())
                self.buffer.clear()
                self.state = self.table.route(self.name)
        elif char in _NEWLINE:
            if self.buffer:
                raise self.missing_value(self.buffer.text())
        else:
            raise self.unexpected(char)

    def scan_parameter_key(self, char: str) -> None:
        if char in _KEY:
            self.buffer.append(char)
        elif char in _SPACE:
            # runs of whitespace before the key are skipped
            if self.buffer:
                self.name = self.buffer.text().lower()
                self.buffer.clear()
                self.state = ScanState.VALUE
        elif char in _NEWLINE:
            raise self.missing_value(self.buffer.text() or self.name)
        else:
            raise self.unexpected(char)

    def scan_message_role(self, char: str) -> None:
        if char in _SPACE:
            if self.buffer:
                role = self.buffer.text()
                if not self.table.is_role(role):
                    raise self.fail(InvalidRoleError(self.table.roles, role, self.reader.line, self.reader.column))
                self.prefix = f"{role}: "
                self.buffer.clear()
                self.state = ScanState.VALUE
        elif char in _NEWLINE:
            raise self.missing_value(self.buffer.text() or self.name)
        else:
            self.buffer.append(char)

    def scan_value(self, char: str) -> None:
        if char in _NEWLINE:
            self.emit()
        elif not self.buffer and char + self.reader.peek(2) == TRIPLE_QUOTE:
            self.reader.skip(2)
            self.state = ScanState.QUOTED_VALUE
        else:
            self.buffer.append(char)

    def scan_quoted_value(self, char: str) -> None:
        if char + self.reader.peek(2) == TRIPLE_QUOTE:
            self.reader.skip(2)
            self.emit()
        else:
            self.buffer.append(char)

    def emit(self) -> None:
        record = Record(name=self.name, value=self.prefix + self.buffer.text())
        self.records.append(record)
        logger.debug("Scanned %s record.", record.name)
        self.reset()

    def reset(self) -> None:
        self.buffer.clear()
        self.name = ""
        self.prefix = ""
        self.state = ScanState.NAME

    def missing_value(self, partial: str) -> ModelfileError:
        return self.fail(MissingValueError(partial, self.reader.line, self.reader.column))

    def unexpected(self, char: str) -> ModelfileError:
        return self.fail(UnexpectedCharacterError(char, self.state, self.reader.line, self.reader.column))

    def fail(self, error: ModelfileError) -> ModelfileError:
        logger.debug("Scan failed at line %s, column %s: %s", error.line, error.column, error)
        return error


def parse(stream: TextIO) -> list[Record]:
    """Scan a Modelfile stream with the default directive table.

    Raises:
        ModelfileError: On the first syntax error, or when no FROM directive is present.
    """
    return Scanner().scan(stream)


def parse_string(text: str) -> list[Record]:
    return Scanner().scan_string(text)
