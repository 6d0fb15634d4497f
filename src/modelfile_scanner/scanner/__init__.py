"""The Modelfile directive scanner.

- `Scanner`: the character-level state machine producing `Record`s.
- `DirectiveTable`: keyword aliases, routing and MESSAGE roles it scans with.
- `render`: writes records back out as Modelfile text.
"""

from modelfile_scanner.scanner.core import Scanner, parse, parse_string
from modelfile_scanner.scanner.directives import DEFAULT_TABLE, DirectiveTable, MessageRole
from modelfile_scanner.scanner.errors import (
    InvalidRoleError,
    MissingBaseError,
    MissingValueError,
    ModelfileError,
    UnexpectedCharacterError,
    UnterminatedMultilineError,
)
from modelfile_scanner.scanner.record import Record, render
from modelfile_scanner.scanner.state import ScanState

__all__ = [
    "DEFAULT_TABLE",
    "DirectiveTable",
    "InvalidRoleError",
    "MessageRole",
    "MissingBaseError",
    "MissingValueError",
    "ModelfileError",
    "Record",
    "ScanState",
    "Scanner",
    "UnexpectedCharacterError",
    "UnterminatedMultilineError",
    "parse",
    "parse_string",
    "render",
]
