from modelfile_scanner.__about__ import __version__
from modelfile_scanner.scanner import (
    DEFAULT_TABLE,
    DirectiveTable,
    ModelfileError,
    Record,
    Scanner,
    parse,
    parse_string,
    render,
)

__all__ = [
    "DEFAULT_TABLE",
    "DirectiveTable",
    "ModelfileError",
    "Record",
    "Scanner",
    "__version__",
    "parse",
    "parse_string",
    "render",
]
