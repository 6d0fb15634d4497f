from collections.abc import Iterable
from typing import Annotated

from pydantic import Field
from pydantic.dataclasses import dataclass

from modelfile_scanner.scanner.directives import DEFAULT_TABLE, DirectiveTable
from modelfile_scanner.scanner.state import ScanState

TRIPLE_QUOTE = '"""'


@dataclass(frozen=True)
class Record:
    """One scanned ``(name, value)`` pair, e.g. ``Record("model", "llama3.2")``."""

    name: Annotated[str, Field(min_length=1)]
    value: str

    def render(self, table: DirectiveTable = DEFAULT_TABLE) -> str:
        keyword = table.keyword_for(self.name)
        message = table.split_message(self.name, self.value)
        if keyword is not None and message is not None:
            role, content = message
            return f"{keyword} {role} {quote(content)}"
        # a message-named record without a "<role>: " value came from PARAMETER
        if keyword is None or table.route(self.name) is ScanState.MESSAGE_ROLE:
            return f"{table.parameter_keyword} {self.name} {quote(self.value)}"
        return f"{keyword} {quote(self.value)}"


def quote(value: str) -> str:
    if "\n" in value or "\r" in value:
        return f"{TRIPLE_QUOTE}{value}{TRIPLE_QUOTE}"
    return value


def render(records: Iterable[Record], table: DirectiveTable = DEFAULT_TABLE) -> str:
    """Write records back out as Modelfile text, one directive per line."""
    return "".join(f"{record.render(table)}\n" for record in records)
