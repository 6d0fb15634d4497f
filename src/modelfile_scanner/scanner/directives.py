from enum import Enum

from pydantic import Field, field_validator
from pydantic.dataclasses import dataclass

from modelfile_scanner.scanner.state import ScanState

# https://github.com/ollama/ollama/blob/main/docs/modelfile.md#instructions


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


_FOLLOW_UP_STATES = (ScanState.VALUE, ScanState.PARAMETER_KEY, ScanState.MESSAGE_ROLE)


@dataclass(frozen=True)
class DirectiveTable:
    """Keyword behaviour of the scanner.

    ``aliases`` renames a directive keyword to its output name, ``routes`` picks the
    state that follows a directive name (anything unlisted reads a plain value),
    ``roles`` lists the accepted MESSAGE roles, ``base`` is the output name that
    must appear at least once, and ``directives`` are the output names rendered
    under their own keyword rather than as a PARAMETER.
    """

    aliases: dict[str, str] = Field(default_factory=lambda: {"from": "model"})
    routes: dict[str, ScanState] = Field(
        default_factory=lambda: {"parameter": ScanState.PARAMETER_KEY, "message": ScanState.MESSAGE_ROLE}
    )
    roles: tuple[str, ...] = tuple(role.value for role in MessageRole)
    base: str = "model"
    directives: tuple[str, ...] = ("model", "adapter", "license", "template", "system", "message")

    @field_validator("aliases", "routes")
    @classmethod
    def _lowercase_keys(cls, value: dict) -> dict:
        return {key.lower(): target for key, target in value.items()}

    @field_validator("aliases")
    @classmethod
    def _check_aliases(cls, value: dict[str, str]) -> dict[str, str]:
        for keyword, target in value.items():
            if not target:
                raise ValueError(f"alias for {keyword!r} must not be empty")
        return {keyword: target.lower() for keyword, target in value.items()}

    @field_validator("routes")
    @classmethod
    def _check_routes(cls, value: dict[str, ScanState]) -> dict[str, ScanState]:
        for name, state in value.items():
            if state not in _FOLLOW_UP_STATES:
                raise ValueError(f"directive {name!r} cannot be followed by the {state.value} state")
        return value

    def canonical(self, keyword: str) -> str:
        name = keyword.lower()
        return self.aliases.get(name, name)

    def route(self, name: str) -> ScanState:
        return self.routes.get(name, ScanState.VALUE)

    def is_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def parameter_keyword(self) -> str:
        for name, state in self.routes.items():
            if state is ScanState.PARAMETER_KEY:
                return name.upper()
        raise LookupError("directive table has no parameter keyword")

    @property
    def message_name(self) -> str | None:
        for name, state in self.routes.items():
            if state is ScanState.MESSAGE_ROLE:
                return name
        return None

    def split_message(self, name: str, value: str) -> tuple[str, str] | None:
        """Return ``(role, content)`` when ``name: value`` is a scanned MESSAGE record, else ``None``."""
        if self.route(name) is not ScanState.MESSAGE_ROLE:
            return None
        role, sep, content = value.partition(": ")
        if not sep or not self.is_role(role):
            return None
        return role, content

    def keyword_for(self, name: str) -> str | None:
        """Return the keyword that produces records called ``name``, or ``None`` for parameters."""
        for keyword, target in self.aliases.items():
            if target == name:
                return keyword.upper()
        if name in self.directives:
            return name.upper()
        return None


DEFAULT_TABLE = DirectiveTable()
