from pathlib import Path
import re

from modelfile_scanner.scanner import (
    DEFAULT_TABLE,
    DirectiveTable,
    InvalidRoleError,
    MessageRole,
    Record,
    Scanner,
    ScanState,
)
from modelfile_scanner.scanner import render as render_records

_PARAMETER_NAME = re.compile(r"^[A-Za-z0-9_]+$")
_FIELDS = ("system", "template", "adapter", "license")


class ModelFile:
    """Structured view of a Modelfile, see https://github.com/ollama/ollama/blob/main/docs/modelfile.md.

    Values are kept exactly as scanned; nothing is coerced or range checked.
    """

    def __init__(self, table: DirectiveTable = DEFAULT_TABLE) -> None:
        self.table = table
        self.base: str | None = None  # FROM
        self.parameters: dict[str, str | list[str]] = {}
        self.system: str | None = None
        self.template: str | None = None
        self.adapter: str | None = None
        self.license: str | None = None
        self.messages: list[dict[str, str]] = []
        # directives known to the table that have no field here
        self.commands: list[Record] = []

    def set_base(self, base: str) -> "ModelFile":
        self.base = base
        return self

    def set_parameter(self, key: str, value: str) -> "ModelFile":
        """Set a parameter; repeating a key (e.g. ``stop``) collects the values into a list."""
        if not _PARAMETER_NAME.match(key):
            raise ValueError(f"invalid parameter name {key!r}")
        key = key.lower()
        current = self.parameters.get(key)
        if current is None:
            self.parameters[key] = value
        elif isinstance(current, list):
            current.append(value)
        else:
            self.parameters[key] = [current, value]
        return self

    def set_system(self, system: str) -> "ModelFile":
        self.system = system
        return self

    def set_template(self, template: str) -> "ModelFile":
        self.template = template
        return self

    def set_adapter(self, adapter: str) -> "ModelFile":
        self.adapter = adapter
        return self

    def set_license(self, license_text: str) -> "ModelFile":
        self.license = license_text
        return self

    def add_message(self, role: str | MessageRole, content: str) -> "ModelFile":
        role = role.value if isinstance(role, MessageRole) else role
        if self.table.message_name is None:
            raise LookupError("directive table has no message directive")
        if not self.table.is_role(role):
            raise InvalidRoleError(self.table.roles, role)
        self.messages.append({"role": role, "content": content})
        return self

    def add_command(self, command: Record) -> "ModelFile":
        self.commands.append(command)
        return self

    def to_records(self) -> list[Record]:
        records: list[Record] = []
        if self.base is not None:
            records.append(Record(self.table.base, self.base))
        for key, value in self.parameters.items():
            values = value if isinstance(value, list) else [value]
            records.extend(Record(key, v) for v in values)
        for name in _FIELDS:
            value = getattr(self, name)
            if value is not None:
                records.append(Record(name, value))
        for msg in self.messages:
            records.append(Record(self.table.message_name, f"{msg['role']}: {msg['content']}"))
        records.extend(self.commands)
        return records

    def render(self) -> str:
        return render_records(self.to_records(), self.table)

    @classmethod
    def from_records(cls, records: list[Record], table: DirectiveTable = DEFAULT_TABLE) -> "ModelFile":
        model = cls(table)
        for record in records:
            if record.name == table.base:
                model.set_base(record.value)
            elif (message := table.split_message(record.name, record.value)) is not None:
                model.add_message(*message)
            elif record.name in table.directives and record.name in _FIELDS:
                setattr(model, record.name, record.value)
            elif record.name in table.directives and table.route(record.name) is not ScanState.MESSAGE_ROLE:
                model.add_command(record)
            else:
                model.set_parameter(record.name, record.value)
        return model

    @classmethod
    def from_string(cls, text: str, table: DirectiveTable = DEFAULT_TABLE) -> "ModelFile":
        return cls.from_records(Scanner(table).scan_string(text), table)

    @classmethod
    def from_file(cls, filepath: str | Path, table: DirectiveTable = DEFAULT_TABLE) -> "ModelFile":
        with Path(filepath).open(encoding="utf-8") as f:
            return cls.from_records(Scanner(table).scan(f), table)
