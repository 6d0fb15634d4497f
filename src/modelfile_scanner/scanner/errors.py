from collections.abc import Sequence

from modelfile_scanner.scanner.state import ScanState


class ModelfileError(ValueError):
    """Base class for Modelfile syntax errors.

    ``str(error)`` is the user-facing diagnostic. ``line`` and ``column`` are
    1-based and point at the offending character, or one past the last
    character when the input ended early.
    """

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class MissingValueError(ModelfileError):
    def __init__(self, partial: str, line: int | None = None, column: int | None = None) -> None:
        super().__init__(f"missing value for [{partial}]", line, column)
        self.partial = partial


class InvalidRoleError(ModelfileError):
    def __init__(self, roles: Sequence[str], role: str = "", line: int | None = None, column: int | None = None) -> None:
        super().__init__(f"role must be one of {_one_of(roles)}", line, column)
        self.role = role


class UnterminatedMultilineError(ModelfileError):
    def __init__(self, line: int | None = None, column: int | None = None) -> None:
        super().__init__("unterminated multiline string", line, column)


class MissingBaseError(ModelfileError):
    def __init__(self) -> None:
        super().__init__("no FROM line")


class UnexpectedCharacterError(ModelfileError):
    def __init__(self, char: str, state: ScanState, line: int | None = None, column: int | None = None) -> None:
        super().__init__(f"unexpected character {char!r} in {state.value} state", line, column)
        self.char = char
        self.state = state


def _one_of(choices: Sequence[str]) -> str:
    quoted = [f'"{choice}"' for choice in choices]
    if len(quoted) <= 2:
        return " or ".join(quoted)
    return f"{', '.join(quoted[:-1])}, or {quoted[-1]}"
