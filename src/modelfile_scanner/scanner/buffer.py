class ValueBuffer:
    """Append-only scratch text for the token or value being captured."""

    def __init__(self) -> None:
        self._chars: list[str] = []

    def append(self, char: str) -> None:
        self._chars.append(char)

    def text(self) -> str:
        return "".join(self._chars)

    def clear(self) -> None:
        self._chars.clear()

    def __len__(self) -> int:
        return len(self._chars)
