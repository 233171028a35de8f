from typing import Protocol


class SessionStorage(Protocol):
    """Ephemeral key-value storage scoped to one browsing context.

    Survives a reload of the context and is emptied when the context ends.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemorySessionStorage:
    """In-process session storage; one instance stands for one tab."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def clear(self) -> None:
        """Drop everything, as when the browsing context closes."""
        self._values.clear()
