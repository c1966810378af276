"""An ordered pool of ``key=value`` variables used as a shell environment."""

from __future__ import annotations

from collections.abc import Iterator

_MISSING = object()


class VarPool:
    """Ordered variable store that keeps insertion order and allows duplicates.

    Lookups by key return the first matching entry. When ``set`` is called
    with ``overwrite=False`` a new entry is appended even if the key already
    exists, and that later entry stays hidden behind the earlier one.
    """

    def __init__(self) -> None:
        self._entries: list[list[str]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self._entries)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self._entries)

    def __repr__(self) -> str:
        return f"VarPool({self.entries()!r})"

    @staticmethod
    def _check(key: str | None, value: str) -> None:
        if key is not None and ("=" in key or "\n" in key):
            raise ValueError(f"invalid variable name: {key!r}")
        if "\n" in value:
            raise ValueError("variable values may not contain newlines")

    def _find(self, key: str) -> list[str] | None:
        return next((entry for entry in self._entries if entry[0] == key), None)

    def _at(self, index: int) -> list[str]:
        if index < 0 or index >= len(self._entries):
            raise IndexError(f"variable index out of range: {index}")
        return self._entries[index]

    def pool(self) -> str:
        """Return the pool serialised as ``key=value`` lines."""
        return "".join(f"{key}={value}\n" for key, value in self._entries)

    def set(self, key: str, value: str, overwrite: bool = True) -> None:
        """Set ``key``; with ``overwrite`` false a new entry is always appended."""
        key, value = str(key), str(value)
        self._check(key, value)
        if overwrite:
            entry = self._find(key)
            if entry is not None:
                entry[1] = value
                return
        self._entries.append([key, value])

    def set_at(self, index: int, value: str) -> None:
        """Replace the value of the entry at ``index``."""
        value = str(value)
        self._check(None, value)
        self._at(index)[1] = value

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value of the first entry named ``key``, or ``default``."""
        entry = self._find(key)
        return default if entry is None else entry[1]

    def get_at(self, index: int) -> str:
        """Return the value of the entry at ``index``."""
        return self._at(index)[1]

    def erase(self, key: str) -> None:
        """Remove the first entry named ``key``."""
        for position, (name, _) in enumerate(self._entries):
            if name == key:
                del self._entries[position]
                return
        raise KeyError(key)

    def erase_at(self, index: int) -> None:
        """Remove the entry at ``index``."""
        self._at(index)
        del self._entries[index]

    def entries(self) -> list[tuple[str, str]]:
        """Return all entries as ``(key, value)`` pairs in order."""
        return [(key, value) for key, value in self._entries]