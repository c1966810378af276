"""Command descriptors that the shell dispatches to."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class CommandKind(IntEnum):
    """Calling convention of a command function."""

    S = 1  # func(shell)
    C = 2  # func(shell, argc)
    CV = 3  # func(shell, argv)
    CVE = 4  # func(shell, argv, envp)


@dataclass(frozen=True)
class Command:
    """A named command with its function and calling convention."""

    name: str
    func: Callable[..., int]
    kind: CommandKind = CommandKind.CV
    display: bool = True
    script: bool = False

    def run(
        self,
        shell: Any,
        argv: Sequence[str] | None = None,
        envp: Sequence[str] | None = None,
    ) -> int:
        """Call the function with the arguments its kind expects."""
        args = list(argv) if argv is not None else []
        if self.kind is CommandKind.S:
            return self.func(shell)
        if self.kind is CommandKind.C:
            return self.func(shell, len(args))
        if self.kind is CommandKind.CV:
            return self.func(shell, args)
        return self.func(shell, args, list(envp) if envp is not None else [])