"""Line interpreter: escapes, quoting, variable and command substitution."""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import IntEnum
from typing import Any, Protocol

from evshell.command import Command, CommandKind
from evshell.varpool import VarPool

SPEC_SPACE = "[_SPC_"
SPEC_LINE = "[_LINE_"
SPEC_QUOTE = "[_QT_"
SPEC_SINGLE_QUOTE = "[_SQT_"
SPEC_OPEN_BRACE = "[_PBRC_"
SPEC_CLOSE_BRACE = "[_BBRC_"
SPEC_OPEN_PAREN = "[_PBRK_"
SPEC_CLOSE_PAREN = "[_BBRK_"
SPEC_DOLLAR = "[_DL_"
SPEC_BACKSLASH = "[_BS_"

NOT_FOUND = 127

_SPECS = {
    " ": SPEC_SPACE,
    "n": SPEC_LINE,
    '"': SPEC_QUOTE,
    "'": SPEC_SINGLE_QUOTE,
    "{": SPEC_OPEN_BRACE,
    "}": SPEC_CLOSE_BRACE,
    "(": SPEC_OPEN_PAREN,
    ")": SPEC_CLOSE_PAREN,
    "$": SPEC_DOLLAR,
    "\\": SPEC_BACKSLASH,
}

_TRANSLATIONS = (
    (SPEC_SPACE, " "),
    (SPEC_LINE, " "),
    (SPEC_QUOTE, '"'),
    (SPEC_SINGLE_QUOTE, "'"),
    (SPEC_OPEN_BRACE, "{"),
    (SPEC_CLOSE_BRACE, "}"),
    (SPEC_OPEN_PAREN, "("),
    (SPEC_CLOSE_PAREN, ")"),
    (SPEC_DOLLAR, "$"),
    (SPEC_BACKSLASH, "\\"),
)

_ESCAPE = re.compile(r"\\(.?)", re.DOTALL)

# Pools a shell starts from when none are given.
system_commands: list[Command] = []
system_variables = VarPool()


class Terminal(Protocol):
    """What the shell needs from its input/output stream."""

    def read(self, size: int) -> str: ...

    def write(self, text: str) -> Any: ...


class ShellState(IntEnum):
    IDLE = 0
    RUNNING = 1


def spec_for(char: str) -> str | None:
    """Return the placeholder token for a special character, or None."""
    return _SPECS.get(char)


def translate(text: str) -> str:
    """Turn placeholder tokens back into the characters they stand for."""
    for token, char in _TRANSLATIONS:
        text = text.replace(token, char)
    return text


def unescape(text: str) -> str:
    """Replace backslash escapes with placeholder tokens.

    An escape of a character with no placeholder is dropped entirely.
    """
    return _ESCAPE.sub(lambda match: spec_for(match.group(1)) or "", text)


def _protect_char(char: str) -> str:
    spec = spec_for(char)
    return char if spec is None or spec == SPEC_LINE else spec


def protect_quoted(text: str, quote: str) -> str:
    """Strip each pair of ``quote`` and hide the special characters between them."""
    start = text.find(quote)
    while start != -1:
        end = text.find(quote, start + 1)
        if end == -1:
            break
        inner = "".join(_protect_char(char) for char in text[start + 1 : end])
        text = text[:start] + inner + text[end + 1 :]
        start = text.find(quote)
    return text


def _copy_pool(pool: VarPool) -> VarPool:
    copy = VarPool()
    for key, value in pool.entries():
        copy.set(key, value, overwrite=False)
    return copy


class Shell:
    """A small command interpreter bound to a terminal stream."""

    def __init__(
        self,
        io: Terminal,
        commands: Iterable[Command] | None = None,
        variables: VarPool | None = None,
    ) -> None:
        self._io = io
        self._commands: list[Command] = []
        self._variables = VarPool()
        self._echo = True
        self._catch = ""
        self._state = ShellState.IDLE
        self._skip_lf = False
        self.line_editing = True
        self.begin(commands, variables)

    def begin(
        self,
        commands: Iterable[Command] | None = None,
        variables: VarPool | None = None,
    ) -> None:
        """Load copies of the given command and variable pools."""
        self._commands = list(system_commands if commands is None else commands)
        self._variables = _copy_pool(system_variables if variables is None else variables)

    def register(self, command: Command) -> Shell:
        """Add a command and return the shell for chaining."""
        self._commands.append(command)
        return self

    __lshift__ = register

    def find_command(self, name: str) -> Command | None:
        """Return the first registered command called ``name``."""
        return next((c for c in self._commands if c.name == name), None)

    def _flush(self) -> None:
        flush = getattr(self._io, "flush", None)
        if flush is not None:
            flush()

    def write(self, text: Any) -> int:
        """Write output, recording it while a command runs."""
        text = str(text)
        if self._state is ShellState.RUNNING:
            self._catch += text
        if not self._echo:
            return 0
        self._io.write(text)
        return len(text)

    def _tty(self) -> str:
        chars: list[str] = []
        index = 0
        consumed = False
        while True:
            char = self._io.read(1)
            if not char:
                if not consumed:
                    raise EOFError("end of input")
                break
            if not self.line_editing:
                consumed = True
                chars.append(char)
                if char == "\r":
                    break
                continue
            if self._skip_lf:
                self._skip_lf = False
                if char == "\n":
                    continue
            consumed = True
            if char in ("\x00", "\xe0"):
                code = self._io.read(1)
                if code == "K" and index:
                    index -= 1
                    self._io.write("\033[1D")
                elif code == "M" and len(chars) > index:
                    index += 1
                    self._io.write("\033[1C")
            elif char == "\b":
                if index:
                    del chars[index - 1]
                    index -= 1
                    self._io.write("\033[1D\033[1P")
            elif char in ("\r", "\n"):
                self._skip_lf = char == "\r"
                break
            else:
                chars.insert(index, char)
                index += 1
                self._io.write("".join(chars[index - 1 :]))
                if len(chars) > index:
                    self._io.write(f"\033[{len(chars) - index}D")
            self._flush()
        return "".join(chars)

    def read_line(self) -> str:
        """Read one edited line from the terminal and echo a newline."""
        line = self._tty()
        self._io.write("\n")
        return line

    def system(self, cmd: str, echo: bool = True) -> int:
        """Run a space-separated command line; 127 if the command is unknown."""
        words = [translate(word) for word in cmd.split(" ")]
        command = self.find_command(words[0])
        if command is None:
            return NOT_FOUND
        envp = None
        if command.kind is CommandKind.CVE:
            envp = [value for _, value in self._variables.entries()]
        self._catch = ""
        self._echo = echo
        self._state = ShellState.RUNNING
        try:
            return command.run(self, words, envp)
        finally:
            self._echo = True
            self._state = ShellState.IDLE

    def _expand(self, text: str) -> str:
        while True:
            close_brace = text.find("}")
            close_paren = text.find(")")
            if close_paren != -1 and (close_brace == -1 or close_paren < close_brace):
                head, end, is_call = "$(", close_paren, True
            else:
                head, end, is_call = "${", close_brace, False
            start = text.find(head)
            if start == -1 or end == -1 or start > end:
                return text
            following = text.find(head, start + 1)
            while following != -1 and following < end:
                start = following
                following = text.find(head, start + 1)
            key = text[start + len(head) : end]
            if is_call:
                self.push(key)
                value = self._catch
            else:
                value = self._variables.get(key, "")
            text = text[:start] + value + text[end + 1 :]

    def push(self, cmd: str, echo: bool = True) -> int:
        """Interpret the first line of ``cmd`` and run it."""
        line = cmd.split("\n", 1)[0]
        line = line.replace(SPEC_LINE, " ")
        line = unescape(line)
        line = protect_quoted(line, "'")
        line = self._expand(line)
        line = protect_quoted(line, '"')
        return self.system(line, echo)

    def run(self) -> int:
        """Run the interactive input command once."""
        return self.system("_INPUT_STR_")

    @property
    def catch(self) -> str:
        """Output recorded during the last command run."""
        return self._catch

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def variables(self) -> VarPool:
        return self._variables

    @property
    def state(self) -> ShellState:
        return self._state

    def getenv(self, name: str) -> str | None:
        """Return a variable's value, or None if it is not set."""
        return self._variables.get(name)

    def setenv(self, name: str, value: str, overwrite: bool = True) -> None:
        self._variables.set(name, value, overwrite)

    def putenv(self, string: str) -> None:
        """Set a variable from a ``name=value`` string."""
        name, sep, value = string.partition("=")
        if not sep:
            raise ValueError(f"expected name=value, got {string!r}")
        self.setenv(name, value, True)