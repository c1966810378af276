"""Standard built-in commands and the interactive entry point."""

from __future__ import annotations

import argparse
import os
import re
import sys
from collections.abc import Iterator, MutableSequence, Sequence
from contextlib import contextmanager
from typing import Any, TextIO

from evshell.command import Command, CommandKind
from evshell.shell import NOT_FOUND, Shell
from evshell.varpool import VarPool

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - platforms without termios
    termios = None  # type: ignore[assignment]
    tty = None  # type: ignore[assignment]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

# Select Graphic Rendition codes by position; blanks are placeholders.
_SGR_MODES = ("sgr0", "bold", "dim", "smso", "", "blink", "", "rev", "invis")
_ERASE_LINE_MODES = ("el", "el1", "el2")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def input_str(sh: Shell, argv: Sequence[str]) -> int:
    """Prompt for one line, run it, and report unknown commands."""
    sh.write("\n")
    sh.write(">")
    line = sh.read_line()
    status = sh.system(line)
    if status == NOT_FOUND:
        sh.write("Error:Command not found\n")
    return status


def set_command(sh: Shell, argv: Sequence[str]) -> int:
    """``set key value``: store a variable."""
    args = list(argv[1:])
    if len(args) != 2:
        sh.write("usage\n")
        sh.write("  set [key] [value]\n")
        return -1
    try:
        sh.putenv(f"{args[0]}={args[1]}")
    except ValueError:
        return -1
    return 0


def echo(sh: Shell, argv: Sequence[str]) -> int:
    """Write every argument followed by a space."""
    for word in argv[1:]:
        sh.write(word)
        sh.write(" ")
    return 0


def _tput_mode(sh: Shell, option: str) -> int:
    for code, name in enumerate(_SGR_MODES):
        if (code == 4 and option == "smul") or option == "rmul":
            sh.write("\33[4m")
            return 1
        if code == 6:
            continue
        if option == name:
            sh.write(f"\33[{code}m")
            return 1
    for code, name in enumerate(_ERASE_LINE_MODES):
        if option == name:
            sh.write(f"\33[{code}K")
            return 1
    if option == "civis":
        sh.write("\33[?25l")
        return 1
    if option == "cvvis":
        sh.write("\33[?25h")
        return 0
    return -1


def tput(sh: Shell, argv: Sequence[str]) -> int:
    """Emit terminal control sequences by capability name."""
    args = list(argv[1:])
    option = args[0] if args else ""
    params = [_atoi(arg) for arg in args[1:]]
    if not params:
        return _tput_mode(sh, option)
    if len(params) == 1 and 0 <= params[0] <= 9 and params[0] != 8:
        if option == "setaf":
            sh.write(f"\33[{30 + params[0]}m")
        elif option == "setab":
            sh.write(f"\33[{40 + params[0]}m")
        else:
            return -1
        return 0
    if len(params) == 2 and option == "cup":
        sh.write(f"\33[{params[0]};{params[1]}H")
        return 0
    return -1


def _climan_usage(sh: Shell) -> int:
    sh.write("usage\n")
    sh.write("  climan [options]\n")
    sh.write("options\n")
    sh.write("  -H,--help         =show help\n")
    sh.write("  -Q [--unvisible]  =show usage commands\n")
    return -1


def _show_commands(sh: Shell, include_hidden: bool) -> int:
    for command in sh.commands:
        if include_hidden or command.display:
            sh.write(command.name)
            sh.write("\n")
    return 0


def climan(sh: Shell, argv: Sequence[str]) -> int:
    """List registered commands or show usage."""
    rest = list(argv[1:])

    def take(key: str, remaining: int) -> bool:
        if rest and rest[0] == key and len(rest) - 1 == remaining:
            del rest[0]
            return True
        return False

    if take("-H", 0) or take("--help", 0):
        _climan_usage(sh)
        return 0
    if take("-Q", 0):
        return _show_commands(sh, False)
    if take("-Q", 1) and take("--unvisible", 0):
        return _show_commands(sh, True)
    return _climan_usage(sh)


INPUT_STR = Command("_INPUT_STR_", input_str, CommandKind.CV, display=False, script=True)
SET = Command("set", set_command, CommandKind.CV, display=False, script=True)
ECHO = Command("echo", echo, CommandKind.CV, display=False, script=True)
TPUT = Command("tput", tput, CommandKind.CV, display=False, script=True)
CLIMAN = Command("climan", climan, CommandKind.CV, display=True, script=False)


def load_commands(pool: MutableSequence[Command]) -> None:
    """Append the standard commands to ``pool``."""
    pool.extend((INPUT_STR, SET, ECHO, CLIMAN, TPUT))


def load_variables(pool: VarPool) -> None:
    """Set the standard variables in ``pool``."""
    pool.set("USER", "root")
    pool.set("DIR", "/")


class _Console:
    """Terminal over text streams."""

    def __init__(self, stdin: TextIO, stdout: TextIO) -> None:
        self._stdin = stdin
        self._stdout = stdout

    def read(self, size: int) -> str:
        return self._stdin.read(size).replace("\x7f", "\b")

    def write(self, text: str) -> int:
        self._stdout.write(text)
        return len(text)

    def flush(self) -> None:
        self._stdout.flush()


@contextmanager
def _cbreak(stream: Any) -> Iterator[None]:
    fd = None
    if termios is not None:
        try:
            candidate = stream.fileno()
        except (AttributeError, OSError, ValueError):
            candidate = None
        if candidate is not None and os.isatty(candidate):
            fd = candidate
    if fd is None:
        yield
        return
    saved = termios.tcgetattr(fd)
    tty.setcbreak(fd)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the shell interactively, or a single command with ``-c``."""
    parser = argparse.ArgumentParser(prog="evshell", description="Small command shell.")
    parser.add_argument("-c", dest="command", help="run one command line and exit")
    options = parser.parse_args(argv)

    commands: list[Command] = []
    variables = VarPool()
    load_commands(commands)
    load_variables(variables)
    console = _Console(sys.stdin, sys.stdout)
    shell = Shell(console, commands, variables)

    if options.command is not None:
        status = shell.push(options.command)
        console.flush()
        if status == NOT_FOUND:
            sys.stderr.write("Error:Command not found\n")
        return status

    with _cbreak(sys.stdin):
        while True:
            try:
                shell.run()
            except (EOFError, KeyboardInterrupt):
                console.write("\n")
                console.flush()
                break
            console.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())