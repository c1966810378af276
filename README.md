# evshell

A small shell you can embed in a program. It reads command lines from a
stream, expands variables and command substitutions, and dispatches to
commands you register as ordinary Python callables.

## Syntax

`Shell.push` runs the first line of the text it is given:

- Spaces separate the command name from its arguments.
- `${name}` expands to the value of a shell variable (empty if it is unset).
- `$(cmd)` runs `cmd` and expands to everything it printed.
- `'text'` keeps spaces, quotes, braces, parentheses, `$` and backslashes
  literal. Single quotes are handled before substitutions, so `'${x}'`
  stays as written.
- `"text"` keeps spaces and the other special characters inside one
  argument. Double quotes are handled after substitutions, so `"${x}"` is
  still expanded.
- A backslash escapes the next character: `\ `, `\"`, `\'`, `\{`, `\}`,
  `\(`, `\)`, `\$` and `\\` give the character itself, `\n` gives a space.
  A backslash before any other character is dropped together with it.

`Shell.system` skips all of this and only splits the line on spaces.

## Built-in commands

These live in `evshell.syscli` and are added to a pool with `load_commands`.

| Command  | Purpose                                                                 |
|----------|-------------------------------------------------------------------------|
| `set`    | `set key value` assigns a variable                                      |
| `echo`   | prints each argument followed by a space                                |
| `tput`   | emits terminal control sequences (`bold`, `smul`, `el`, `civis`, `setaf 1`, `setab 2`, `cup 2 3`) |
| `climan` | `-Q` lists visible commands, `-Q --unvisible` lists all, `-H`/`--help` shows usage |

`_INPUT_STR_` is the hidden command behind the prompt: it prints `>`, reads
one line with the line editor and runs it, printing
`Error:Command not found` when the command is unknown. Of the built-ins,
only `climan` is marked visible.

`load_variables` sets `USER=root` and `DIR=/`.

## Running the shell

```
pip install .
evshell
```

This starts a prompt on the terminal with the built-in commands and
variables loaded. On terminals that support it, input is read character by
character; backspace and the left/right arrow codes (sent as a `\x00` or
`\xe0` prefix followed by `K` or `M`) edit the line. End of input or Ctrl-C
leaves the shell.

To run a single line and exit with its status:

```
evshell -c "echo hello world"
```

## Embedding

```python
import io

from evshell.command import Command, CommandKind
from evshell.shell import Shell
from evshell.syscli import load_commands, load_variables
from evshell.varpool import VarPool

commands = []
variables = VarPool()
load_commands(commands)
load_variables(variables)

shell = Shell(io.StringIO(), commands, variables)
shell.push("set greeting hello")
shell.push("echo ${greeting} world")
print(shell.catch)            # "hello world "
print(shell.getenv("USER"))   # "root"


def shout(sh, argv):
    sh.write(" ".join(argv[1:]).upper())
    return 0


shell.register(Command("shout", shout, CommandKind.CV))
shell.push("echo $(shout quiet)")
print(shell.catch)            # "QUIET "
```

A `Command` receives arguments according to its `CommandKind`: `S` gets only
the shell, `C` the argument count, `CV` the argument list (name first), and
`CVE` the argument list plus the list of variable values. Commands write
through `Shell.write`; that output is recorded in `Shell.catch` while the
command runs. A command that cannot be found gives status `127`.

`VarPool` is an ordered store of `key=value` entries. `set(key, value,
overwrite=False)` always appends a new entry, and lookups return the first
entry with that key. Keys may not contain `=` or newlines, and values may
not contain newlines.

## What it does not do

There are no pipes, no `&&`/`||`, no job control and no history. Only
registered Python commands can be run; the shell does not start external
programs or look anything up on `PATH`.

## Tests

```
pip install .[test]
pytest
```