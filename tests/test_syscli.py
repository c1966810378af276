import pytest

from evshell.shell import Shell
from evshell.syscli import (
    climan,
    echo,
    input_str,
    load_commands,
    load_variables,
    main,
    set_command,
    tput,
)
from evshell.varpool import VarPool


class FakeTerminal:
    def __init__(self, text=""):
        self._input = list(text)
        self.output = ""

    def read(self, size):
        taken = "".join(self._input[:size])
        del self._input[:size]
        return taken

    def write(self, text):
        self.output += text
        return len(text)


def make_shell(text=""):
    commands = []
    variables = VarPool()
    load_commands(commands)
    load_variables(variables)
    term = FakeTerminal(text)
    return Shell(term, commands, variables), term


def test_load_commands_order():
    pool = []
    load_commands(pool)
    assert [c.name for c in pool] == ["_INPUT_STR_", "set", "echo", "climan", "tput"]


def test_load_commands_functions():
    pool = []
    load_commands(pool)
    funcs = {c.name: c.func for c in pool}
    assert funcs["echo"] is echo
    assert funcs["set"] is set_command
    assert funcs["tput"] is tput
    assert funcs["climan"] is climan
    assert funcs["_INPUT_STR_"] is input_str


def test_load_variables():
    pool = VarPool()
    load_variables(pool)
    assert pool.get("USER") == "root"
    assert pool.get("DIR") == "/"
    assert len(pool) == 2


def test_echo_writes_words_with_spaces():
    sh, term = make_shell()
    assert sh.system("echo a b") == 0
    assert term.output == "a b "
    assert sh.catch == "a b "


def test_echo_silent_still_caught():
    sh, term = make_shell()
    assert sh.system("echo a b", echo=False) == 0
    assert term.output == ""
    assert sh.catch == "a b "


def test_set_stores_variable():
    sh, _ = make_shell()
    assert sh.system("set key value") == 0
    assert sh.getenv("key") == "value"


def test_set_overwrites():
    sh, _ = make_shell()
    sh.system("set USER admin")
    assert sh.getenv("USER") == "admin"
    assert len(sh.variables) == 2


def test_set_wrong_arity_prints_usage():
    sh, term = make_shell()
    assert sh.system("set key") == -1
    assert term.output == "usage\n  set [key] [value]\n"
    assert sh.getenv("key") is None


def test_push_variable_substitution():
    sh, term = make_shell()
    sh.push("set name hi")
    assert sh.push("echo ${name}") == 0
    assert term.output == "hi "


def test_push_command_substitution():
    sh, term = make_shell()
    sh.push("set name hi")
    assert sh.push("echo $(echo ${name})", echo=False) == 0
    assert sh.catch.split() == ["hi"]


@pytest.mark.parametrize(
    "line, expected, status",
    [
        ("tput sgr0", "\33[0m", 1),
        ("tput bold", "\33[1m", 1),
        ("tput smul", "\33[4m", 1),
        ("tput rmul", "\33[4m", 1),
        ("tput el2", "\33[2K", 1),
        ("tput civis", "\33[?25l", 1),
        ("tput cvvis", "\33[?25h", 0),
    ],
)
def test_tput_modes(line, expected, status):
    sh, term = make_shell()
    assert sh.system(line) == status
    assert term.output == expected


def test_tput_cup_uses_given_numbers():
    sh, term = make_shell()
    assert sh.system("tput cup 2 5") == 0
    assert term.output == "\33[2;5H"


def test_tput_setaf_and_setab_differ_by_ten():
    sh, term = make_shell()
    assert sh.system("tput setaf 3", echo=False) == 0
    fg = sh.catch
    assert sh.system("tput setab 3", echo=False) == 0
    bg = sh.catch
    assert fg.startswith("\33[") and fg.endswith("m")
    assert int(bg[2:-1]) - int(fg[2:-1]) == 10


@pytest.mark.parametrize("line", ["tput setaf 8", "tput setaf 10", "tput nosuch", "tput bold 1", "tput cup 1"])
def test_tput_rejects(line):
    sh, term = make_shell()
    assert sh.system(line) == -1
    assert term.output == ""


def test_climan_lists_displayed_commands():
    sh, term = make_shell()
    assert sh.system("climan -Q") == 0
    assert term.output == "climan\n"


def test_climan_lists_all_commands():
    sh, term = make_shell()
    assert sh.system("climan -Q --unvisible") == 0
    assert term.output.splitlines() == ["_INPUT_STR_", "set", "echo", "climan", "tput"]


def test_climan_help():
    sh, term = make_shell()
    assert sh.system("climan --help") == 0
    assert term.output.startswith("usage\n  climan [options]\n")


def test_climan_unknown_option_shows_usage():
    sh, term = make_shell()
    assert sh.system("climan -X") == -1
    assert term.output.startswith("usage\n")


def test_input_str_runs_line():
    sh, term = make_shell("echo hi\r")
    assert sh.run() == 0
    assert term.output.startswith("\n>")
    assert term.output.endswith("hi ")


def test_input_str_unknown_command():
    sh, term = make_shell("bogus\r")
    assert sh.run() == 127
    assert term.output.endswith("Error:Command not found\n")


def test_input_str_eof_raises():
    sh, _ = make_shell("")
    with pytest.raises(EOFError):
        sh.run()


def test_main_single_command(capsys):
    assert main(["-c", "echo hello"]) == 0
    assert capsys.readouterr().out == "hello "


def test_main_unknown_command(capsys):
    assert main(["-c", "nope"]) == 127
    assert "Error:Command not found" in capsys.readouterr().err