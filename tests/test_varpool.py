import pytest

from evshell.varpool import VarPool


@pytest.fixture
def pool():
    p = VarPool()
    p.set("USER", "root")
    p.set("DIR", "/")
    return p


def test_pool_serialisation(pool):
    assert pool.pool() == "USER=root\nDIR=/\n"


def test_empty_pool():
    p = VarPool()
    assert len(p) == 0
    assert p.pool() == ""
    assert p.entries() == []


def test_get_by_key(pool):
    assert pool.get("USER") == "root"
    assert pool.get("DIR") == "/"


def test_get_missing_returns_default(pool):
    assert pool.get("HOME") is None
    assert pool.get("HOME", "") == ""


def test_len_and_iter(pool):
    assert len(pool) == 2
    assert list(pool) == ["USER", "DIR"]
    assert "USER" in pool
    assert "HOME" not in pool


def test_overwrite_replaces_in_place(pool):
    pool.set("USER", "admin")
    assert pool.get("USER") == "admin"
    assert len(pool) == 2
    assert pool.entries() == [("USER", "admin"), ("DIR", "/")]


def test_no_overwrite_appends_hidden_duplicate(pool):
    pool.set("USER", "guest", overwrite=False)
    assert len(pool) == 3
    assert pool.get("USER") == "root"
    assert pool.get_at(2) == "guest"


def test_erase_first_duplicate_reveals_second(pool):
    pool.set("USER", "guest", overwrite=False)
    pool.erase("USER")
    assert pool.get("USER") == "guest"
    assert len(pool) == 2


def test_get_at_and_set_at(pool):
    assert pool.get_at(0) == "root"
    pool.set_at(1, "/home")
    assert pool.get("DIR") == "/home"


def test_index_out_of_range(pool):
    with pytest.raises(IndexError):
        pool.get_at(2)
    with pytest.raises(IndexError):
        pool.get_at(-1)
    with pytest.raises(IndexError):
        pool.set_at(5, "x")
    with pytest.raises(IndexError):
        pool.erase_at(2)


def test_erase_at(pool):
    pool.erase_at(0)
    assert pool.entries() == [("DIR", "/")]
    assert pool.pool() == "DIR=/\n"


def test_erase_missing_key(pool):
    with pytest.raises(KeyError):
        pool.erase("HOME")


def test_empty_value_round_trip():
    p = VarPool()
    p.set("EMPTY", "")
    assert p.get("EMPTY", "missing") == ""
    assert p.pool() == "EMPTY=\n"


def test_invalid_names_and_values():
    p = VarPool()
    with pytest.raises(ValueError):
        p.set("a=b", "c")
    with pytest.raises(ValueError):
        p.set("a", "line\nbreak")
    assert len(p) == 0


def test_erase_all_then_reinsert(pool):
    pool.erase("USER")
    pool.erase("DIR")
    assert len(pool) == 0
    pool.set("DIR", "/")
    assert pool.entries() == [("DIR", "/")]