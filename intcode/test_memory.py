"""Tape and program loader tests."""

from __future__ import annotations

import pytest

from intcode.errors import AddressFault, LoadError
from intcode.loader import load_program, parse_inputs
from intcode.memory import Tape


# ---------------------------------------------------------------------------
# Tape
# ---------------------------------------------------------------------------

def test_tape_reads_zero_past_end():
    tape = Tape([1, 2, 3])
    assert tape.read(10) == 0
    assert len(tape) == 11


def test_tape_write_past_end():
    tape = Tape([1])
    tape.write(5, -7)
    assert tape.snapshot() == [1, 0, 0, 0, 0, -7]
    assert tape.read(5) == -7


@pytest.mark.parametrize("addr", [-1, -1000])
def test_tape_negative_address(addr):
    tape = Tape([1, 2])
    with pytest.raises(AddressFault):
        tape.read(addr)
    with pytest.raises(AddressFault):
        tape.write(addr, 0)


def test_tape_copy_is_independent():
    tape = Tape([1, 2, 3])
    clone = tape.copy()
    clone.write(0, 9)
    assert tape.read(0) == 1


def test_parse_signed_integers():
    assert Tape.parse("1,-2,+3,1125899906842624").snapshot() == [1, -2, 3, 1125899906842624]


@pytest.mark.parametrize("text, token, index", [
    ("1,x,3", "x", 1),
    ("1,,3", "", 1),
    ("1,2.5", "2.5", 1),
    ("1, 0,0,0,99", " 0", 1),
    ("1_0,0,0,0,99", "1_0", 0),
    ("1,0,0,0,\u0669\u0669", "\u0669\u0669", 4),
    ("1,0x10", "0x10", 1),
    ("1,--2", "--2", 1),
])
def test_parse_rejects_bad_tokens(text, token, index):
    with pytest.raises(LoadError) as info:
        Tape.parse(text)
    assert info.value.token == token
    assert info.value.index == index
    assert isinstance(info.value, ValueError)


def test_load_program_strips_whitespace(tmp_path):
    path = tmp_path / "program.txt"
    path.write_text("1,0,0,0,99\n")
    assert load_program(path).snapshot() == [1, 0, 0, 0, 99]
    assert load_program("  104,1,99 \n").snapshot() == [104, 1, 99]


def test_load_program_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_program(tmp_path / "missing.txt")


def test_parse_inputs():
    assert parse_inputs("1, 2 -3\n4") == [1, 2, -3, 4]
    assert parse_inputs("") == []


@pytest.mark.parametrize("text, token", [
    ("1,two", "two"),
    ("1_0", "1_0"),
    ("٩", "٩"),
])
def test_parse_inputs_rejects_bad_tokens(text, token):
    with pytest.raises(LoadError) as info:
        parse_inputs(text)
    assert info.value.token == token
