"""
Instruction decoder for Intcode words.

A word packs the opcode in its two low decimal digits and one addressing
mode digit per parameter above them:

    ABCDE
    1002  ->  DE = 02 (MUL), C = 0 (position), B = 1 (immediate), A = 0

All three mode digits are decoded and validated for every opcode, including
opcodes that take fewer than three parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

from .errors import InvalidOpcode, InvalidParamMode


class Opcode(IntEnum):
    ADD = 1
    MUL = 2
    INPUT = 3
    OUTPUT = 4
    JUMP_IF_TRUE = 5
    JUMP_IF_FALSE = 6
    LESS_THAN = 7
    EQUALS = 8
    ADJUST_RELATIVE_BASE = 9
    HALT = 99


class ParamMode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


class Role(Enum):
    READ = "read"
    WRITE = "write"


R, W = Role.READ, Role.WRITE

# Parameter roles per opcode; arity is the length of the tuple.
OPCODE_ROLES: dict[Opcode, tuple[Role, ...]] = {
    Opcode.ADD: (R, R, W),
    Opcode.MUL: (R, R, W),
    Opcode.INPUT: (W,),
    Opcode.OUTPUT: (R,),
    Opcode.JUMP_IF_TRUE: (R, R),
    Opcode.JUMP_IF_FALSE: (R, R),
    Opcode.LESS_THAN: (R, R, W),
    Opcode.EQUALS: (R, R, W),
    Opcode.ADJUST_RELATIVE_BASE: (R,),
    Opcode.HALT: (),
}

OPCODE_ARITY: dict[Opcode, int] = {op: len(roles) for op, roles in OPCODE_ROLES.items()}

MODE_DIGITS = 3

_OPCODES = {op.value: op for op in Opcode}
_MODES = {mode.value: mode for mode in ParamMode}


@dataclass(frozen=True)
class Instruction:
    opcode: Opcode
    modes: tuple[ParamMode, ...]

    @property
    def size(self) -> int:
        """Words occupied by the instruction, opcode included."""
        return 1 + len(self.modes)

    @property
    def roles(self) -> tuple[Role, ...]:
        return OPCODE_ROLES[self.opcode]


def decode(word: int, pc: int | None = None) -> Instruction:
    """Split a raw word into its opcode and the modes of its declared parameters.

    Raises InvalidOpcode for unknown or negative words and InvalidParamMode for
    any mode digit outside 0-2.
    """
    if word < 0:
        raise InvalidOpcode(word, pc)
    opcode = _OPCODES.get(word % 100)
    if opcode is None:
        raise InvalidOpcode(word, pc)

    modes = []
    for position in range(1, MODE_DIGITS + 1):
        digit = (word // 10 ** (position + 1)) % 10
        mode = _MODES.get(digit)
        if mode is None:
            raise InvalidParamMode(word, digit, position, pc)
        modes.append(mode)

    return Instruction(opcode, tuple(modes[:OPCODE_ARITY[opcode]]))
