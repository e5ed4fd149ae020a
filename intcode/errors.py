"""
Exception hierarchy for the Intcode machine.

Load faults come from program text. Execution faults come from running
instructions. Suspension for input is a RunStatus, never an exception.
"""

from __future__ import annotations


class IntcodeError(Exception):
    """Base class for everything the Intcode package raises."""


class LoadError(IntcodeError, ValueError):
    """Program text contains a token that is not a signed integer."""

    def __init__(self, token: str, index: int):
        super().__init__(f"invalid integer {token!r} at position {index}")
        self.token = token
        self.index = index


class ExecutionFault(IntcodeError, RuntimeError):
    """A fatal fault raised while executing an instruction."""

    def __init__(self, message: str, pc: int | None = None, word: int | None = None):
        if pc is not None:
            message = f"{message} (pc={pc})"
        super().__init__(message)
        self.pc = pc
        self.word = word


class AddressFault(ExecutionFault):
    """Negative address passed to a memory read or write."""

    def __init__(self, addr: int, pc: int | None = None):
        super().__init__(f"negative address {addr}", pc)
        self.addr = addr


class InvalidOpcode(ExecutionFault):
    def __init__(self, word: int, pc: int | None = None):
        if word < 0:
            message = f"invalid opcode: negative word {word}"
        else:
            message = f"invalid opcode {word % 100} in word {word}"
        super().__init__(message, pc, word)


class InvalidParamMode(ExecutionFault):
    def __init__(self, word: int, mode: int, position: int, pc: int | None = None):
        super().__init__(
            f"invalid mode {mode} for parameter {position} in word {word}", pc, word)
        self.mode = mode
        self.position = position


class MachineFaulted(IntcodeError):
    """The machine faulted earlier and refuses to execute again."""


class InputExhausted(IntcodeError):
    """Strict run-to-completion ran out of input before Halt."""


class StepLimitExceeded(IntcodeError):
    """The opt-in step budget ran out before the machine halted or suspended."""

    def __init__(self, limit: int):
        super().__init__(f"step limit of {limit} exceeded")
        self.limit = limit
