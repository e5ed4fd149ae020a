"""
IntcodeMachine — fetch/decode/execute engine over a growable Tape.

The machine owns its tape, a program counter, a relative base and an output
FIFO. run() executes until Halt or until an Input instruction finds no value,
and reports which one happened as a RunStatus. A suspended machine keeps all
of its state and resumes at the same Input instruction on the next run().
"""

from __future__ import annotations

import collections
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .decoder import Instruction, Opcode, ParamMode, decode
from .errors import AddressFault, ExecutionFault, MachineFaulted, StepLimitExceeded
from .memory import Tape

logger = logging.getLogger(__name__)

# No instruction limit unless a caller asks for one.
DEFAULT_MAX_STEPS: int | None = None


class RunStatus(Enum):
    HALTED = "halted"
    AWAITING_INPUT = "awaiting_input"


# ---------------------------------------------------------------------------
# Interactive I/O requests
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RequestInput:
    """The machine wants a value. Answer with an int, or None to suspend."""


@dataclass(frozen=True)
class DeliverOutput:
    """The machine produced a value. The answer is ignored."""
    value: int


IoRequest = Union[RequestInput, DeliverOutput]
IoCallback = Callable[[IoRequest], Union[int, None]]

REQUEST_INPUT = RequestInput()


# ---------------------------------------------------------------------------
# Machine
# ---------------------------------------------------------------------------

class IntcodeMachine:
    """Resumable Intcode engine.

    Args:
        memory: a Tape, program text, or an iterable of ints.
        max_steps: optional per-run instruction budget. Exceeding it raises
            StepLimitExceeded and leaves the machine resumable.
    """

    def __init__(self, memory: Tape | str | Iterable[int],
                 *, max_steps: int | None = DEFAULT_MAX_STEPS):
        if isinstance(memory, str):
            memory = Tape.parse(memory)
        elif not isinstance(memory, Tape):
            memory = Tape(memory)
        self.memory = memory
        self.pc = 0
        self.relative_base = 0
        self.output: collections.deque[int] = collections.deque()
        self.max_steps = max_steps
        self.status: RunStatus | None = None
        self.faulted = False
        self.steps = 0

    # -------------------------------------------------------------------
    # Operand access
    # -------------------------------------------------------------------

    def _load(self, ins: Instruction, slot: int) -> int:
        """Value of a read-role parameter (slot counts from 1)."""
        literal = self.memory.read(self.pc + slot)
        mode = ins.modes[slot - 1]
        if mode == ParamMode.IMMEDIATE:
            return literal
        if mode == ParamMode.RELATIVE:
            return self.memory.read(self.relative_base + literal)
        return self.memory.read(literal)

    def _address(self, ins: Instruction, slot: int) -> int:
        """Target address of a write-role parameter. Never dereferenced twice."""
        literal = self.memory.read(self.pc + slot)
        if ins.modes[slot - 1] == ParamMode.RELATIVE:
            return self.relative_base + literal
        return literal

    # -------------------------------------------------------------------
    # Single instruction
    # -------------------------------------------------------------------

    def _execute(self, next_input: Callable[[], int | None],
                 emit: Callable[[int], object]) -> RunStatus | None:
        """Execute the instruction at pc. Returns a RunStatus when execution stops."""
        if len(self.memory) == 0:
            return RunStatus.HALTED

        ins = decode(self.memory.read(self.pc), self.pc)
        op = ins.opcode

        if op == Opcode.HALT:
            return RunStatus.HALTED

        if op == Opcode.ADD:
            self.memory.write(self._address(ins, 3), self._load(ins, 1) + self._load(ins, 2))
            self.pc += 4

        elif op == Opcode.MUL:
            self.memory.write(self._address(ins, 3), self._load(ins, 1) * self._load(ins, 2))
            self.pc += 4

        elif op == Opcode.INPUT:
            dst = self._address(ins, 1)
            value = next_input()
            if value is None:
                return RunStatus.AWAITING_INPUT
            self.memory.write(dst, int(value))
            self.pc += 2

        elif op == Opcode.OUTPUT:
            emit(self._load(ins, 1))
            self.pc += 2

        elif op == Opcode.JUMP_IF_TRUE:
            cond = self._load(ins, 1)
            target = self._load(ins, 2)
            self.pc = target if cond != 0 else self.pc + 3

        elif op == Opcode.JUMP_IF_FALSE:
            cond = self._load(ins, 1)
            target = self._load(ins, 2)
            self.pc = target if cond == 0 else self.pc + 3

        elif op == Opcode.LESS_THAN:
            value = 1 if self._load(ins, 1) < self._load(ins, 2) else 0
            self.memory.write(self._address(ins, 3), value)
            self.pc += 4

        elif op == Opcode.EQUALS:
            value = 1 if self._load(ins, 1) == self._load(ins, 2) else 0
            self.memory.write(self._address(ins, 3), value)
            self.pc += 4

        elif op == Opcode.ADJUST_RELATIVE_BASE:
            self.relative_base += self._load(ins, 1)
            self.pc += 2

        self.steps += 1
        return None

    def _guarded(self, next_input: Callable[[], int | None],
                 emit: Callable[[int], object]) -> RunStatus | None:
        if self.faulted:
            raise MachineFaulted(f"machine faulted earlier at pc={self.pc}")
        try:
            return self._execute(next_input, emit)
        except AddressFault as e:
            self.faulted = True
            fault = e if e.pc is not None else AddressFault(e.addr, self.pc)
            logger.error("execution fault: %s", fault)
            raise fault from None
        except ExecutionFault as e:
            self.faulted = True
            logger.error("execution fault: %s", e)
            raise

    # -------------------------------------------------------------------
    # Driving
    # -------------------------------------------------------------------

    def _run(self, next_input: Callable[[], int | None],
             emit: Callable[[int], object]) -> RunStatus:
        start = self.steps
        logger.debug("run from pc=%d relative_base=%d", self.pc, self.relative_base)
        while True:
            spent = self.max_steps is not None and self.steps - start >= self.max_steps
            # Halt and a starved Input stop without executing, so they stay allowed.
            if spent and not self.is_halted() and self._peek() != Opcode.INPUT:
                logger.debug("step budget of %d spent at pc=%d", self.max_steps, self.pc)
                raise StepLimitExceeded(self.max_steps)
            status = self._guarded(next_input, emit)
            if status is not None:
                break
            if spent:
                logger.debug("step budget of %d spent after input at pc=%d",
                             self.max_steps, self.pc)
                raise StepLimitExceeded(self.max_steps)
        self.status = status
        logger.debug("%s at pc=%d after %d steps", status.name, self.pc, self.steps - start)
        return status

    def run(self, inputs: Iterable[int] = ()) -> RunStatus:
        """Run with a finite input batch until Halt or until the batch runs dry.

        Outputs are queued for pop_output()/drain_output(). Values left in the
        batch when the machine stops are not kept.
        """
        source = iter(inputs)
        return self._run(lambda: next(source, None), self.output.append)

    def run_interactive(self, device: IoCallback) -> RunStatus:
        """Run with a single callback answering every Input and Output.

        device(RequestInput()) returns the next value or None to suspend;
        device(DeliverOutput(v)) consumes v. Outputs are not queued.
        """
        return self._run(lambda: device(REQUEST_INPUT),
                         lambda value: device(DeliverOutput(value)))

    def step(self, inputs: Iterable[int] = ()) -> RunStatus | None:
        """Execute one instruction. Returns None while the machine keeps going."""
        source = iter(inputs)
        status = self._guarded(lambda: next(source, None), self.output.append)
        if status is not None:
            self.status = status
        return status

    # -------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------

    def _peek(self) -> Opcode | None:
        """Opcode at pc if it decodes cleanly. Does not grow memory."""
        cells = self.memory.cells
        if not 0 <= self.pc < len(cells):
            return None
        try:
            return decode(cells[self.pc]).opcode
        except ExecutionFault:
            return None

    def is_halted(self) -> bool:
        """True if the next instruction is a well-formed Halt. Does not execute."""
        if not self.memory.cells:
            return True
        return self._peek() == Opcode.HALT

    def pop_output(self) -> int | None:
        return self.output.popleft() if self.output else None

    def drain_output(self) -> list[int]:
        values = list(self.output)
        self.output.clear()
        return values

    def copy(self) -> IntcodeMachine:
        """Independent clone: memory, registers and pending output."""
        clone = IntcodeMachine(self.memory.copy(), max_steps=self.max_steps)
        clone.pc = self.pc
        clone.relative_base = self.relative_base
        clone.output.extend(self.output)
        clone.status = self.status
        clone.faulted = self.faulted
        clone.steps = self.steps
        return clone

    def __repr__(self) -> str:
        status = self.status.name if self.status else "READY"
        return (f"IntcodeMachine(pc={self.pc}, relative_base={self.relative_base}, "
                f"{status}, {len(self.memory)} cells)")
