"""
I/O strategies for driving an IntcodeMachine.

Three ways to feed and drain a machine:

  run_to_completion(program, inputs)   canned input, all outputs at Halt
  machine.run(batch)                   suspend/resume with an output FIFO
  machine.run_interactive(device)      one callback per Input/Output
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from .errors import InputExhausted
from .machine import (
    DeliverOutput, IntcodeMachine, IoCallback, IoRequest, RequestInput, RunStatus,
)
from .memory import Tape

logger = logging.getLogger(__name__)

__all__ = [
    "DeliverOutput", "InteractiveDevice", "IoCallback", "IoRequest",
    "RequestInput", "run_to_completion",
]


def run_to_completion(program: Tape | str | Iterable[int], inputs: Iterable[int] = (),
                      *, strict: bool = True,
                      max_steps: int | None = None) -> tuple[list[int], IntcodeMachine]:
    """Run a program on a fresh machine with a finite input supply.

    Returns the outputs in order together with the machine, so callers can
    read final memory. With strict=True running out of input before Halt
    raises InputExhausted; otherwise the outputs so far are returned and the
    machine is left suspended.
    """
    machine = IntcodeMachine(program, max_steps=max_steps)
    status = machine.run(inputs)
    outputs = machine.drain_output()
    if status == RunStatus.AWAITING_INPUT:
        if strict:
            raise InputExhausted(
                f"input exhausted at pc={machine.pc} after {len(outputs)} outputs")
        logger.debug("input exhausted at pc=%d, returning %d outputs",
                     machine.pc, len(outputs))
    return outputs, machine


class InteractiveDevice(ABC):
    """Environment driven in lock-step with a machine.

    Subclasses answer on_input() from their own state and update that state
    in on_output(). Instances are callables suitable for run_interactive().
    """

    @abstractmethod
    def on_input(self) -> int | None:
        """Next input value, or None to suspend the machine."""

    @abstractmethod
    def on_output(self, value: int):
        ...

    def __call__(self, request: IoRequest) -> int | None:
        if isinstance(request, DeliverOutput):
            self.on_output(request.value)
            return None
        return self.on_input()

    def attach(self, machine: IntcodeMachine) -> RunStatus:
        """Run the machine against this device until it halts or suspends."""
        return machine.run_interactive(self)
