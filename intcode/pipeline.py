"""
pipeline — producer/consumer hand-off between Intcode machines.

Each stage is an independent machine. Values move between stages by
sequential run() calls on suspended machines; nothing is shared.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .errors import IntcodeError
from .machine import IntcodeMachine, RunStatus
from .memory import Tape

logger = logging.getLogger(__name__)


def _template(program: Tape | str | Iterable[int]) -> Tape:
    if isinstance(program, Tape):
        return program
    if isinstance(program, str):
        return Tape.parse(program)
    return Tape(program)


def _next_signal(stage: int, machine: IntcodeMachine) -> int:
    value = machine.pop_output()
    if value is None:
        raise IntcodeError(f"stage {stage} produced no output (status {machine.status})")
    return value


def build_stages(program: Tape | str | Iterable[int],
                 count: int) -> list[IntcodeMachine]:
    """Independent machines, each on its own copy of the program."""
    tape = _template(program)
    return [IntcodeMachine(tape.copy()) for _ in range(count)]


def run_chain(program: Tape | str | Iterable[int], settings: Sequence[int],
              signal: int = 0) -> int:
    """Pass a signal once through one stage per setting.

    Each stage receives [setting, signal] and its first output becomes the
    signal for the next stage.
    """
    stages = build_stages(program, len(settings))
    for index, (setting, machine) in enumerate(zip(settings, stages)):
        machine.run([setting, signal])
        signal = _next_signal(index, machine)
    logger.debug("chain %s -> %d", list(settings), signal)
    return signal


def run_feedback_loop(program: Tape | str | Iterable[int], settings: Sequence[int],
                      signal: int = 0) -> int:
    """Pass a signal round-robin through the stages until they halt.

    Every stage is first primed with its setting alone, which leaves it
    waiting for its first signal. The loop ends as soon as a stage is found
    halted before its turn; the last signal out of the final stage is returned.
    """
    if not settings:
        return signal
    stages = build_stages(program, len(settings))
    for setting, machine in zip(settings, stages):
        machine.run([setting])

    last_signal = signal
    rounds = 0
    while True:
        signal = last_signal
        for index, machine in enumerate(stages):
            if machine.is_halted():
                logger.debug("feedback loop %s halted after %d rounds -> %d",
                             list(settings), rounds, last_signal)
                return last_signal
            status = machine.run([signal])
            signal = _next_signal(index, machine)
            if status == RunStatus.HALTED and machine.output:
                logger.debug("stage %d left %d unread outputs", index, len(machine.output))
        last_signal = signal
        rounds += 1
