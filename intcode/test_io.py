"""
Tests for the I/O strategies, pipelines and devices.
"""

from __future__ import annotations

import pytest

from intcode.devices import (
    BALL, PADDLE, WHITE, FramedDevice, PaintingRobot, TileDisplay, track_ball,
)
from intcode.errors import InputExhausted, IntcodeError
from intcode.io import InteractiveDevice, run_to_completion
from intcode.machine import IntcodeMachine, RunStatus
from intcode.pipeline import run_chain, run_feedback_loop


def emit(*values: int) -> str:
    """Program that outputs each value in turn, then halts."""
    return ",".join(f"104,{v}" for v in values) + ",99"


# ---------------------------------------------------------------------------
# Run to completion
# ---------------------------------------------------------------------------

def test_run_to_completion_collects_outputs():
    outputs, machine = run_to_completion("3,0,4,0,4,0,99", [6])
    assert outputs == [6, 6]
    assert machine.status == RunStatus.HALTED
    assert machine.memory.read(0) == 6


def test_run_to_completion_strict_exhaustion():
    with pytest.raises(InputExhausted):
        run_to_completion("104,1,3,0,99")


def test_run_to_completion_lenient_exhaustion():
    outputs, machine = run_to_completion("104,1,3,0,99", strict=False)
    assert outputs == [1]
    assert machine.status == RunStatus.AWAITING_INPUT
    assert machine.run([2]) == RunStatus.HALTED


# ---------------------------------------------------------------------------
# InteractiveDevice
# ---------------------------------------------------------------------------

class Doubler(InteractiveDevice):
    """Feeds back twice the last output, starting from 1."""

    def __init__(self, rounds: int):
        self.last = 1
        self.rounds = rounds
        self.seen = []

    def on_input(self):
        if self.rounds == 0:
            return None
        self.rounds -= 1
        return self.last * 2

    def on_output(self, value):
        self.seen.append(value)
        self.last = value


ECHO_LOOP = "3,7,4,7,1105,1,0"


def test_interactive_device_lock_step():
    device = Doubler(rounds=4)
    machine = IntcodeMachine(ECHO_LOOP)
    assert device.attach(machine) == RunStatus.AWAITING_INPUT
    assert device.seen == [2, 4, 8, 16]


def test_framed_device_groups_outputs():
    frames = []

    class Pairs(FramedDevice):
        def on_frame(self, frame):
            frames.append(frame)

    device = Pairs(2)
    assert IntcodeMachine(emit(1, 2, 3, 4, 5)).run_interactive(device) == RunStatus.HALTED
    assert frames == [(1, 2), (3, 4)]
    assert device.partial == (5,)
    assert device.frames == 2


def test_framed_device_rejects_empty_frames():
    with pytest.raises(ValueError):
        FramedDevice(0)


# ---------------------------------------------------------------------------
# Tile display
# ---------------------------------------------------------------------------

def test_tile_display_draws_paddle_and_ball():
    display = TileDisplay()
    IntcodeMachine(emit(1, 2, 3, 6, 5, 4)).run_interactive(display)
    assert display.tiles == {(1, 2): PADDLE, (6, 5): BALL}
    assert display.paddle == (1, 2)
    assert display.ball == (6, 5)
    lines = display.render().split("\n")
    assert len(lines) == 6
    assert lines[2] == " -     "
    assert lines[5] == "      *"


def test_tile_display_score():
    display = TileDisplay()
    IntcodeMachine(emit(-1, 0, 12345)).run_interactive(display)
    assert display.score == 12345
    assert display.tiles == {}


def test_tile_display_rejects_unknown_tiles():
    with pytest.raises(ValueError):
        IntcodeMachine(emit(0, 0, 7)).run_interactive(TileDisplay())


def test_tile_display_joystick():
    display = TileDisplay(joystick=track_ball)
    # draw paddle and ball, read the joystick, report it as the score
    program = emit(1, 2, 3, 6, 5, 4).replace(",99", ",3,100,104,-1,104,0,4,100,99")
    assert IntcodeMachine(program).run_interactive(display) == RunStatus.HALTED
    assert display.score == 1


def test_track_ball_follows_ball():
    display = TileDisplay()
    assert track_ball(display) == 0
    display.ball, display.paddle = (6, 5), (1, 2)
    assert track_ball(display) == 1
    display.ball = (0, 5)
    assert track_ball(display) == -1


# ---------------------------------------------------------------------------
# Painting robot
# ---------------------------------------------------------------------------

def test_painting_robot_walk():
    robot = PaintingRobot()
    program = emit(1, 0, 0, 0, 1, 0, 1, 0, 0, 1, 1, 0, 1, 0)
    assert IntcodeMachine(program).run_interactive(robot) == RunStatus.HALTED
    assert len(robot.painted) == 6
    assert robot.position == (0, -1)
    assert robot.direction == (-1, 0)
    assert robot.render() == "  #\n  #\n## "


def test_painting_robot_reports_panel_colour():
    robot = PaintingRobot(start_colour=WHITE)
    # read the panel colour, paint it back, turn left
    machine = IntcodeMachine("3,100,4,100,104,0,99")
    assert machine.run_interactive(robot) == RunStatus.HALTED
    assert robot.panels[(0, 0)] == WHITE
    assert robot.position == (-1, 0)
    assert robot.on_input() == 0


def test_painting_robot_rejects_bad_turn():
    with pytest.raises(ValueError):
        IntcodeMachine(emit(1, 5)).run_interactive(PaintingRobot())


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("program, settings, expected", [
    ("3,15,3,16,1002,16,10,16,1,16,15,15,4,15,99,0,0", [4, 3, 2, 1, 0], 43210),
    ("3,23,3,24,1002,24,10,24,1002,23,-1,23,101,5,23,23,1,24,23,23,4,23,99,0,0",
     [0, 1, 2, 3, 4], 54321),
    ("3,31,3,32,1002,32,10,32,1001,31,-2,31,1007,31,0,33,1002,33,7,33,1,33,31,31,1,32,"
     "31,31,4,31,99,0,0,0", [1, 0, 4, 3, 2], 65210),
])
def test_chain(program, settings, expected):
    assert run_chain(program, settings) == expected


@pytest.mark.parametrize("program, settings, expected", [
    ("3,26,1001,26,-4,26,3,27,1002,27,2,27,1,27,26,27,4,27,1001,28,-1,28,1005,28,6,99,0,0,5",
     [9, 8, 7, 6, 5], 139629729),
    ("3,52,1001,52,-5,52,3,53,1,52,56,54,1007,54,5,55,1005,55,26,1001,54,-5,54,1105,1,12,1,"
     "53,54,53,1008,54,0,55,1001,55,1,55,2,53,55,53,4,53,1001,56,-1,56,1005,56,6,99,0,0,0,0,10",
     [9, 7, 8, 5, 6], 18216),
])
def test_feedback_loop(program, settings, expected):
    assert run_feedback_loop(program, settings) == expected


def test_chain_stage_without_output():
    with pytest.raises(IntcodeError):
        run_chain("3,0,3,0,99", [1, 2])


def test_empty_feedback_loop_returns_signal():
    assert run_feedback_loop("99", [], signal=7) == 7
