"""
Textual arcade console for Intcode screen programs.

Runs a program in interactive mode against a TileDisplay. Every tick the
machine runs until it asks for its next joystick reading, then the screen
and score are redrawn.

Usage:
    python -m intcode.console game.txt --set 0=2
    python -m intcode.console game.txt --set 0=2 --auto
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.timer import Timer
from textual.widgets import Footer, Static

from .cli import parse_patch
from .devices import BALL, BLOCK, TileDisplay, track_ball
from .errors import IntcodeError
from .loader import load_program
from .machine import IntcodeMachine, RunStatus

CONSOLE_CSS = """
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 3fr 1fr;
    grid-rows: 1fr auto;
}

.panel {
    border: solid $accent;
    border-title-align: left;
    overflow-y: auto;
    height: 100%;
}

Footer {
    column-span: 2;
}
"""

JOYSTICK_NAMES = {-1: "left", 0: "neutral", 1: "right"}


class ScreenPanel(ScrollableContainer):
    BORDER_TITLE = "Screen"

    def compose(self) -> ComposeResult:
        yield Static("", id="screen-content")


class StatusPanel(ScrollableContainer):
    """Score, blocks left, joystick and machine status."""
    BORDER_TITLE = "Status"

    def compose(self) -> ComposeResult:
        yield Static("", id="status-content")


class ArcadeConsole(App):
    """Drives one machine and one TileDisplay, one joystick reading per tick."""

    CSS = CONSOLE_CSS
    TITLE = "Intcode Arcade"

    BINDINGS = [
        Binding("left", "tilt(-1)", "Left", priority=True),
        Binding("right", "tilt(1)", "Right", priority=True),
        Binding("down", "tilt(0)", "Neutral", priority=True),
        Binding("a", "toggle_auto", "Auto"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, machine: IntcodeMachine, auto: bool = False,
                 tick_interval: float | None = 0.05):
        super().__init__()
        self.machine = machine
        self.tile_display = TileDisplay(joystick=self._read_joystick)
        self.auto = auto
        self.tilt = 0
        self.tick_interval = tick_interval
        self.ticks = 0
        self.fault: str | None = None
        self._armed = False
        self._timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield ScreenPanel(id="screen-panel", classes="panel")
        yield StatusPanel(id="status-panel", classes="panel")
        yield Footer()

    def on_mount(self) -> None:
        self.advance()
        if self.tick_interval is not None and not self.game_over:
            self._timer = self.set_interval(self.tick_interval, self.advance)

    @property
    def game_over(self) -> bool:
        return self.fault is not None or self.machine.status == RunStatus.HALTED

    # -------------------------------------------------------------------
    # Machine
    # -------------------------------------------------------------------

    def _read_joystick(self, display: TileDisplay) -> int | None:
        # One reading per tick; the next request suspends the machine.
        if not self._armed:
            return None
        self._armed = False
        return track_ball(display) if self.auto else self.tilt

    def advance(self) -> None:
        """Run the machine until it wants its next joystick reading."""
        if self.game_over:
            return
        self._armed = True
        try:
            self.machine.run_interactive(self.tile_display)
        except (IntcodeError, ValueError) as e:
            self.fault = str(e)
        self.ticks += 1
        if self.game_over and self._timer is not None:
            self._timer.stop()
        self.refresh_panels()

    # -------------------------------------------------------------------
    # Panels
    # -------------------------------------------------------------------

    def refresh_panels(self) -> None:
        screen = self.query_one("#screen-content", Static)
        screen.update(self.tile_display.render() or "(no picture yet)")

        if self.fault is not None:
            state = f"[red]error: {self.fault}[/red]"
        elif self.machine.status == RunStatus.HALTED:
            state = "[bold]GAME OVER[/bold]"
        else:
            state = "running"
        mode = "auto" if self.auto else JOYSTICK_NAMES[self.tilt]
        text = (
            f"[bold]Score:[/bold] {self.tile_display.score}\n"
            f"[bold]Blocks:[/bold] {self.tile_display.count(BLOCK)}\n"
            f"[bold]Ball:[/bold] {self.tile_display.ball if self.tile_display.count(BALL) else '-'}\n"
            f"[bold]Joystick:[/bold] {mode}\n"
            f"[bold]Ticks:[/bold] {self.ticks}\n"
            f"{state}"
        )
        self.query_one("#status-content", Static).update(text)

    # -------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------

    def action_tilt(self, direction: int) -> None:
        self.tilt = direction
        self.refresh_panels()

    def action_toggle_auto(self) -> None:
        self.auto = not self.auto
        self.refresh_panels()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(
        description="Intcode arcade console",
        prog="python -m intcode.console",
    )
    parser.add_argument("program", help="Path to an Intcode screen program")
    parser.add_argument("--set", dest="patches", type=parse_patch, action="append", default=[],
                        metavar="ADDR=VALUE", help="Write memory before running (repeatable)")
    parser.add_argument("--auto", action="store_true",
                        help="Move the paddle automatically")
    parser.add_argument("--interval", type=float, default=0.05,
                        help="Seconds between joystick readings")
    args = parser.parse_args()

    path = Path(args.program)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)

    try:
        machine = IntcodeMachine(load_program(path))
        for addr, value in args.patches:
            machine.memory.write(addr, value)
    except IntcodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    app = ArcadeConsole(machine, auto=args.auto, tick_interval=args.interval)
    app.run()


if __name__ == "__main__":
    main()
