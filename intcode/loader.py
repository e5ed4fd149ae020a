"""
Program and input loading for Intcode tools.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .memory import Tape, parse_word

logger = logging.getLogger(__name__)

_INPUT_SEPARATORS = re.compile(r"[,\s]+")


def load_program(source: str | Path) -> Tape:
    """Load program text from a string or a file path into a fresh Tape.

    Surrounding whitespace, including the trailing newline of a puzzle
    input file, is stripped before parsing.
    """
    if isinstance(source, Path):
        text = source.read_text()
        logger.debug("loaded %s (%d bytes)", source, len(text))
    else:
        text = source
    return Tape.parse(text.strip())


def parse_inputs(text: str) -> list[int]:
    """Parse input values separated by commas and/or whitespace."""
    values = []
    for index, token in enumerate(t for t in _INPUT_SEPARATORS.split(text.strip()) if t):
        values.append(parse_word(token, index))
    return values
