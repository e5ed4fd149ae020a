from .decoder import Instruction, Opcode, ParamMode, decode
from .errors import (
    AddressFault, ExecutionFault, InputExhausted, IntcodeError, InvalidOpcode,
    InvalidParamMode, LoadError, MachineFaulted, StepLimitExceeded,
)
from .io import InteractiveDevice, run_to_completion
from .loader import load_program, parse_inputs
from .machine import DeliverOutput, IntcodeMachine, RequestInput, RunStatus
from .memory import Tape
from .pipeline import run_chain, run_feedback_loop

__all__ = [
    "AddressFault",
    "DeliverOutput",
    "ExecutionFault",
    "InputExhausted",
    "Instruction",
    "IntcodeError",
    "IntcodeMachine",
    "InteractiveDevice",
    "InvalidOpcode",
    "InvalidParamMode",
    "LoadError",
    "MachineFaulted",
    "Opcode",
    "ParamMode",
    "RequestInput",
    "RunStatus",
    "StepLimitExceeded",
    "Tape",
    "decode",
    "load_program",
    "parse_inputs",
    "run_chain",
    "run_feedback_loop",
    "run_to_completion",
]
