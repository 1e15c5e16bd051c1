from screener.flow.interpreter import interpret_answer
from screener.flow.machine import FlowOutcome, QualificationFlow, QualificationState
from screener.flow.normalize import normalize_text
from screener.flow.steps import (
    CHOICE_ORDER,
    CLARIFICATION_MESSAGE,
    STEPS,
    TERMINAL_STEPS,
    Choice,
    Step,
    StepId,
    StepTableError,
    validate_steps,
)

__all__ = [
    "CHOICE_ORDER",
    "CLARIFICATION_MESSAGE",
    "STEPS",
    "TERMINAL_STEPS",
    "Choice",
    "FlowOutcome",
    "QualificationFlow",
    "QualificationState",
    "Step",
    "StepId",
    "StepTableError",
    "interpret_answer",
    "normalize_text",
    "validate_steps",
]
