from __future__ import annotations

import logging
from typing import Mapping, Optional

from screener.flow.normalize import normalize_text
from screener.flow.steps import CHOICE_ORDER, STEPS, Choice, Step, StepId

logger = logging.getLogger(__name__)

_EXACT_LABELS = {choice.value.lower(): choice for choice in CHOICE_ORDER}


def interpret_answer(
    step_id: StepId,
    user_input: str,
    steps: Mapping[StepId, Step] = STEPS,
) -> Optional[Choice]:
    """
    Resolve a free-text reply to one of the step's choice labels.

    Returns None when the step is unknown, offers no keyword lists, or
    nothing in the reply matches.
    """
    step = steps.get(step_id)
    if step is None or not step.keywords:
        return None

    normalized = normalize_text(user_input)

    exact = _EXACT_LABELS.get(normalized)
    if exact is not None:
        return exact

    for shortcut, choice in step.shortcuts.items():
        if normalized == normalize_text(shortcut):
            return choice

    for choice in CHOICE_ORDER:
        for keyword in step.keywords.get(choice, ()):
            if normalize_text(keyword) in normalized:
                logger.debug(f"Matched keyword '{keyword}' as {choice.value} on {step_id.value}")
                return choice

    return None
