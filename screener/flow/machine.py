from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from screener.flow.interpreter import interpret_answer
from screener.flow.steps import CLARIFICATION_MESSAGE, STEPS, Choice, Step, StepId, validate_steps

logger = logging.getLogger(__name__)


@dataclass
class QualificationState:
    step_id: StepId = StepId.START
    finished: bool = False
    show_contact_link: bool = False


@dataclass(frozen=True)
class FlowOutcome:
    step_id: StepId
    message: str
    choice: Optional[Choice]
    finished: bool
    show_contact_link: bool

    @property
    def recognized(self) -> bool:
        return self.choice is not None


class QualificationFlow:
    def __init__(
        self,
        steps: Mapping[StepId, Step] = STEPS,
        start: StepId = StepId.START,
        clarification: str = CLARIFICATION_MESSAGE,
    ) -> None:
        validate_steps(steps, start)
        self.steps = steps
        self.clarification = clarification
        self.state = QualificationState(step_id=start)

    @property
    def current_step(self) -> Step:
        return self.steps[self.state.step_id]

    def opening_message(self) -> str:
        return self.current_step.message

    def advance(self, user_input: str) -> Optional[FlowOutcome]:
        if self.state.finished:
            logger.warning(
                "input_after_finish",
                extra={"step": self.state.step_id.value},
            )
            return None

        step = self.current_step
        choice = interpret_answer(step.id, user_input, self.steps)

        if choice is None:
            if step.fallback is None or step.fallback == step.id:
                logger.info(
                    "answer_unrecognized",
                    extra={"step": step.id.value, "text": user_input},
                )
                return self._outcome(None, self.clarification)
            next_id = step.fallback
        else:
            next_id = step.next[choice]

        self._enter(next_id)
        logger.info(
            "step_advanced",
            extra={
                "from_step": step.id.value,
                "to_step": next_id.value,
                "choice": choice.value if choice else None,
            },
        )
        return self._outcome(choice, self.steps[next_id].message)

    def _enter(self, step_id: StepId) -> None:
        self.state.step_id = step_id
        if step_id == StepId.SUCCESS:
            self.state.show_contact_link = True
        if self.steps[step_id].is_terminal:
            self.state.finished = True
            logger.info(
                "conversation_finished",
                extra={"step": step_id.value, "qualified": self.state.show_contact_link},
            )

    def _outcome(self, choice: Optional[Choice], message: str) -> FlowOutcome:
        return FlowOutcome(
            step_id=self.state.step_id,
            message=message,
            choice=choice,
            finished=self.state.finished,
            show_contact_link=self.state.show_contact_link,
        )
