"""Static step table for the qualification dialogue."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple


class StepId(str, Enum):
    START = "START"
    P1 = "P1"
    P1_FOLLOWUP = "P1_FOLLOWUP"
    P2 = "P2"
    P3 = "P3"
    SUCCESS = "SUCCESS"
    END = "END"


class Choice(str, Enum):
    A = "A"
    B = "B"
    C = "C"


# Keyword lists are checked in this order; the first matching label wins.
CHOICE_ORDER: Tuple[Choice, ...] = (Choice.A, Choice.B, Choice.C)

TERMINAL_STEPS: FrozenSet[StepId] = frozenset({StepId.SUCCESS, StepId.END})

CLARIFICATION_MESSAGE = (
    "Desculpe, não entendi muito bem. 😊 Por favor, escolha uma das opções acima "
    "(A, B ou C) ou responda de forma mais clara."
)


class StepTableError(ValueError):
    """Raised when the step table is not a closed graph with two terminals."""


@dataclass(frozen=True)
class Step:
    id: StepId
    message: str
    keywords: Mapping[Choice, Tuple[str, ...]] = field(default_factory=dict)
    next: Mapping[Choice, StepId] = field(default_factory=dict)
    fallback: Optional[StepId] = None
    shortcuts: Mapping[str, Choice] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.id in TERMINAL_STEPS

    def targets(self) -> List[StepId]:
        found = list(self.next.values())
        if self.fallback is not None:
            found.append(self.fallback)
        return found


STEPS: Dict[StepId, Step] = {
    StepId.START: Step(
        id=StepId.START,
        message=(
            "Oii 😊 antes de te direcionar para falar com o William, preciso te fazer 3 "
            "perguntas rápidas pra entender se esse projeto realmente faz sentido pra você. "
            "Pode ser?"
        ),
        keywords={
            Choice.A: ("sim", "pode", "claro", "ok", "bora", "com certeza", "aceito", "quero", "pode ser"),
            Choice.B: (),
            Choice.C: ("não", "agora não", "obrigado", "nem pensar"),
        },
        # B is not offered here; a bare "b" still moves the lead forward.
        next={Choice.A: StepId.P1, Choice.B: StepId.P1, Choice.C: StepId.END},
        fallback=StepId.START,
        shortcuts={"s": Choice.A, "n": Choice.C},
    ),
    StepId.P1: Step(
        id=StepId.P1,
        message=(
            "Hoje você está buscando:\n\n"
            "A) Uma renda extra trabalhando de casa\n"
            "B) Uma nova fonte de renda principal\n"
            "C) Só estou curioso(a)"
        ),
        keywords={
            Choice.A: ("extra", "casa", "trabalhando", "renda extra", "bico", "complemento", "trabalhar de casa"),
            Choice.B: ("principal", "viver disso", "fonte", "carreira", "integral", "foco", "minha fonte"),
            Choice.C: ("curioso", "olhando", "vendo", "curiosidade", "saber mais", "só vendo", "só curioso"),
        },
        next={Choice.A: StepId.P2, Choice.B: StepId.P2, Choice.C: StepId.P1_FOLLOWUP},
    ),
    StepId.P1_FOLLOWUP: Step(
        id=StepId.P1_FOLLOWUP,
        message=(
            "Entendi 😊 esse projeto é pra quem realmente quer colocar em prática. "
            "Você pretende aplicar se fizer sentido pra você?"
        ),
        keywords={
            Choice.A: ("sim", "vou", "aplicar", "quero", "com certeza", "pode ser"),
            Choice.B: (),
            Choice.C: ("não", "só curioso", "só olhando", "não pretendo"),
        },
        next={Choice.A: StepId.P2, Choice.B: StepId.P2, Choice.C: StepId.END},
        shortcuts={"s": Choice.A, "n": Choice.C, "pretendo": Choice.A, "não vou": Choice.C},
    ),
    StepId.P2: Step(
        id=StepId.P2,
        message=(
            "O William trabalha com alho há mais de 6 anos, tem mais de 6 mil seguidores e já "
            "ajudou mais de 140 pessoas a começarem.\n\n"
            "Se ele te mostrar o passo a passo simples usando só o celular, você teria pelo "
            "menos 1 hora por dia pra aplicar?\n\n"
            "A) Tenho sim\n"
            "B) Depende\n"
            "C) Não tenho tempo"
        ),
        keywords={
            Choice.A: ("tenho sim", "sim", "com certeza", "consigo", "posso", "1 hora", "uma hora"),
            Choice.B: ("depende", "talvez", "ver", "preciso ver", "não sei", "dependendo"),
            Choice.C: ("não tenho", "sem tempo", "corrido", "impossível", "não", "tenho não"),
        },
        next={Choice.A: StepId.P3, Choice.B: StepId.P3, Choice.C: StepId.END},
        shortcuts={"n": Choice.C, "tenho": Choice.A},
    ),
    StepId.P3: Step(
        id=StepId.P3,
        message=(
            "Pra entrar no projeto é necessário um pequeno investimento inicial (menos do que "
            "você gasta em uma pizza 🍕).\n\n"
            "Se fizer sentido pra você, isso seria um problema?\n\n"
            "A) Não seria problema\n"
            "B) Depende do valor\n"
            "C) No momento não posso investir nada"
        ),
        keywords={
            Choice.A: (
                "não seria", "problema não", "tranquilo", "posso sim", "sim",
                "não é problema", "ok", "sem problema",
            ),
            Choice.B: ("depende", "valor", "quanto", "preciso saber", "dependendo", "depende do valor"),
            Choice.C: ("não posso", "sem dinheiro", "nada", "investir nada", "impossível", "agora não"),
        },
        next={Choice.A: StepId.SUCCESS, Choice.B: StepId.SUCCESS, Choice.C: StepId.END},
        shortcuts={"n": Choice.C, "posso": Choice.A},
    ),
    StepId.SUCCESS: Step(
        id=StepId.SUCCESS,
        message=(
            "Perfeito 👏 pelo que você me respondeu, seu perfil é ideal.\n\n"
            "O William vai falar com você pessoalmente agora e explicar como você pode começar "
            "ainda essa semana.\n\n"
            "Clique no botão abaixo para falar direto com ele 👇"
        ),
    ),
    StepId.END: Step(
        id=StepId.END,
        message=(
            "Entendo perfeitamente 😊 talvez esse não seja o melhor momento pra você. Quando "
            "decidir começar algo de verdade ou estiver pronto(a), será um prazer te receber!"
        ),
    ),
}


def reachable_steps(steps: Mapping[StepId, Step], start: StepId = StepId.START) -> List[StepId]:
    """Return every step id reachable from ``start``, in discovery order."""
    seen: List[StepId] = []
    pending = [start]
    while pending:
        step_id = pending.pop(0)
        if step_id in seen:
            continue
        seen.append(step_id)
        step = steps.get(step_id)
        if step is not None:
            pending.extend(step.targets())
    return seen


def validate_steps(steps: Mapping[StepId, Step] = STEPS, start: StepId = StepId.START) -> None:
    if start not in steps:
        raise StepTableError(f"Start step {start.value} is not defined")

    for step_id, step in steps.items():
        if step.id != step_id:
            raise StepTableError(f"Step registered as {step_id.value} declares id {step.id.value}")
        for target in step.targets():
            if target not in steps:
                raise StepTableError(f"Step {step_id.value} points to undefined step {target.value}")
        if step.is_terminal and step.targets():
            raise StepTableError(f"Terminal step {step_id.value} declares transitions")
        if not step.is_terminal and not step.next:
            raise StepTableError(f"Step {step_id.value} has no transitions and is not terminal")
        if step.keywords and set(step.next) != set(CHOICE_ORDER):
            raise StepTableError(f"Step {step_id.value} must map every choice to a next step")

    reached = reachable_steps(steps, start)
    missing = [terminal.value for terminal in sorted(TERMINAL_STEPS) if terminal not in reached]
    if missing:
        raise StepTableError(f"Terminal steps not reachable from {start.value}: {', '.join(missing)}")
