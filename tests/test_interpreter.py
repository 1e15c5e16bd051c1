import pytest

from screener.flow import CHOICE_ORDER, STEPS, Choice, StepId, interpret_answer

KEYWORD_CASES = [
    (step_id, choice, keyword)
    for step_id, step in STEPS.items()
    for choice in CHOICE_ORDER
    for keyword in step.keywords.get(choice, ())
]

BRANCHING_STEPS = [step_id for step_id, step in STEPS.items() if step.keywords]


@pytest.mark.parametrize("step_id, choice, keyword", KEYWORD_CASES)
def test_every_keyword_resolves_to_its_own_choice(step_id, choice, keyword):
    assert interpret_answer(step_id, keyword) == choice


@pytest.mark.parametrize("step_id", BRANCHING_STEPS)
@pytest.mark.parametrize("raw, expected", [
    ("a", Choice.A),
    ("B", Choice.B),
    (" c ", Choice.C),
    ("Á", Choice.A),
    ("Ç", Choice.C),
])
def test_single_letter_labels_always_win(step_id, raw, expected):
    assert interpret_answer(step_id, raw) == expected


@pytest.mark.parametrize("step_id", BRANCHING_STEPS)
@pytest.mark.parametrize("raw", ["xyz", "???", "", "   "])
def test_gibberish_is_unrecognized(step_id, raw):
    assert interpret_answer(step_id, raw) is None


@pytest.mark.parametrize("step_id", [StepId.SUCCESS, StepId.END])
def test_steps_without_keywords_never_match(step_id):
    assert interpret_answer(step_id, "a") is None
    assert interpret_answer(step_id, "sim") is None


def test_unknown_step_is_unrecognized():
    assert interpret_answer(StepId.P1, "a", steps={}) is None


def test_yes_no_shortcuts():
    assert interpret_answer(StepId.START, "S") == Choice.A
    assert interpret_answer(StepId.START, "n") == Choice.C
    assert interpret_answer(StepId.P2, "N") == Choice.C


def test_keyword_matches_inside_longer_reply():
    assert interpret_answer(StepId.P1, "quero uma renda extra pra ajudar") == Choice.A
    assert interpret_answer(StepId.START, "Claro, pode mandar!") == Choice.A


def test_earlier_choice_wins_when_several_match():
    # "depende" (B) and "sem tempo" (C) both appear; B is checked first.
    assert interpret_answer(StepId.P2, "depende, ando sem tempo") == Choice.B


def test_accents_in_reply_are_ignored():
    assert interpret_answer(StepId.P2, "NÃO TENHO") == Choice.C
    assert interpret_answer(StepId.P1, "Só curiosa mesmo, tô vendo") == Choice.C


@pytest.mark.parametrize("step_id, yes, no", [
    (StepId.P1_FOLLOWUP, "Pretendo", "Não pretendo"),
    (StepId.P1_FOLLOWUP, "sim", "Não vou"),
    (StepId.P2, "Tenho", "Não tenho"),
    (StepId.P3, "Posso", "Não posso"),
])
def test_bare_affirmative_and_its_negation(step_id, yes, no):
    assert interpret_answer(step_id, yes) == Choice.A
    assert interpret_answer(step_id, no) == Choice.C
