import pytest

from screener.flow import normalize_text


@pytest.mark.parametrize("raw, expected", [
    ("  NÃO  ", "nao"),
    ("Só Curioso", "so curioso"),
    ("Impossível", "impossivel"),
    ("ÀÉÎÕÜ ç", "aeiou c"),
    ("", ""),
    ("   ", ""),
])
def test_normalize_text(raw, expected):
    assert normalize_text(raw) == expected


@pytest.mark.parametrize("raw", ["Não Tenho", "  Pode SER ", "Ação 🍕", "already plain"])
def test_normalize_is_idempotent(raw):
    once = normalize_text(raw)
    assert normalize_text(once) == once


def test_normalize_keeps_inner_spacing():
    assert normalize_text(" renda  extra ") == "renda  extra"
