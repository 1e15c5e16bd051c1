from __future__ import annotations

import unicodedata


def normalize_text(text: str) -> str:
    """Lowercase, strip accents and trim surrounding whitespace."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()
