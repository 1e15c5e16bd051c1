from __future__ import annotations

from urllib.parse import quote


def contact_link(phone: str, text: str) -> str:
    """Build the WhatsApp deep link with a pre-filled message."""
    digits = "".join(ch for ch in phone if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(text)}"
