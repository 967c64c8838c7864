# signspeak/text_to_sign.py
"""Text -> sign letters (placeholder: one letter per request, or a fingerspelling sequence)."""
import random
from typing import List, NamedTuple, Optional

from signspeak.utils import ASL_LETTERS

_LETTERS = set(ASL_LETTERS)


class SignLetter(NamedTuple):
    letter: str
    text: str


def text_to_sign(text: str, rng: Optional[random.Random] = None) -> Optional[SignLetter]:
    """
    Sign shown for a phrase: its first letter when that is A-Z,
    otherwise a random letter so the display is never empty.
    """
    text = (text or "").strip()
    if not text:
        return None
    first = text[0].upper()
    if first in _LETTERS:
        return SignLetter(first, text)
    rng = rng or random.Random()
    return SignLetter(rng.choice(list(ASL_LETTERS)), text)


def fingerspell(text: str) -> List[str]:
    return [c for c in (text or "").upper() if c in _LETTERS]
