"""Shared helpers for word normalization."""

from __future__ import annotations

import re
import unicodedata

from unidecode import unidecode

NON_LETTER_RE = re.compile(r"[^A-Za-z]")


def clean_word(text: str, strip_punctuation: bool = False) -> str:
    """Return a normalized uppercase ASCII representation of ``text``.

    Any character that is not a letter makes the entry invalid and an empty
    string is returned, unless ``strip_punctuation`` is set, in which case
    those characters are removed instead (``"ice-cream"`` becomes
    ``"ICECREAM"``). The remaining letters are then transliterated to ASCII.
    """

    if not text:
        return ""
    word = unicodedata.normalize("NFC", text.strip())
    if strip_punctuation:
        word = "".join(ch for ch in word if ch.isalpha())
    elif not all(ch.isalpha() for ch in word):
        return ""
    ascii_word = unidecode(word)
    if strip_punctuation:
        ascii_word = NON_LETTER_RE.sub("", ascii_word)
    elif NON_LETTER_RE.search(ascii_word):
        return ""
    return ascii_word.upper()


__all__ = ["clean_word"]
