from __future__ import annotations

"""
Text normalisation helpers shared by containment, cascade and ranking.

Queries typed by citizens and labels coming back from BAN must be compared
on the same footing: no accents, lower case, trimmed.

Public helpers:

* normalize_text(text) -> str
    Accent-free, lower-cased, trimmed view used for every comparison.

* strip_diacritics(text) -> str
    Accent removal only; used to build fallback queries where the casing
    of place names still matters to the provider.

* query_tokens(text) -> List[str]
    Significant tokens of a query (noise words like "de", "la" dropped).
"""

import re
import unicodedata
from typing import Iterable, List, Tuple

from . import config

# Combining diacritical marks block
_COMBINING_MARKS_RE = re.compile("[\u0300-\u036f]")
_DIGIT_RE = re.compile(r"\d")
_POSTAL_SPLIT_RE = re.compile(r"[,;\s]+")


def strip_diacritics(text: str | None) -> str:
    """Decompose accented characters and drop the combining marks.

    Case and surrounding whitespace are left untouched.
    """
    if not text:
        return ""
    return _COMBINING_MARKS_RE.sub("", unicodedata.normalize("NFD", text))


def normalize_text(text: str | None) -> str:
    """Accent-free, lower-cased, trimmed form of ``text``.

    Lower-casing happens before decomposition so that characters whose
    lower-case form carries a combining mark (e.g. 'İ') are stripped in the
    same pass, which keeps the function idempotent.
    """
    if not text:
        return ""
    return strip_diacritics(text.lower()).strip()


def query_tokens(text: str | None) -> List[str]:
    """Split a query into tokens worth matching against labels.

    A token survives if it has at least TOKEN_MIN_CHARS characters or
    contains a digit ("12", "3b").
    """
    norm = normalize_text(text)
    if not norm:
        return []
    return [
        tok
        for tok in norm.split()
        if len(tok) >= config.TOKEN_MIN_CHARS or _DIGIT_RE.search(tok)
    ]


def numeric_tokens(tokens: Iterable[str]) -> List[str]:
    return [tok for tok in tokens if _DIGIT_RE.search(tok)]


def split_postal_codes(value: str | Iterable[str] | None) -> List[str]:
    """Split a stored postal-code field ("33360, 33370") into codes."""
    if value is None:
        return []
    if isinstance(value, str):
        parts = _POSTAL_SPLIT_RE.split(value)
    else:
        parts = []
        for item in value:
            parts.extend(_POSTAL_SPLIT_RE.split(str(item)))
    return [p for p in parts if p]


def collation_key(text: str | None) -> Tuple[str, str, str]:
    """Sort key approximating French collation.

    Primary level ignores accents and case, secondary level ignores case
    only, the remaining ties put lowercase before uppercase.
    """
    raw = text or ""
    return (normalize_text(raw), raw.lower(), raw.swapcase())
