"""Filesystem-safe folder names derived from disk names."""

from __future__ import annotations

import re
import unicodedata

from unidecode import unidecode

SLUG_SEPARATOR = "_"
SLUG_SAFE_CHARACTERS = "0123456789abcdefghijklmnopqrstuvwxyz"

_UNSAFE = re.compile(f"[^{SLUG_SAFE_CHARACTERS}]+")


def slugify(name: str) -> str:
    """Convert a free-form disk name into a lowercase folder segment.

    ``"Проект 1"`` becomes ``"proekt_1"`` and ``"A:/b.c"`` becomes
    ``"a_b_c"``. Names with nothing transliterable give ``""``;
    all such disks share one backup folder.
    """
    latin = unidecode(name, errors="ignore")
    decomposed = unicodedata.normalize("NFKD", latin)
    stripped = "".join(
        ch for ch in decomposed if not unicodedata.combining(ch)
    )
    pieces = _UNSAFE.split(stripped.lower())
    return SLUG_SEPARATOR.join(p for p in pieces if p)
