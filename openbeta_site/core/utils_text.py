from __future__ import annotations

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return decomposed.encode("ascii", "ignore").decode("ascii")


def slugify(text: str) -> str:
    """Lowercase ASCII slug; characters without an ASCII base form are dropped."""
    text = strip_diacritics(text).lower()
    return _NON_ALNUM.sub("-", text).strip("-")
