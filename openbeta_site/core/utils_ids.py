from __future__ import annotations

import hashlib
from typing import Sequence


def sha256_text(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def node_id_for(path_tokens: Sequence[str]) -> str:
    """Identity shared by every node whose joined tokens are equal.

    ``["USA", "Oregon"]`` and ``["USA-Oregon"]`` produce the same id.
    """
    return sha256_text("-".join(path_tokens))


def boundary_node_id(path_tokens: Sequence[str]) -> str:
    return sha256_text(f"{'-'.join(path_tokens)}-boundary")
