from __future__ import annotations

import os
from typing import Sequence


def normalize_path(path: str) -> str:
    """Rewrite every path separator as ``/``.

    Backslashes are treated as separators on every platform, so a literal
    backslash inside a directory name does not survive.
    """
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return path.replace("\\", "/")


def split_path_tokens(raw_path: str) -> list[str]:
    if not raw_path:
        return []
    return raw_path.split("/")


def parent_tokens(path_tokens: Sequence[str]) -> list[str]:
    return list(path_tokens[:-1])
