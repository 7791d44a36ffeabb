from __future__ import annotations

from typing import Sequence

from openbeta_site.core.utils_text import slugify


def slugify_path(path_tokens: Sequence[str]) -> str:
    """Slugify each token and join them with ``/``.

    ``slugify_path(["USA", "Oregon", "This has space"])`` gives
    ``"usa/oregon/this-has-space"``. Distinct tokens can slugify to the same
    value ("Half Dome", "Half-Dome"), so slugs are not unique.
    """
    return "/".join(slugify(token) for token in path_tokens)


def build_slug(path_tokens: Sequence[str]) -> str:
    return f"/{slugify_path(path_tokens)}"
