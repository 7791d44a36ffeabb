from __future__ import annotations

from typing import Optional, Sequence

from openbeta_site.parsing.slugs import build_slug


def build_meta_description(path_tokens: Sequence[str], fa: Optional[str], yds: str) -> str:
    """SEO description for a climb page.

    ``path_tokens`` ends with the climb's own file name, so the crag and its
    parent area sit at positions -2 and -3.
    """
    tokens = list(path_tokens)
    places = [token for token in tokens[-2:-1] + tokens[-3:-2] if token]
    first_ascent = f"First ascent by {fa} - " if fa else ""
    located = f" - Located in {' at '.join(places)}" if places else ""
    return f"{first_ascent}{yds}{located}"


def breadcrumbs(path_tokens: Sequence[str]) -> list[dict[str, str]]:
    return [
        {"name": token, "slug": build_slug(path_tokens[: index + 1])}
        for index, token in enumerate(path_tokens)
    ]


def edit_path(source_path: str) -> str:
    return f"/edit?file={source_path}"
