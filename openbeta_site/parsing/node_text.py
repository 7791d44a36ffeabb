from __future__ import annotations

import markdown

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]


def render_html(body: str) -> str:
    if not body or not body.strip():
        return ""
    return markdown.markdown(body, extensions=MARKDOWN_EXTENSIONS)
