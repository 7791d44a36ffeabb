from __future__ import annotations

import re

# "(6) ", "(aa)" or an ordering prefix such as "04-" / "10-"; never "0-" or "00-".
LEADING_MARKER = re.compile(r"^(?:\(.{1,3}\) *|(?:\d?[1-9]|[1-9]0)-)")


def sanitize_name(name: str) -> str:
    return LEADING_MARKER.sub("", name, count=1)
