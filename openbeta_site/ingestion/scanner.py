from __future__ import annotations

from pathlib import Path
from typing import Mapping

from openbeta_site.core.exceptions import IngestionError
from openbeta_site.ingestion.raw_store import FileEvent, file_event


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def scan_source(source_instance_name: str, root: str | Path) -> list[FileEvent]:
    path = Path(root)
    if not path.is_dir():
        raise IngestionError(f"source '{source_instance_name}' not found: {path}")
    return [
        file_event(item, path, source_instance_name)
        for item in sorted(path.rglob("*"))
        if item.is_file() and not _is_hidden(item, path)
    ]


def scan_sources(sources: Mapping[str, str | Path]) -> list[FileEvent]:
    events: list[FileEvent] = []
    for name, root in sources.items():
        events.extend(scan_source(name, root))
    return events
