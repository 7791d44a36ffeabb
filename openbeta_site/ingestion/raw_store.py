from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path


def compute_sha256(path: Path) -> str:
    hash_obj = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(8192), b""):
            hash_obj.update(chunk)
    return hash_obj.hexdigest()


@dataclass(frozen=True)
class FileEvent:
    """One discovered file, described relative to the root of its source."""

    absolute_path: Path
    relative_path: str
    relative_directory: str
    name: str
    base: str
    extension: str
    source_instance_name: str

    def load_content(self) -> str:
        return self.absolute_path.read_text(encoding="utf-8")


def file_event(path: Path, root: Path, source_instance_name: str) -> FileEvent:
    relative = path.relative_to(root)
    parent = relative.parent
    return FileEvent(
        absolute_path=path,
        relative_path=str(relative),
        relative_directory="" if parent == Path(".") else str(parent),
        name=path.stem,
        base=path.name,
        extension=path.suffix.lower(),
        source_instance_name=source_instance_name,
    )
