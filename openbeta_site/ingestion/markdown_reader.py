from __future__ import annotations

import frontmatter
import yaml

from openbeta_site.core.exceptions import ParsingError
from openbeta_site.ingestion.raw_store import FileEvent


def read_markdown(event: FileEvent) -> frontmatter.Post:
    try:
        return frontmatter.loads(event.load_content())
    except UnicodeDecodeError as exc:
        raise ParsingError(f"{event.relative_path}: not valid UTF-8") from exc
    except yaml.YAMLError as exc:
        raise ParsingError(f"{event.relative_path}: invalid front matter: {exc}") from exc
