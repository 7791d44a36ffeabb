from __future__ import annotations

from typing import Any, Optional

import pydantic
import structlog

from openbeta_site.core.exceptions import ParsingError, ValidationError
from openbeta_site.core.site_config import DEFAULT_SOURCE_CONFIG, SourceConfig
from openbeta_site.core.utils_ids import boundary_node_id, node_id_for
from openbeta_site.ingestion.markdown_reader import read_markdown
from openbeta_site.ingestion.raw_store import FileEvent, compute_sha256
from openbeta_site.parsing.names import sanitize_name
from openbeta_site.parsing.paths import normalize_path, split_path_tokens
from openbeta_site.parsing.records import (
    AreaRecord,
    BoundaryRecord,
    ClimbRecord,
    PageRecord,
    SourceRecord,
)
from openbeta_site.parsing.slugs import build_slug

logger = structlog.get_logger()


class NodeClassifier:
    """
    Turns one file event into at most one record.

    The choice depends only on the event's source and base name:
    - boundary file in any source -> BoundaryRecord
    - markdown in the regular pages source -> PageRecord
    - area marker markdown in an areas source -> AreaRecord
    - any other markdown in an areas source -> ClimbRecord
    Everything else is ignored.
    """

    def __init__(self, config: SourceConfig = DEFAULT_SOURCE_CONFIG) -> None:
        self.config = config

    def classify(self, event: FileEvent) -> Optional[SourceRecord]:
        if event.base == self.config.boundary_file_name:
            return self._boundary(event)
        if event.extension not in self.config.markdown_extensions:
            return None
        if event.source_instance_name == self.config.page_source_name:
            return self._page(event)
        if not event.source_instance_name.startswith(self.config.area_source_prefix):
            return None
        if event.name == self.config.area_marker_name:
            return self._area(event)
        return self._climb(event)

    # ----------------------------
    # STATES
    # ----------------------------

    def _boundary(self, event: FileEvent) -> BoundaryRecord:
        raw_path = normalize_path(event.relative_directory)
        path_tokens = split_path_tokens(raw_path)
        try:
            raw_geojson = event.load_content()
        except UnicodeDecodeError as exc:
            raise ParsingError(f"{event.relative_path}: not valid UTF-8") from exc
        return self._build(
            BoundaryRecord,
            event,
            node_id=boundary_node_id(path_tokens),
            raw_path=raw_path,
            path_tokens=path_tokens,
            raw_geojson=raw_geojson,
        )

    def _area(self, event: FileEvent) -> AreaRecord:
        post = read_markdown(event)
        raw_path = normalize_path(event.relative_directory)
        path_tokens = split_path_tokens(raw_path)
        return self._build(
            AreaRecord,
            event,
            node_id=node_id_for(path_tokens),
            slug=build_slug(path_tokens),
            raw_path=raw_path,
            path_tokens=path_tokens,
            filename=event.name,
            area_name=_sanitized(post.metadata.get("area_name")),
            metadata=post.metadata.get("metadata"),
            body=post.content,
        )

    def _climb(self, event: FileEvent) -> ClimbRecord:
        post = read_markdown(event)
        raw_path = normalize_path(event.relative_directory)
        path_tokens = split_path_tokens(raw_path) + [event.name]
        return self._build(
            ClimbRecord,
            event,
            node_id=node_id_for(path_tokens),
            slug=build_slug(path_tokens),
            raw_path=raw_path,
            path_tokens=path_tokens,
            filename=event.name,
            route_name=_sanitized(post.metadata.get("route_name")),
            yds=post.metadata.get("yds"),
            type=post.metadata.get("type"),
            safety=post.metadata.get("safety"),
            fa=post.metadata.get("fa"),
            metadata=post.metadata.get("metadata"),
            body=post.content,
        )

    def _page(self, event: FileEvent) -> PageRecord:
        post = read_markdown(event)
        raw_path = normalize_path(event.relative_directory)
        path_tokens = split_path_tokens(raw_path)
        if event.name != self.config.area_marker_name:
            path_tokens.append(event.name)
        return self._build(
            PageRecord,
            event,
            node_id=node_id_for([self.config.page_source_name, *path_tokens]),
            slug=build_slug(path_tokens),
            raw_path=raw_path,
            path_tokens=path_tokens,
            filename=event.name,
            title=post.metadata.get("title"),
            body=post.content,
        )

    def _build(self, model: type[Any], event: FileEvent, **fields: Any) -> Any:
        source_path = normalize_path(event.relative_path)
        try:
            return model(
                content_digest=compute_sha256(event.absolute_path),
                source_path=source_path,
                **fields,
            )
        except pydantic.ValidationError as exc:
            logger.debug("record_invalid", source_path=source_path, errors=exc.errors())
            raise ValidationError(f"{source_path}: {exc}") from exc


def _sanitized(name: Any) -> Any:
    # YAML reads names such as "1984" as numbers
    if name is None or isinstance(name, (dict, list)):
        return name
    return sanitize_name(str(name))
