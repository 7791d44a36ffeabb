from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceConfig:
    area_marker_name: str
    boundary_file_name: str
    area_source_prefix: str
    page_source_name: str
    markdown_extensions: frozenset[str]


DEFAULT_SOURCE_CONFIG = SourceConfig(
    area_marker_name="index",
    boundary_file_name="boundary.geojson",
    area_source_prefix="areas-routes",
    page_source_name="regular-md",
    markdown_extensions=frozenset({
        ".md",
        ".mdx",
    }),
)


@dataclass(frozen=True)
class PageTemplates:
    area: str
    climb: str
    page: str
    edit_prefix: str
    edit_match_path: str


DEFAULT_PAGE_TEMPLATES = PageTemplates(
    area="templates/leaf-area-page",
    climb="templates/climb-page",
    page="templates/general-page",
    edit_prefix="/edit",
    edit_match_path="/edit/*",
)
