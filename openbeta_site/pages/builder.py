from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from openbeta_site.core.site_config import DEFAULT_PAGE_TEMPLATES, PageTemplates
from openbeta_site.db import models, repo
from openbeta_site.pages.meta import build_meta_description, edit_path

logger = structlog.get_logger()


@dataclass
class PageSpec:
    path: str
    template: str
    node_id: Optional[str] = None
    context: dict[str, str] = field(default_factory=dict)
    match_path: Optional[str] = None

    def as_row(self) -> dict:
        return {
            "path": self.path,
            "template": self.template,
            "match_path": self.match_path,
            "node_id": self.node_id,
            "context_json": dict(self.context),
        }


def apply_page_rules(page: PageSpec, templates: PageTemplates = DEFAULT_PAGE_TEMPLATES) -> PageSpec:
    # editor routes are resolved in the browser
    if page.path.startswith(templates.edit_prefix):
        page.match_path = templates.edit_match_path
    return page


def area_page(node: models.ContentNode, templates: PageTemplates) -> PageSpec:
    return PageSpec(
        path=node.slug,
        template=templates.area,
        node_id=node.node_id,
        context={"node_id": node.node_id, "raw_path": node.raw_path},
    )


def climb_page(node: models.ContentNode, templates: PageTemplates) -> PageSpec:
    fields = node.fields_json or {}
    return PageSpec(
        path=node.slug,
        template=templates.climb,
        node_id=node.node_id,
        context={
            "node_id": node.node_id,
            "meta_description": build_meta_description(node.path_tokens, fields.get("fa"), fields.get("yds") or ""),
            "edit_path": edit_path(node.source_path),
        },
    )


def general_page(node: models.ContentNode, templates: PageTemplates) -> PageSpec:
    return PageSpec(
        path=node.slug,
        template=templates.page,
        node_id=node.node_id,
        context={"node_id": node.node_id},
    )


_BUILDERS = (
    ("area", area_page),
    ("climb", climb_page),
    ("page", general_page),
)


def build_page_requests(session: Session, templates: PageTemplates = DEFAULT_PAGE_TEMPLATES) -> list[PageSpec]:
    pages: dict[str, PageSpec] = {}
    sources: dict[str, str] = {}
    for kind, builder in _BUILDERS:
        for node in repo.list_nodes(session, kind):
            page = apply_page_rules(builder(node, templates), templates)
            if page.path in pages:
                logger.warning(
                    "slug_collision",
                    path=page.path,
                    kept=node.source_path,
                    replaced=sources[page.path],
                )
            pages[page.path] = page
            sources[page.path] = node.source_path
    return list(pages.values())


def store_page_requests(session: Session, pages: list[PageSpec]) -> int:
    current = {page.path for page in pages}
    for page in pages:
        repo.upsert_page(session, page.as_row())
    for stale in session.query(models.PageRequest).filter(models.PageRequest.path.not_in(current)).all():
        session.delete(stale)
    session.flush()
    return len(pages)


def export_manifest(pages: list[PageSpec], out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [asdict(page) for page in sorted(pages, key=lambda page: page.path)]
    out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return out_path
