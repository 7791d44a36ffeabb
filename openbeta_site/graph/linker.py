from __future__ import annotations

from dataclasses import asdict, dataclass

import structlog
from sqlalchemy.orm import Session

from openbeta_site.core.utils_ids import node_id_for
from openbeta_site.db import models, repo
from openbeta_site.parsing.paths import parent_tokens

logger = structlog.get_logger()


@dataclass
class LinkStats:
    linked: int = 0
    roots: int = 0
    missing_parent: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def resolve_hierarchy(session: Session) -> LinkStats:
    """Attach areas and climbs to their parent area.

    Runs after every file has been ingested: files arrive in no particular
    order, so a child can be stored before its parent.
    """
    stats = LinkStats()
    for node in repo.list_nodes(session, "area"):
        if len(node.path_tokens) < 2:
            stats.roots += 1
            continue
        _link(session, node, stats)
    for node in repo.list_nodes(session, "climb"):
        _link(session, node, stats)
    logger.info("hierarchy_resolved", **stats.as_dict())
    return stats


def _link(session: Session, node: models.ContentNode, stats: LinkStats) -> None:
    parent_path = parent_tokens(node.path_tokens)
    parent = repo.get_node(session, node_id_for(parent_path), kind="area") if parent_path else None
    if parent is None:
        stats.missing_parent += 1
        node.parent_id = None
        logger.warning(
            "parent_area_missing",
            kind=node.kind,
            slug=node.slug,
            source_path=node.source_path,
            parent_path="/".join(parent_path),
        )
        return
    repo.link_parent_child(session, parent, node)
    stats.linked += 1
