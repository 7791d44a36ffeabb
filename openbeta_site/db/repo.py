from __future__ import annotations

import datetime as dt
from typing import Optional

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from openbeta_site.db import models

logger = structlog.get_logger()


def upsert_node(session: Session, data: dict) -> tuple[models.ContentNode, bool]:
    """Insert or update a node; the flag is False when nothing changed."""
    existing = session.get(models.ContentNode, data["node_id"])
    if existing:
        if existing.content_digest == data["content_digest"] and existing.source_path == data["source_path"]:
            return existing, False
        if existing.source_path != data["source_path"]:
            logger.warning(
                "node_id_collision",
                node_id=data["node_id"],
                kept=data["source_path"],
                replaced=existing.source_path,
            )
        for key, value in data.items():
            setattr(existing, key, value)
        existing.updated_at = dt.datetime.utcnow()
        session.flush()
        return existing, True
    node = models.ContentNode(**data)
    session.add(node)
    session.flush()
    return node, True


def upsert_boundary(session: Session, data: dict) -> tuple[models.Boundary, bool]:
    existing = session.get(models.Boundary, data["node_id"])
    if existing:
        if existing.content_digest == data["content_digest"]:
            return existing, False
        for key, value in data.items():
            setattr(existing, key, value)
        session.flush()
        return existing, True
    boundary = models.Boundary(**data)
    session.add(boundary)
    session.flush()
    return boundary, True


def upsert_page(session: Session, data: dict) -> models.PageRequest:
    existing = session.get(models.PageRequest, data["path"])
    if existing:
        for key, value in data.items():
            setattr(existing, key, value)
        session.flush()
        return existing
    page = models.PageRequest(**data)
    session.add(page)
    session.flush()
    return page


def get_node(session: Session, node_id: str, kind: Optional[str] = None) -> Optional[models.ContentNode]:
    node = session.get(models.ContentNode, node_id)
    if node is None or (kind and node.kind != kind):
        return None
    return node


def list_nodes(session: Session, kind: str) -> list[models.ContentNode]:
    return list(
        session.execute(
            select(models.ContentNode)
            .where(models.ContentNode.kind == kind)
            .order_by(models.ContentNode.raw_path, models.ContentNode.filename)
        ).scalars()
    )


def children_of(session: Session, node_id: str, kind: Optional[str] = None) -> list[models.ContentNode]:
    query = select(models.ContentNode).where(models.ContentNode.parent_id == node_id)
    if kind:
        query = query.where(models.ContentNode.kind == kind)
    return list(session.execute(query.order_by(models.ContentNode.display_name)).scalars())


def link_parent_child(session: Session, parent: models.ContentNode, child: models.ContentNode) -> None:
    child.parent_id = parent.node_id
    session.flush()


def boundary_for(session: Session, raw_path: str) -> Optional[models.Boundary]:
    return session.execute(
        select(models.Boundary).where(models.Boundary.raw_path == raw_path)
    ).scalars().first()


def page_for_path(session: Session, path: str) -> Optional[models.PageRequest]:
    page = session.get(models.PageRequest, path)
    if page:
        return page
    # client-side routes such as /edit/* only exist as match patterns
    for candidate in session.execute(
        select(models.PageRequest).where(models.PageRequest.match_path.is_not(None))
    ).scalars():
        prefix = candidate.match_path.rstrip("*")
        if path.startswith(prefix):
            return candidate
    return None


def count_nodes(session: Session) -> dict[str, int]:
    rows = session.execute(
        select(models.ContentNode.kind, func.count()).group_by(models.ContentNode.kind)
    ).all()
    counts = {kind: count for kind, count in rows}
    counts["boundary"] = session.execute(select(func.count()).select_from(models.Boundary)).scalar_one()
    counts["page_request"] = session.execute(select(func.count()).select_from(models.PageRequest)).scalar_one()
    return counts


def remove_missing(session: Session, node_ids: set[str], boundary_ids: set[str]) -> dict[str, int]:
    """Drop nodes and boundaries that no longer have a source file."""
    stale = [
        node_id
        for node_id in session.execute(select(models.ContentNode.node_id)).scalars()
        if node_id not in node_ids
    ]
    if stale:
        session.execute(
            update(models.ContentNode)
            .where(models.ContentNode.parent_id.in_(stale))
            .values(parent_id=None)
            .execution_options(synchronize_session="fetch")
        )
        session.execute(
            delete(models.PageRequest)
            .where(models.PageRequest.node_id.in_(stale))
            .execution_options(synchronize_session="fetch")
        )
        session.execute(
            delete(models.ContentNode)
            .where(models.ContentNode.node_id.in_(stale))
            .execution_options(synchronize_session="fetch")
        )
    stale_boundaries = [
        node_id
        for node_id in session.execute(select(models.Boundary.node_id)).scalars()
        if node_id not in boundary_ids
    ]
    if stale_boundaries:
        session.execute(
            delete(models.Boundary)
            .where(models.Boundary.node_id.in_(stale_boundaries))
            .execution_options(synchronize_session="fetch")
        )
    session.flush()
    if stale or stale_boundaries:
        logger.info("stale_nodes_removed", nodes=len(stale), boundaries=len(stale_boundaries))
    return {"nodes": len(stale), "boundaries": len(stale_boundaries)}
