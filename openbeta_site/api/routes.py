from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select, text
from sqlalchemy.orm import Session

from openbeta_site.api.deps import get_db
from openbeta_site.api.schemas import NodeOut, PageOut
from openbeta_site.core.exceptions import ParsingError
from openbeta_site.db import models, repo
from openbeta_site.pages.geo import area_feature_collection
from openbeta_site.pages.meta import breadcrumbs, edit_path
from openbeta_site.parsing.node_text import render_html

router = APIRouter()


@router.get("/health")
def health(db: Session = Depends(get_db)):
    db_ok = True
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        db_ok = False
    if not db_ok:
        return {"status": "degraded", "db_ok": False}

    last_run = (
        db.execute(select(models.IngestionRun).order_by(models.IngestionRun.run_id.desc()))
        .scalars()
        .first()
    )
    return {
        "status": "ok",
        "db_ok": True,
        "last_run_status": last_run.status if last_run else None,
        "last_run_finished_at": last_run.finished_at.isoformat() if last_run and last_run.finished_at else None,
        "counts": repo.count_nodes(db),
    }


@router.get("/areas", response_model=list[NodeOut])
def list_areas(root_only: bool = False, db: Session = Depends(get_db)):
    areas = repo.list_nodes(db, "area")
    if root_only:
        areas = [area for area in areas if area.parent_id is None]
    return sorted(areas, key=lambda area: area.display_name)


@router.get("/areas/{node_id}")
def area_detail(node_id: str, db: Session = Depends(get_db)):
    area = repo.get_node(db, node_id, kind="area")
    if not area:
        return {"error": "not_found"}
    return {
        "area": NodeOut.model_validate(area).model_dump(),
        "breadcrumbs": breadcrumbs(area.path_tokens),
        "html": render_html(area.body),
        "areas": [NodeOut.model_validate(n).model_dump() for n in repo.children_of(db, node_id, kind="area")],
        "climbs": [NodeOut.model_validate(n).model_dump() for n in repo.children_of(db, node_id, kind="climb")],
    }


@router.get("/areas/{node_id}/geojson")
def area_geojson(node_id: str, db: Session = Depends(get_db)):
    area = repo.get_node(db, node_id, kind="area")
    if not area:
        return {"error": "not_found"}
    boundary = repo.boundary_for(db, area.raw_path)
    children = repo.children_of(db, node_id, kind="area")
    try:
        return area_feature_collection(area, children, boundary)
    except ParsingError as exc:
        return {"error": "invalid_boundary", "detail": str(exc)}


@router.get("/climbs/{node_id}")
def climb_detail(node_id: str, db: Session = Depends(get_db)):
    climb = repo.get_node(db, node_id, kind="climb")
    if not climb:
        return {"error": "not_found"}
    parent = repo.get_node(db, climb.parent_id) if climb.parent_id else None
    return {
        "climb": NodeOut.model_validate(climb).model_dump(),
        "parent": NodeOut.model_validate(parent).model_dump() if parent else None,
        "breadcrumbs": breadcrumbs(climb.path_tokens),
        "html": render_html(climb.body),
        "edit_path": edit_path(climb.source_path),
    }


@router.get("/pages", response_model=list[PageOut])
def list_pages(db: Session = Depends(get_db)):
    return db.execute(select(models.PageRequest).order_by(models.PageRequest.path)).scalars().all()


@router.get("/resolve")
def resolve(path: str, db: Session = Depends(get_db)):
    page = repo.page_for_path(db, path)
    if not page:
        return {"error": "not_found"}
    node = repo.get_node(db, page.node_id) if page.node_id else None
    return {
        "page": PageOut.model_validate(page).model_dump(),
        "node": NodeOut.model_validate(node).model_dump() if node else None,
    }
