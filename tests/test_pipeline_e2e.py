from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from openbeta_site.core.exceptions import IngestionError
from openbeta_site.core.utils_ids import node_id_for
from openbeta_site.db import models
from openbeta_site.db import repo
from openbeta_site.pipeline import SitePipeline


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_build_from_content_tree(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    models.Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)

    areas = tmp_path / "areas"
    _write(areas, "USA/index.md", "---\narea_name: USA\n---\n")
    _write(areas, "USA/Oregon/index.md", "---\narea_name: (6) Oregon\n---\n")
    _write(areas, "USA/Oregon/Portland/index.md", "---\narea_name: Portland\n---\n")
    _write(
        areas,
        "USA/Oregon/Portland/giants-staircase.md",
        "---\nroute_name: 04-Giant's Staircase\nyds: 5.8\nfa: Bob\n---\nGreat route.\n",
    )
    _write(areas, "USA/Oregon/boundary.geojson", '{"type": "Polygon", "coordinates": []}')
    _write(areas, ".drafts/ignored.md", "---\nroute_name: Hidden\n---\n")

    with Session() as session:
        pipeline = SitePipeline(session)
        stats = pipeline.run(pipeline.sources_for(areas, tmp_path / "no-pages"))

        assert stats["ingest"]["areas"] == 3
        assert stats["ingest"]["climbs"] == 1
        assert stats["ingest"]["boundaries"] == 1
        assert stats["link"] == {"linked": 3, "roots": 1, "missing_parent": 0}
        assert stats["pages"] == 4

        oregon = repo.get_node(session, node_id_for(["USA", "Oregon"]), kind="area")
        assert oregon.slug == "/usa/oregon"
        assert oregon.display_name == "Oregon"

        climb = repo.get_node(session, node_id_for(["USA", "Oregon", "Portland", "giants-staircase"]))
        assert climb.slug == "/usa/oregon/portland/giants-staircase"
        assert climb.display_name == "Giant's Staircase"
        assert climb.parent.display_name == "Portland"

        assert repo.boundary_for(session, "USA/Oregon") is not None
        page = repo.page_for_path(session, "/usa/oregon/portland/giants-staircase")
        assert page.context_json["meta_description"] == "First ascent by Bob - 5.8 - Located in Portland at Oregon"

        run = session.query(models.IngestionRun).one()
        assert run.status == "finished"
        assert run.stats_json["pages"] == 4


def test_rebuild_is_stable(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    models.Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)

    areas = tmp_path / "areas"
    _write(areas, "USA/index.md", "---\narea_name: USA\n---\n")
    _write(areas, "USA/route.md", "---\nroute_name: Route\n---\n")

    with Session() as session:
        pipeline = SitePipeline(session)
        first = pipeline.run({"areas-routes": areas})
        second = pipeline.run({"areas-routes": areas})
        paths = sorted(page.path for page in pipeline.pages)

    assert second["ingest"]["unchanged"] == 2
    assert first["link"] == second["link"]
    assert paths == ["/usa", "/usa/route"]


def test_missing_source_records_failed_run(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    models.Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)

    with Session() as session:
        with pytest.raises(IngestionError):
            SitePipeline(session).run({"areas-routes": tmp_path / "missing"})
        runs = session.query(models.IngestionRun).all()

    assert [run.status for run in runs] == ["error"]


def test_rebuild_drops_deleted_files(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    models.Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)

    areas = tmp_path / "areas"
    _write(areas, "USA/index.md", "---\narea_name: USA\n---\n")
    _write(areas, "USA/Oregon/index.md", "---\narea_name: Oregon\n---\n")
    _write(areas, "USA/Oregon/boundary.geojson", '{"type": "Polygon", "coordinates": []}')
    _write(areas, "USA/Oregon/route.md", "---\nroute_name: Oregon Route\n---\n")
    route = _write(areas, "USA/route.md", "---\nroute_name: Route\n---\n")

    with Session() as session:
        pipeline = SitePipeline(session)
        pipeline.run({"areas-routes": areas})
        route.unlink()
        (areas / "USA/Oregon/index.md").unlink()
        (areas / "USA/Oregon/boundary.geojson").unlink()
        stats = pipeline.run({"areas-routes": areas})

        assert stats["removed"] == {"nodes": 2, "boundaries": 1}
        assert sorted(page.path for page in pipeline.pages) == ["/usa", "/usa/oregon/route"]
        assert repo.get_node(session, node_id_for(["USA", "route"])) is None
        assert repo.boundary_for(session, "USA/Oregon") is None
        orphan = repo.get_node(session, node_id_for(["USA", "Oregon", "route"]))
        assert orphan.parent_id is None
        assert repo.page_for_path(session, "/usa/route") is None
        assert session.query(models.PageRequest).count() == 2
