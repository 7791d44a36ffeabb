from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from structlog.testing import capture_logs

from openbeta_site.db import models
from openbeta_site.db import repo
from openbeta_site.ingestion.scanner import scan_source
from openbeta_site.pipeline import SitePipeline


def _session_factory(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    models.Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_ingest_idempotent(tmp_path: Path):
    Session = _session_factory(tmp_path)
    areas = tmp_path / "areas"
    _write(areas, "USA/index.md", "---\narea_name: USA\n---\n")
    _write(areas, "USA/Oregon/index.md", "---\narea_name: Oregon\n---\n")
    _write(areas, "USA/Oregon/boundary.geojson", '{"type": "Polygon", "coordinates": []}')
    _write(areas, "USA/Oregon/route.md", "---\nroute_name: Route\nyds: 5.9\n---\n")

    with Session() as session:
        pipeline = SitePipeline(session)
        first = pipeline.ingest(scan_source("areas-routes", areas))
        second = pipeline.ingest(scan_source("areas-routes", areas))
        session.commit()

        assert first.areas == 2 and first.climbs == 1 and first.boundaries == 1
        assert first.unchanged == 0
        assert second.unchanged == 4
        assert session.query(models.ContentNode).count() == 3
        assert session.query(models.Boundary).count() == 1


def test_changed_file_updates_node(tmp_path: Path):
    Session = _session_factory(tmp_path)
    areas = tmp_path / "areas"
    route = _write(areas, "USA/route.md", "---\nroute_name: Route\nyds: 5.9\n---\n")

    with Session() as session:
        pipeline = SitePipeline(session)
        pipeline.ingest(scan_source("areas-routes", areas))
        route.write_text("---\nroute_name: Route\nyds: 5.10a\n---\n", encoding="utf-8")
        stats = pipeline.ingest(scan_source("areas-routes", areas))
        session.commit()

        assert stats.unchanged == 0
        nodes = repo.list_nodes(session, "climb")
        assert len(nodes) == 1
        assert nodes[0].fields_json["yds"] == "5.10a"


def test_rejected_files_do_not_stop_ingest(tmp_path: Path):
    Session = _session_factory(tmp_path)
    areas = tmp_path / "areas"
    _write(areas, "USA/index.md", "---\narea_name: USA\n---\n")
    _write(areas, "USA/broken/index.md", "---\nmetadata: {}\n---\n")
    _write(areas, "USA/topo.png", "png")

    with Session() as session, capture_logs() as logs:
        stats = SitePipeline(session).ingest(scan_source("areas-routes", areas))

    assert stats.files == 3
    assert stats.areas == 1
    assert stats.errors == 1
    assert stats.skipped == 1
    rejected = [entry for entry in logs if entry["event"] == "file_rejected"]
    assert rejected and rejected[0]["source_path"].endswith("index.md")


def test_node_id_collision_keeps_later_file(tmp_path: Path):
    Session = _session_factory(tmp_path)
    row = {
        "node_id": "abc",
        "kind": "area",
        "slug": "/usa",
        "raw_path": "USA",
        "path_tokens": ["USA"],
        "filename": "index",
        "display_name": "USA",
        "fields_json": {},
        "body": "",
        "content_digest": "d1",
        "source_path": "USA/index.md",
    }
    with Session() as session, capture_logs() as logs:
        repo.upsert_node(session, row)
        node, changed = repo.upsert_node(session, {**row, "source_path": "USA/index.mdx", "content_digest": "d2"})

    assert changed is True
    assert node.source_path == "USA/index.mdx"
    assert any(entry["event"] == "node_id_collision" for entry in logs)
