from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger
import uvicorn

from openbeta_site.core.config import get_settings
from openbeta_site.core.exceptions import OpenBetaError
from openbeta_site.core.logging import configure_logging
from openbeta_site.db import models
from openbeta_site.db.session import SessionLocal, engine, init_db
from openbeta_site.pages.builder import PageSpec, export_manifest
from openbeta_site.parsing.quality import quality_metrics
from openbeta_site.ingestion.scanner import scan_sources
from openbeta_site.pipeline import SitePipeline


def cmd_ingest(areas_dir: str, pages_dir: str | None) -> None:
    with SessionLocal() as session:
        pipeline = SitePipeline(session)
        events = scan_sources(pipeline.sources_for(areas_dir, pages_dir))
        stats = pipeline.ingest(events)
        session.commit()
        logger.info("ingest_complete", stats=stats.as_dict())


def cmd_link() -> None:
    with SessionLocal() as session:
        stats = SitePipeline(session).link()
        session.commit()
        logger.info("link_complete", stats=stats.as_dict())


def cmd_pages(out: str | None) -> None:
    with SessionLocal() as session:
        pages = SitePipeline(session).emit_pages()
        session.commit()
        _export(pages, out)
        logger.info("pages_complete", count=len(pages))


def cmd_build(areas_dir: str, pages_dir: str | None, out: str | None) -> None:
    with SessionLocal() as session:
        pipeline = SitePipeline(session)
        stats = pipeline.run(pipeline.sources_for(areas_dir, pages_dir))
        _export(pipeline.pages, out)
        logger.info("build_complete", stats=stats)


def cmd_stats() -> None:
    with SessionLocal() as session:
        nodes = session.query(models.ContentNode).all()
        metrics = quality_metrics(
            [
                {
                    "kind": n.kind,
                    "body": n.body,
                    "fields_json": n.fields_json,
                    "parent_id": n.parent_id,
                }
                for n in nodes
            ]
        )
        logger.info("stats", metrics=metrics)


def _export(pages: list[PageSpec], out: str | None) -> None:
    if not out:
        return
    path = export_manifest(pages, Path(out))
    logger.info("manifest_written", path=str(path))


def cmd_serve() -> None:
    settings = get_settings()
    uvicorn.run("openbeta_site.api.main:app", host=settings.api_host, port=settings.api_port)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    default_manifest = str(Path(settings.output_dir) / "pages.json")
    parser = argparse.ArgumentParser(description="OpenBeta site content CLI")
    sub = parser.add_subparsers(dest="command", required=True)
    ingest = sub.add_parser("ingest")
    ingest.add_argument("--areas-dir", default=settings.areas_dir)
    ingest.add_argument("--pages-dir", default=settings.pages_dir)
    sub.add_parser("link")
    pages = sub.add_parser("pages")
    pages.add_argument("--out", default=None, help=f"write a JSON manifest (e.g. {default_manifest})")
    build = sub.add_parser("build")
    build.add_argument("--areas-dir", default=settings.areas_dir)
    build.add_argument("--pages-dir", default=settings.pages_dir)
    build.add_argument("--out", default=default_manifest)
    sub.add_parser("stats")
    sub.add_parser("serve")
    return parser


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    parser = build_parser()
    args = parser.parse_args()
    init_db(engine)
    try:
        if args.command == "ingest":
            cmd_ingest(args.areas_dir, args.pages_dir)
        elif args.command == "link":
            cmd_link()
        elif args.command == "pages":
            cmd_pages(args.out)
        elif args.command == "build":
            cmd_build(args.areas_dir, args.pages_dir, args.out)
        elif args.command == "stats":
            cmd_stats()
        elif args.command == "serve":
            cmd_serve()
    except OpenBetaError as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
