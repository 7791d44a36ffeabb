from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, Mapping

import structlog
from sqlalchemy.orm import Session

from openbeta_site.core.exceptions import OpenBetaError
from openbeta_site.core.site_config import (
    DEFAULT_PAGE_TEMPLATES,
    DEFAULT_SOURCE_CONFIG,
    PageTemplates,
    SourceConfig,
)
from openbeta_site.db import models, repo
from openbeta_site.graph.linker import LinkStats, resolve_hierarchy
from openbeta_site.ingestion.raw_store import FileEvent
from openbeta_site.ingestion.scanner import scan_sources
from openbeta_site.pages.builder import PageSpec, build_page_requests, store_page_requests
from openbeta_site.parsing.classifier import NodeClassifier
from openbeta_site.parsing.records import BoundaryRecord, boundary_row, node_row

logger = structlog.get_logger()


@dataclass
class IngestStats:
    files: int = 0
    areas: int = 0
    climbs: int = 0
    pages: int = 0
    boundaries: int = 0
    skipped: int = 0
    unchanged: int = 0
    errors: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


_COUNTERS = {"area": "areas", "climb": "climbs", "page": "pages", "boundary": "boundaries"}


class SitePipeline:
    """
    Scan -> ingest -> link -> emit pages.

    Ingest stores every record by identity; links and pages are derived only
    once the whole tree is in the store.
    """

    def __init__(
        self,
        session: Session,
        source_config: SourceConfig = DEFAULT_SOURCE_CONFIG,
        templates: PageTemplates = DEFAULT_PAGE_TEMPLATES,
    ) -> None:
        self.session = session
        self.source_config = source_config
        self.templates = templates
        self.classifier = NodeClassifier(source_config)
        self.pages: list[PageSpec] = []
        self.seen_node_ids: set[str] = set()
        self.seen_boundary_ids: set[str] = set()

    def sources_for(self, areas_dir: str | Path, pages_dir: str | Path | None = None) -> dict[str, Path]:
        sources = {self.source_config.area_source_prefix: Path(areas_dir)}
        if pages_dir is not None and Path(pages_dir).is_dir():
            sources[self.source_config.page_source_name] = Path(pages_dir)
        elif pages_dir is not None:
            logger.info("pages_dir_absent", pages_dir=str(pages_dir))
        return sources

    def ingest(self, events: Iterable[FileEvent]) -> IngestStats:
        stats = IngestStats()
        for event in events:
            stats.files += 1
            try:
                record = self.classifier.classify(event)
            except OpenBetaError as exc:
                stats.errors += 1
                logger.error("file_rejected", source_path=event.relative_path, error=str(exc))
                continue
            if record is None:
                stats.skipped += 1
                continue
            if isinstance(record, BoundaryRecord):
                _, changed = repo.upsert_boundary(self.session, boundary_row(record))
                self.seen_boundary_ids.add(record.node_id)
            else:
                _, changed = repo.upsert_node(self.session, node_row(record))
                self.seen_node_ids.add(record.node_id)
            if not changed:
                stats.unchanged += 1
            counter = _COUNTERS[record.kind]
            setattr(stats, counter, getattr(stats, counter) + 1)
        logger.info("ingest_finished", **stats.as_dict())
        return stats

    def prune(self) -> dict[str, int]:
        """Remove stored records that no file produced since the last reset."""
        return repo.remove_missing(self.session, self.seen_node_ids, self.seen_boundary_ids)

    def link(self) -> LinkStats:
        return resolve_hierarchy(self.session)

    def emit_pages(self) -> list[PageSpec]:
        self.pages = build_page_requests(self.session, self.templates)
        store_page_requests(self.session, self.pages)
        logger.info("pages_emitted", count=len(self.pages))
        return self.pages

    def run(self, sources: Mapping[str, str | Path]) -> dict:
        sources_json = {name: str(path) for name, path in sources.items()}
        run = models.IngestionRun(status="running", sources_json=sources_json)
        self.session.add(run)
        self.session.flush()
        self.seen_node_ids = set()
        self.seen_boundary_ids = set()
        try:
            ingest_stats = self.ingest(scan_sources(sources))
            removed = self.prune()
            link_stats = self.link()
            pages = self.emit_pages()
        except Exception:
            self.session.rollback()
            self.session.add(
                models.IngestionRun(status="error", sources_json=sources_json, finished_at=dt.datetime.utcnow())
            )
            self.session.commit()
            raise
        stats = {
            "ingest": ingest_stats.as_dict(),
            "removed": removed,
            "link": link_stats.as_dict(),
            "pages": len(pages),
        }
        run.status = "finished"
        run.finished_at = dt.datetime.utcnow()
        run.stats_json = stats
        self.session.commit()
        return stats
