from __future__ import annotations

from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
import datetime as dt


class Base(DeclarativeBase):
    pass


class IngestionRun(Base):
    __tablename__ = "ingestion_runs"
    run_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    started_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)
    finished_at: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default="running")
    sources_json: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    stats_json: Mapped[dict | None] = mapped_column(JSON, nullable=True)


class ContentNode(Base):
    __tablename__ = "content_nodes"
    node_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    kind: Mapped[str] = mapped_column(String(16), index=True)
    slug: Mapped[str] = mapped_column(Text, index=True)
    raw_path: Mapped[str] = mapped_column(Text)
    path_tokens: Mapped[list] = mapped_column(JSON)
    filename: Mapped[str] = mapped_column(String(256))
    display_name: Mapped[str] = mapped_column(Text)
    fields_json: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    body: Mapped[str] = mapped_column(Text, default="")
    content_digest: Mapped[str] = mapped_column(String(64))
    source_path: Mapped[str] = mapped_column(Text)
    parent_id: Mapped[str | None] = mapped_column(ForeignKey("content_nodes.node_id"), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow)

    parent: Mapped[Optional["ContentNode"]] = relationship(remote_side=[node_id], back_populates="children")
    children: Mapped[list["ContentNode"]] = relationship(back_populates="parent")


class Boundary(Base):
    __tablename__ = "boundaries"
    node_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    raw_path: Mapped[str] = mapped_column(Text, index=True)
    raw_geojson: Mapped[str] = mapped_column(Text)
    content_digest: Mapped[str] = mapped_column(String(64))
    source_path: Mapped[str] = mapped_column(Text)


class PageRequest(Base):
    __tablename__ = "page_requests"
    path: Mapped[str] = mapped_column(Text, primary_key=True)
    template: Mapped[str] = mapped_column(Text)
    match_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    node_id: Mapped[str | None] = mapped_column(ForeignKey("content_nodes.node_id"), nullable=True)
    context_json: Mapped[dict] = mapped_column(JSON, default=dict)
