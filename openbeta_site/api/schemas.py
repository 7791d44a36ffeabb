from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class NodeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    node_id: str
    kind: str
    slug: str
    raw_path: str
    path_tokens: list[str]
    filename: str
    display_name: str
    parent_id: str | None
    fields_json: dict | None


class PageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    path: str
    template: str
    match_path: str | None
    node_id: str | None
    context_json: dict
