from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


OptionalText = Annotated[Optional[str], BeforeValidator(_as_text)]


class AreaMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    lat: Optional[float] = None
    lng: Optional[float] = None
    area_id: OptionalText = None
    mp_id: OptionalText = None
    left_right_index: Optional[int] = None
    is_leaf: Optional[bool] = Field(default=None, alias="isLeaf")


class ClimbMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    climb_id: OptionalText = None
    mp_id: OptionalText = None
    left_right_index: Optional[int] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class _NodeRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    node_id: str
    raw_path: str
    content_digest: str
    source_path: str


class BoundaryRecord(_NodeRecord):
    kind: Literal["boundary"] = "boundary"
    path_tokens: list[str]
    raw_geojson: str


class AreaRecord(_NodeRecord):
    kind: Literal["area"] = "area"
    slug: str
    path_tokens: list[str]
    filename: str
    area_name: str
    metadata: Optional[AreaMetadata] = None
    body: str = ""

    @property
    def display_name(self) -> str:
        return self.area_name

    def fields_json(self) -> dict:
        return {"metadata": self.metadata.model_dump() if self.metadata else None}


class ClimbRecord(_NodeRecord):
    kind: Literal["climb"] = "climb"
    slug: str
    path_tokens: list[str]
    filename: str
    route_name: str
    yds: str = ""
    type: dict[str, bool] = Field(default_factory=dict)
    safety: OptionalText = None
    fa: OptionalText = None
    metadata: Optional[ClimbMetadata] = None
    body: str = ""

    @field_validator("yds", mode="before")
    @classmethod
    def _grade_as_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("type", mode="before")
    @classmethod
    def _type_flags(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, str):
            return {value: True}
        if isinstance(value, (list, tuple)):
            return {str(item): True for item in value}
        return value

    @property
    def display_name(self) -> str:
        return self.route_name

    def fields_json(self) -> dict:
        return {
            "yds": self.yds,
            "type": dict(self.type),
            "safety": self.safety,
            "fa": self.fa,
            "metadata": self.metadata.model_dump() if self.metadata else None,
        }


class PageRecord(_NodeRecord):
    kind: Literal["page"] = "page"
    slug: str
    path_tokens: list[str]
    filename: str
    title: OptionalText = None
    body: str = ""

    @property
    def display_name(self) -> str:
        return self.title or self.filename

    def fields_json(self) -> dict:
        return {}


SourceRecord = Annotated[
    Union[BoundaryRecord, AreaRecord, ClimbRecord, PageRecord],
    Field(discriminator="kind"),
]

NodeRecord = Union[AreaRecord, ClimbRecord, PageRecord]


def node_row(record: NodeRecord) -> dict:
    return {
        "node_id": record.node_id,
        "kind": record.kind,
        "slug": record.slug,
        "raw_path": record.raw_path,
        "path_tokens": list(record.path_tokens),
        "filename": record.filename,
        "display_name": record.display_name,
        "fields_json": record.fields_json(),
        "body": record.body,
        "content_digest": record.content_digest,
        "source_path": record.source_path,
    }


def boundary_row(record: BoundaryRecord) -> dict:
    return {
        "node_id": record.node_id,
        "raw_path": record.raw_path,
        "raw_geojson": record.raw_geojson,
        "content_digest": record.content_digest,
        "source_path": record.source_path,
    }
