from __future__ import annotations

import json
from typing import Iterable, Optional

from openbeta_site.core.exceptions import ParsingError
from openbeta_site.db import models

GEOMETRY_TYPES = frozenset({
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
})


def boundary_features(raw_geojson: str) -> list[dict]:
    try:
        data = json.loads(raw_geojson)
    except json.JSONDecodeError as exc:
        raise ParsingError(f"invalid boundary GeoJSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParsingError("boundary GeoJSON must be an object")
    geo_type = data.get("type")
    if geo_type == "FeatureCollection":
        return list(data.get("features") or [])
    if geo_type == "Feature":
        return [data]
    if geo_type in GEOMETRY_TYPES:
        return [{"type": "Feature", "geometry": data, "properties": {}}]
    raise ParsingError(f"unsupported GeoJSON type: {geo_type!r}")


def area_point(area: models.ContentNode) -> Optional[dict]:
    metadata = (area.fields_json or {}).get("metadata") or {}
    lat, lng = metadata.get("lat"), metadata.get("lng")
    if lat is None or lng is None:
        return None
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
        "properties": {"node_id": area.node_id, "name": area.display_name, "slug": area.slug},
    }


def area_feature_collection(
    area: models.ContentNode,
    children: Iterable[models.ContentNode],
    boundary: Optional[models.Boundary] = None,
) -> dict:
    features: list[dict] = []
    if boundary is not None:
        features.extend(boundary_features(boundary.raw_geojson))
    for child in children:
        point = area_point(child)
        if point is not None:
            features.append(point)
    return {
        "type": "FeatureCollection",
        "features": features,
        "properties": {"node_id": area.node_id, "name": area.display_name},
    }
