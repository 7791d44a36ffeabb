from __future__ import annotations

from collections import Counter


def quality_metrics(nodes: list[dict]) -> dict:
    counts = Counter(node["kind"] for node in nodes)
    empty_bodies = [node for node in nodes if not (node.get("body") or "").strip()]
    ungraded = [
        node for node in nodes
        if node["kind"] == "climb" and not (node.get("fields_json") or {}).get("yds")
    ]
    without_parent = [node for node in nodes if node["kind"] in {"area", "climb"} and not node.get("parent_id")]
    return {
        "counts": dict(counts),
        "empty_bodies": len(empty_bodies),
        "ungraded_climbs": len(ungraded),
        "without_parent": len(without_parent),
        "total_nodes": len(nodes),
    }
