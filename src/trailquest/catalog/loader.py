"""
Catalog snapshot loader.

A catalog is a local JSON file (default: `data/catalogs/sample_trail.json`) holding
a point-in-time snapshot of what the storage layer would hand the engine: spots,
trails, each trail's ordered spot ids, the discovery history and spot ratings.
We validate it into typed Pydantic models so the engine can assume a consistent shape.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter

from trailquest.core.env import resolve_project_path
from trailquest.domain.models import Discovery, Spot, SpotRating, Trail


class Catalog(BaseModel):
    spots: list[Spot] = Field(default_factory=list)
    trails: list[Trail] = Field(default_factory=list)
    # trail_id -> spot ids in canonical trail order
    trail_spots: dict[str, list[str]] = Field(default_factory=dict)
    discoveries: list[Discovery] = Field(default_factory=list)
    ratings: list[SpotRating] = Field(default_factory=list)

    def trail(self, trail_id: str) -> Trail:
        for t in self.trails:
            if t.id == trail_id:
                return t
        raise LookupError(f"Unknown trail '{trail_id}'.")

    def trail_spot_ids(self, trail_id: str) -> list[str]:
        self.trail(trail_id)
        return list(self.trail_spots.get(trail_id, []))

    def spots_for_trail(self, trail_id: str) -> list[Spot]:
        """Spots of a trail in trail order (ids without a spot record are skipped)."""
        by_id = {s.id: s for s in self.spots}
        return [by_id[sid] for sid in self.trail_spot_ids(trail_id) if sid in by_id]


_CATALOG_ADAPTER = TypeAdapter(Catalog)


def load_catalog(path: str | Path) -> Catalog:
    """Load and validate a catalog snapshot JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    return _CATALOG_ADAPTER.validate_python(payload)
