"""Shared layout constants for the overworld map.

These values are domain constants, not derived quantities: the boundary
size of an item, the scan resolution, the age tiers and the region
budget.  Both the **packer** (which places items inside one region) and
the **engine** (which spreads items over a grid of regions) read them
from a single ``LayoutRules`` instance.

Every public layout function takes a ``rules=`` keyword so callers and
tests can swap in smaller constants without touching the module-level
defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path


_CONFIG_PATH = Path(__file__).resolve().parent / "configs" / "layout_rules.json"


@dataclass(frozen=True)
class LayoutRules:
    """Placement rules for items and regions.

    All distances are in grid tiles.
    """

    boundary_factor: float = 2.0
    """Boundary radius per unit of item size (radius = factor × size)."""

    search_step: float = 0.5
    """Raster-scan step of the position search."""

    grid_buffer: float = 0.3
    """Extra radius added to each item in the collision check.
    Absorbs the quantisation of the half-tile search grid."""

    full_threshold: float = 0.15
    """A region is full once less than this fraction of its area remains."""

    items_per_region: int = 10
    """Rough items-per-region estimate used to size the region grid."""

    min_grid_columns: int = 2
    """Lower bound on the width of the region grid."""

    max_regions: int = 20
    """Hard cap on regions created by one multi-region layout call."""

    default_region_size: float = 25.0
    """Side length of a square region."""

    default_spacing: float = 0.5
    """Minimum gap between item boundaries."""

    recent_days: float = 30.0
    quarter_days: float = 90.0
    year_days: float = 365.0
    """Inclusive upper bounds (in days) of the recent/quarter/year tiers."""

    # ── Derived helpers ────────────────────────────────────────────

    def boundary_radius(self, size: float) -> float:
        """Radius of an item's boundary circle."""
        return self.boundary_factor * size

    def boundary_side(self, size: float) -> float:
        """Side of an item's bounding square (the boundary diameter)."""
        return 2 * self.boundary_radius(size)


def rules_from_dict(data: dict, base: LayoutRules | None = None) -> LayoutRules:
    """Build a LayoutRules from a dict, keeping *base* values for missing keys.

    Unknown keys raise ``KeyError`` so typos in config files do not pass
    silently.
    """
    known = {f.name for f in fields(LayoutRules)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise KeyError(f"Unknown layout rule(s): {', '.join(unknown)}")
    return replace(base or LayoutRules(), **data)


@lru_cache(maxsize=8)
def load_rules(path: Path | None = None) -> LayoutRules:
    """Load layout rules from a JSON file.

    Defaults to ``overworld/configs/layout_rules.json``, which ships as
    package data.  Keys missing from the file keep their built-in values.
    """
    p = path or _CONFIG_PATH
    return rules_from_dict(json.loads(p.read_text(encoding="utf-8")))


# Module-level singleton loaded from the shipped config, importable everywhere.
LAYOUT_RULES = load_rules()
