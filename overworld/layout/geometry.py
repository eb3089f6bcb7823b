"""Low-level geometry helpers for the packer."""

from __future__ import annotations

import math

from shapely.geometry import box as shapely_box
from shapely.prepared import prep as shapely_prep

from overworld.config import LAYOUT_RULES, LayoutRules

from .models import RegionBounds


def region_polygon(bounds: RegionBounds):
    """Prepared Shapely polygon of a region, for fast repeated containment."""
    return shapely_prep(shapely_box(0.0, 0.0, bounds.width, bounds.height))


def boundary_inside_region(
    cx: float, cy: float,
    radius: float,
    region,
) -> bool:
    """Check if an item's boundary square lies fully inside *region*.

    *region* is a (prepared) Shapely geometry; touching the edge counts
    as inside.
    """
    return region.covers(shapely_box(cx - radius, cy - radius,
                                     cx + radius, cy + radius))


def min_center_distance(
    size1: float, size2: float,
    spacing: float,
    rules: LayoutRules = LAYOUT_RULES,
) -> float:
    """Smallest allowed centre distance between two items.

    Each boundary radius is padded by half the spacing plus the grid
    buffer, so the gap between boundaries is ``spacing + 2 × buffer``.
    """
    pad = spacing / 2 + rules.grid_buffer
    return (rules.boundary_radius(size1) + pad) + (rules.boundary_radius(size2) + pad)


def would_collide(
    x1: float, y1: float, size1: float,
    x2: float, y2: float, size2: float,
    spacing: float = 0.0,
    rules: LayoutRules = LAYOUT_RULES,
) -> bool:
    """True if the two padded boundary circles overlap."""
    return math.hypot(x1 - x2, y1 - y2) < min_center_distance(size1, size2, spacing, rules)


def snap_to_tile(v: float) -> float:
    """Round to the nearest whole tile, halves rounding up.

    Matches JavaScript ``Math.round`` (2.5 → 3, -2.5 → -2) rather than
    Python's banker's rounding.
    """
    return float(math.floor(v + 0.5))


def scan_positions(start: float, end: float, step: float):
    """Yield start, start+step, ... up to *end* inclusive.

    Positions are computed by index so long scans do not accumulate
    floating-point drift.
    """
    if end < start:
        return
    n = int(math.floor((end - start) / step + 1e-9))
    for i in range(n + 1):
        yield start + i * step
