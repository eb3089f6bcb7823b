"""Single-region packer: greedy largest-first raster-scan placement."""

from __future__ import annotations

import logging
from typing import Sequence

from overworld.config import LAYOUT_RULES, LayoutRules

from .geometry import (
    region_polygon, boundary_inside_region, would_collide,
    snap_to_tile, scan_positions,
)
from .models import Item, PlacedItem, PackResult, RegionBounds, LayoutOptions
from .validation import (
    validate_items, validate_bounds, validate_options, validate_rules,
    ensure_valid,
)


log = logging.getLogger(__name__)


def _position_ok(
    cx: float, cy: float,
    size: float,
    placed: Sequence[PlacedItem],
    region,
    spacing: float,
    rules: LayoutRules,
) -> bool:
    """Hard constraints: no collision with placed items, boundary inside region."""
    # Collision first: pure arithmetic and rejects most candidates
    # before the Shapely containment check.
    for p in placed:
        if would_collide(cx, cy, size, p.grid_x, p.grid_y, p.size, spacing, rules):
            return False
    return boundary_inside_region(cx, cy, rules.boundary_radius(size), region)


def find_position(
    size: float,
    placed: Sequence[PlacedItem],
    bounds: RegionBounds,
    spacing: float,
    *,
    rules: LayoutRules = LAYOUT_RULES,
    region=None,
) -> tuple[float, float] | None:
    """Find the first valid whole-tile position for an item of *size*.

    Scans top-to-bottom, left-to-right in ``rules.search_step`` steps over
    the region shrunk by the boundary radius.  A candidate is accepted
    only if both the scanned point and its snapped whole-tile position
    pass the hard constraints; otherwise the scan continues.

    Returns the snapped ``(grid_x, grid_y)`` or None when nothing fits.
    """
    if region is None:
        region = region_polygon(bounds)
    radius = rules.boundary_radius(size)
    step = rules.search_step

    for cy in scan_positions(radius, bounds.height - radius, step):
        for cx in scan_positions(radius, bounds.width - radius, step):
            if not _position_ok(cx, cy, size, placed, region, spacing, rules):
                continue
            sx, sy = snap_to_tile(cx), snap_to_tile(cy)
            if (sx, sy) != (cx, cy) and not _position_ok(
                    sx, sy, size, placed, region, spacing, rules):
                log.debug("Snapped position (%.1f, %.1f) rejected for size %.2f",
                          sx, sy, size)
                continue
            return (sx, sy)
    return None


def fits_empty_region(
    size: float,
    bounds: RegionBounds,
    *,
    rules: LayoutRules = LAYOUT_RULES,
) -> bool:
    """True if an item of *size* can be placed in an empty region."""
    return find_position(size, (), bounds, 0.0, rules=rules) is not None


def pack_region(
    items: Sequence[Item],
    bounds: RegionBounds,
    options: LayoutOptions | None = None,
    *,
    rules: LayoutRules = LAYOUT_RULES,
) -> PackResult:
    """Place as many items as possible inside one region.

    Items are placed largest first (stable for equal sizes), each at the
    first valid position of the raster scan.  Items with no valid
    position are returned in ``overflow`` in placement order; packing
    carries on with the next item.

    Parameters
    ----------
    items : sequence of Item
        Items to place.  Not modified.
    bounds : RegionBounds
        Region size in grid tiles.
    options : LayoutOptions, optional
        Spacing between boundaries (default ``rules.default_spacing``).
    rules : LayoutRules
        Placement constants.

    Returns
    -------
    PackResult
        Placed items in region-local coordinates, plus the overflow.

    Raises
    ------
    LayoutConfigError
        If the items, bounds, options or rules are invalid.
    """
    if options is None:
        options = LayoutOptions(spacing=rules.default_spacing)
    ensure_valid(validate_items(items), validate_bounds(bounds),
                 validate_options(options), validate_rules(rules))

    region = region_polygon(bounds)
    ordered = sorted(items, key=lambda it: -it.size)

    placed: list[PlacedItem] = []
    overflow: list[Item] = []
    for item in ordered:
        pos = find_position(item.size, placed, bounds, options.spacing,
                            rules=rules, region=region)
        if pos is None:
            overflow.append(item)
            continue
        placed.append(PlacedItem.from_item(item, pos[0], pos[1]))
        log.debug("Placed %s (size %.2f) at (%.0f, %.0f)",
                  item.id, item.size, pos[0], pos[1])

    if overflow:
        log.debug("Region %gx%g full: placed %d, overflow %d",
                  bounds.width, bounds.height, len(placed), len(overflow))
    return PackResult(placed=placed, overflow=overflow)
