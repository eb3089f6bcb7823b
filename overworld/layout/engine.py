"""Multi-region layout engine: spreads items over a grid of regions."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable

from overworld.config import LAYOUT_RULES, LayoutRules

from .aging import bucket_by_age
from .capacity import region_capacity
from .models import (
    Item, LayoutOptions, RegionBounds, Region, GridPosition, WorldBounds,
    MultiRegionLayout, UnplaceableItem, RegionLimitError,
    TIER_ORDER,
)
from .packer import pack_region, fits_empty_region
from .validation import (
    validate_items, validate_bounds, validate_options, validate_rules,
    ensure_valid,
)


log = logging.getLogger(__name__)


def region_grid_columns(item_count: int, rules: LayoutRules = LAYOUT_RULES) -> int:
    """Width of the region grid for *item_count* items.

    Assumes about ``rules.items_per_region`` items per region and aims for
    a square arrangement, never narrower than ``rules.min_grid_columns``.
    """
    estimated_regions = math.ceil(item_count / rules.items_per_region)
    return max(rules.min_grid_columns, math.ceil(math.sqrt(estimated_regions)))


def _split_unplaceable(
    items: list[Item],
    bounds: RegionBounds,
    rules: LayoutRules,
) -> tuple[list[Item], list[UnplaceableItem]]:
    """Separate items that cannot fit even in an empty region."""
    placeable: list[Item] = []
    unplaceable: list[UnplaceableItem] = []
    fits_cache: dict[float, bool] = {}

    for item in items:
        side = rules.boundary_side(item.size)
        if side > bounds.width or side > bounds.height:
            reason = (f"Boundary of {side:g} tiles exceeds the "
                      f"{bounds.width:g}x{bounds.height:g} region")
        else:
            if item.size not in fits_cache:
                fits_cache[item.size] = fits_empty_region(item.size, bounds, rules=rules)
            if fits_cache[item.size]:
                placeable.append(item)
                continue
            reason = (f"No whole-tile position fits a boundary of {side:g} "
                      f"tiles in the {bounds.width:g}x{bounds.height:g} region")
        log.warning("Unplaceable item %s (size %g): %s", item.id, item.size, reason)
        unplaceable.append(UnplaceableItem(item=item, reason=reason))

    return placeable, unplaceable


def layout_multi_region(
    items: Iterable[Item],
    region_size: float | None = None,
    options: LayoutOptions | None = None,
    *,
    now: datetime | None = None,
    rules: LayoutRules = LAYOUT_RULES,
) -> MultiRegionLayout:
    """Lay out items across as many square regions as needed.

    Items are grouped by age tier and each tier is packed into its own
    run of regions, most recent tier first.  Regions fill a grid
    row-major, wrapping after ``region_grid_columns(len(items))``
    columns; item coordinates are translated to world space.

    Parameters
    ----------
    items : iterable of Item
        Items to lay out.  Ids must be unique.
    region_size : float, optional
        Side of every region in tiles (default ``rules.default_region_size``).
    options : LayoutOptions, optional
        Spacing between boundaries (default ``rules.default_spacing``).
    now : datetime, optional
        Reference time for age tiers (default: current UTC time).
    rules : LayoutRules
        Placement and region-budget constants.

    Returns
    -------
    MultiRegionLayout
        Regions in creation order, plus any items too large for a region.

    Raises
    ------
    LayoutConfigError
        If the items, region size, options or rules are invalid.
    RegionLimitError
        If more than ``rules.max_regions`` regions would be needed.  The
        error carries the regions completed so far and the dropped items.
    """
    items = list(items)
    if region_size is None:
        region_size = rules.default_region_size
    if options is None:
        options = LayoutOptions(spacing=rules.default_spacing)

    bounds = RegionBounds(width=region_size, height=region_size)
    ensure_valid(validate_items(items), validate_bounds(bounds),
                 validate_options(options), validate_rules(rules))

    grid_size = region_grid_columns(len(items), rules)
    placeable, unplaceable = _split_unplaceable(items, bounds, rules)
    layout = MultiRegionLayout(regions=[], unplaceable=unplaceable)
    buckets = bucket_by_age(placeable, now, rules=rules)

    row, col = 0, 0
    for tier_idx, tier in enumerate(TIER_ORDER):
        remaining = buckets[tier]

        while remaining:
            if len(layout.regions) >= rules.max_regions:
                dropped = remaining + [
                    it for later in TIER_ORDER[tier_idx + 1:] for it in buckets[later]
                ]
                log.error(
                    "Region limit of %d reached: placed %d item(s), dropping %d",
                    rules.max_regions, layout.placed_count, len(dropped),
                )
                raise RegionLimitError(layout, dropped, rules.max_regions)

            result = pack_region(remaining, bounds, options, rules=rules)
            # _split_unplaceable only passes items that fit an empty region,
            # so every fresh region places at least one item.

            offset_x = col * region_size
            offset_y = row * region_size
            layout.regions.append(Region(
                region_id=f"region-{row}-{col}",
                grid_position=GridPosition(row=row, col=col),
                world_bounds=WorldBounds(
                    x=offset_x, y=offset_y, width=region_size, height=region_size,
                ),
                items=[p.translated(offset_x, offset_y) for p in result.placed],
                capacity=region_capacity(result.placed, bounds, rules=rules),
                age_tier=tier,
                name=tier.label,
            ))
            log.info(
                "Region %d,%d (%s): placed %d, overflow %d",
                row, col, tier.label, len(result.placed), len(result.overflow),
            )

            remaining = result.overflow
            col += 1
            if col >= grid_size:
                col = 0
                row += 1

    return layout
