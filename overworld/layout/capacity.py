"""Region capacity report."""

from __future__ import annotations

from typing import Sequence

from overworld.config import LAYOUT_RULES, LayoutRules

from .models import PlacedItem, RegionBounds, RegionCapacity


def region_capacity(
    placed: Sequence[PlacedItem],
    bounds: RegionBounds,
    *,
    rules: LayoutRules = LAYOUT_RULES,
) -> RegionCapacity:
    """Area utilisation of a region.

    Each item counts its full bounding square, not its circular
    footprint, so regions report "full" before they are crowded.  A
    region is full once less than ``rules.full_threshold`` of its area
    remains; exactly the threshold counts as full.
    """
    total = bounds.width * bounds.height
    used = sum(rules.boundary_side(p.size) ** 2 for p in placed)
    remaining = total - used
    full_at = (1.0 - rules.full_threshold) * total
    return RegionCapacity(
        total_area=total,
        used_area=used,
        remaining_area=remaining,
        utilization_percent=used / total * 100,
        is_full=used >= full_at - 1e-9 * total,
    )
