"""Layout: places repository markers on the overworld map.

Submodules:
  models        Input/output dataclasses, age tiers, and error types.
  geometry      Low-level geometry helpers (collision, containment, snapping).
  validation    Item, bounds and option checks run before any search.
  packer        Single-region greedy raster-scan placement.
  capacity      Region area utilisation report.
  aging         Recency tiers for age-based region grouping.
  engine        Multi-region layout across a grid of regions.
  serialization JSON conversion (layout_to_dict, parse_layout, parse_items).
"""

from .models import (
    Item, PlacedItem, RegionBounds, LayoutOptions, PackResult,
    RegionCapacity, AgeTier, GridPosition, WorldBounds, Region,
    UnplaceableItem, MultiRegionLayout, TIER_ORDER, TIER_LABELS,
    ValidationError, LayoutError, LayoutConfigError, RegionLimitError,
)
from .packer import pack_region, find_position, fits_empty_region
from .capacity import region_capacity
from .aging import age_tier_for, bucket_by_age
from .engine import layout_multi_region, region_grid_columns
from .serialization import parse_items, layout_to_dict, parse_layout
from .geometry import would_collide, snap_to_tile

__all__ = [
    # Models
    "Item", "PlacedItem", "RegionBounds", "LayoutOptions", "PackResult",
    "RegionCapacity", "AgeTier", "GridPosition", "WorldBounds", "Region",
    "UnplaceableItem", "MultiRegionLayout", "TIER_ORDER", "TIER_LABELS",
    # Errors
    "ValidationError", "LayoutError", "LayoutConfigError", "RegionLimitError",
    # Packer / capacity / aging / engine
    "pack_region", "find_position", "fits_empty_region",
    "region_capacity",
    "age_tier_for", "bucket_by_age",
    "layout_multi_region", "region_grid_columns",
    # Serialization
    "parse_items", "layout_to_dict", "parse_layout",
    # Geometry
    "would_collide", "snap_to_tile",
]
