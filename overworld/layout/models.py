"""Layout dataclasses, age tiers, and error types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


# ── Input dataclasses ──────────────────────────────────────────────


@dataclass(frozen=True)
class Item:
    """A marker to be placed on the map (one per repository or package)."""

    id: str
    size: float                             # footprint multiplier, > 0
    category: str | None = None             # opaque, passed through
    recency_timestamp: str | None = None    # ISO-8601 last-activity time


@dataclass(frozen=True)
class RegionBounds:
    width: float
    height: float


@dataclass(frozen=True)
class LayoutOptions:
    spacing: float = 0.5                    # min gap between item boundaries
    start_offset: float | None = None       # reserved, unused by the search


# ── Output dataclasses ─────────────────────────────────────────────


@dataclass(frozen=True)
class PlacedItem:
    """An item with a resolved footprint centre.

    Coordinates are region-local when returned by the packer and
    world-space once a Region holds them.
    """

    id: str
    size: float
    grid_x: float
    grid_y: float
    category: str | None = None
    recency_timestamp: str | None = None

    @classmethod
    def from_item(cls, item: Item, grid_x: float, grid_y: float) -> PlacedItem:
        return cls(
            id=item.id,
            size=item.size,
            grid_x=grid_x,
            grid_y=grid_y,
            category=item.category,
            recency_timestamp=item.recency_timestamp,
        )

    def to_item(self) -> Item:
        """Strip the position, giving back the input Item."""
        return Item(
            id=self.id,
            size=self.size,
            category=self.category,
            recency_timestamp=self.recency_timestamp,
        )

    def translated(self, dx: float, dy: float) -> PlacedItem:
        return PlacedItem(
            id=self.id,
            size=self.size,
            grid_x=self.grid_x + dx,
            grid_y=self.grid_y + dy,
            category=self.category,
            recency_timestamp=self.recency_timestamp,
        )


@dataclass
class PackResult:
    """Outcome of packing one region."""

    placed: list[PlacedItem]
    overflow: list[Item]


@dataclass(frozen=True)
class RegionCapacity:
    total_area: float
    used_area: float
    remaining_area: float       # may go negative (bounding squares over-count)
    utilization_percent: float
    is_full: bool


class AgeTier(str, Enum):
    """Recency tiers, declared from most to least recent."""

    RECENT = "recent"
    QUARTER = "quarter"
    YEAR = "year"
    LEGACY = "legacy"

    @property
    def label(self) -> str:
        return TIER_LABELS[self]


TIER_ORDER: tuple[AgeTier, ...] = (
    AgeTier.RECENT, AgeTier.QUARTER, AgeTier.YEAR, AgeTier.LEGACY,
)

TIER_LABELS: dict[AgeTier, str] = {
    AgeTier.RECENT: "Last Month",
    AgeTier.QUARTER: "Last 3 Months",
    AgeTier.YEAR: "Last Year",
    AgeTier.LEGACY: "Older",
}


@dataclass(frozen=True)
class GridPosition:
    row: int
    col: int


@dataclass(frozen=True)
class WorldBounds:
    x: float
    y: float
    width: float
    height: float


@dataclass
class Region:
    """One fixed-size region of the map with its items in world space."""

    region_id: str
    grid_position: GridPosition
    world_bounds: WorldBounds
    items: list[PlacedItem]
    capacity: RegionCapacity
    age_tier: AgeTier | None = None
    name: str | None = None


@dataclass(frozen=True)
class UnplaceableItem:
    """An item too large to ever fit in a region of the requested size."""

    item: Item
    reason: str


@dataclass
class MultiRegionLayout:
    """All regions produced by one layout call.

    Iterates, indexes and sizes like its ``regions`` list.
    """

    regions: list[Region] = field(default_factory=list)
    unplaceable: list[UnplaceableItem] = field(default_factory=list)

    def __iter__(self) -> Iterator[Region]:
        return iter(self.regions)

    def __len__(self) -> int:
        return len(self.regions)

    def __getitem__(self, index):
        return self.regions[index]

    @property
    def placed_count(self) -> int:
        return sum(len(r.items) for r in self.regions)

    def all_items(self) -> list[PlacedItem]:
        """Every placed item, in region order."""
        return [it for r in self.regions for it in r.items]


# ── Errors ─────────────────────────────────────────────────────────


@dataclass
class ValidationError:
    item_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.item_id}] {self.field}: {self.message}"


class LayoutError(Exception):
    """Base class for layout failures."""


class LayoutConfigError(LayoutError, ValueError):
    """Raised when items or options are invalid, before any search runs."""

    def __init__(self, errors: list[ValidationError]) -> None:
        self.errors = errors
        detail = "; ".join(str(e) for e in errors)
        super().__init__(f"Invalid layout input: {detail}")


class RegionLimitError(LayoutError):
    """Raised when a layout would need more regions than allowed.

    ``layout`` holds every region completed before the cap was hit;
    ``dropped`` holds every item that did not get a region.
    """

    def __init__(
        self,
        layout: MultiRegionLayout,
        dropped: list[Item],
        max_regions: int,
    ) -> None:
        self.layout = layout
        self.dropped = dropped
        self.max_regions = max_regions
        self.placed_count = layout.placed_count
        super().__init__(
            f"Region limit of {max_regions} reached: placed "
            f"{self.placed_count} item(s), dropped {len(dropped)} "
            f"({', '.join(i.id for i in dropped[:10])}"
            f"{', ...' if len(dropped) > 10 else ''})"
        )
