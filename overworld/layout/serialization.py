"""Layout serialization: JSON conversion."""

from __future__ import annotations

from datetime import datetime, timezone

from .models import (
    Item, PlacedItem, Region, RegionCapacity, GridPosition, WorldBounds,
    AgeTier, MultiRegionLayout, UnplaceableItem,
)


def _parse_timestamp_field(value):
    """Epoch milliseconds (as sent by JS clients) become ISO-8601 UTC strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()
    return value


def _parse_item(data: dict) -> Item:
    timestamp = data.get("recency_timestamp")
    if timestamp is None:
        # Camel-case keys as sent by the web frontend.
        timestamp = data.get("recencyTimestamp", data.get("lastEditedAt"))
    timestamp = _parse_timestamp_field(timestamp)
    return Item(
        id=str(data["id"]),
        size=float(data["size"]),
        category=data.get("category"),
        recency_timestamp=timestamp,
    )


def parse_items(data: list[dict]) -> list[Item]:
    """Parse a raw list of dicts (from JSON) into Items."""
    return [_parse_item(d) for d in data]


def item_to_dict(item: Item) -> dict:
    return {
        "id": item.id,
        "size": item.size,
        **({"category": item.category} if item.category is not None else {}),
        **({"recency_timestamp": item.recency_timestamp}
           if item.recency_timestamp is not None else {}),
    }


def _placed_to_dict(p: PlacedItem) -> dict:
    return {
        **item_to_dict(p.to_item()),
        "grid_x": p.grid_x,
        "grid_y": p.grid_y,
    }


def layout_to_dict(layout: MultiRegionLayout) -> dict:
    """Serialize a MultiRegionLayout to a JSON-safe dict."""
    return {
        "regions": [
            {
                "region_id": r.region_id,
                "grid_position": {"row": r.grid_position.row, "col": r.grid_position.col},
                "world_bounds": {
                    "x": r.world_bounds.x,
                    "y": r.world_bounds.y,
                    "width": r.world_bounds.width,
                    "height": r.world_bounds.height,
                },
                "items": [_placed_to_dict(p) for p in r.items],
                "capacity": {
                    "total_area": r.capacity.total_area,
                    "used_area": r.capacity.used_area,
                    "remaining_area": r.capacity.remaining_area,
                    "utilization_percent": r.capacity.utilization_percent,
                    "is_full": r.capacity.is_full,
                },
                **({"age_tier": r.age_tier.value} if r.age_tier else {}),
                **({"name": r.name} if r.name else {}),
            }
            for r in layout.regions
        ],
        "unplaceable": [
            {"item": item_to_dict(u.item), "reason": u.reason}
            for u in layout.unplaceable
        ],
    }


def _parse_region(data: dict) -> Region:
    wb = data["world_bounds"]
    cap = data["capacity"]
    tier = data.get("age_tier")
    return Region(
        region_id=data["region_id"],
        grid_position=GridPosition(
            row=int(data["grid_position"]["row"]),
            col=int(data["grid_position"]["col"]),
        ),
        world_bounds=WorldBounds(
            x=wb["x"], y=wb["y"], width=wb["width"], height=wb["height"],
        ),
        items=[
            PlacedItem.from_item(_parse_item(p), p["grid_x"], p["grid_y"])
            for p in data["items"]
        ],
        capacity=RegionCapacity(
            total_area=cap["total_area"],
            used_area=cap["used_area"],
            remaining_area=cap["remaining_area"],
            utilization_percent=cap["utilization_percent"],
            is_full=cap["is_full"],
        ),
        age_tier=AgeTier(tier) if tier else None,
        name=data.get("name"),
    )


def parse_layout(data: dict) -> MultiRegionLayout:
    """Parse a layout dict back into a MultiRegionLayout."""
    return MultiRegionLayout(
        regions=[_parse_region(r) for r in data["regions"]],
        unplaceable=[
            UnplaceableItem(item=_parse_item(u["item"]), reason=u["reason"])
            for u in data.get("unplaceable", [])
        ],
    )
