"""Input validation: check items, bounds, options and rules before any search runs."""

from __future__ import annotations

import math
from typing import Iterable

from overworld.config import LayoutRules

from .models import (
    Item, LayoutOptions, RegionBounds,
    LayoutConfigError, ValidationError,
)


def _positive_finite(v) -> bool:
    return isinstance(v, (int, float)) and math.isfinite(v) and v > 0


def validate_items(items: Iterable[Item]) -> list[ValidationError]:
    """Validate item ids, sizes and timestamps. Returns errors (empty = valid)."""
    errors: list[ValidationError] = []
    seen: set[str] = set()

    for idx, item in enumerate(items):
        iid = item.id if item.id else f"#{idx}"

        # ── Ids must be non-empty and unique ──
        if not item.id:
            errors.append(ValidationError(iid, "id", "Must be a non-empty string"))
        elif item.id in seen:
            errors.append(ValidationError(iid, "id", "Duplicate item id"))
        seen.add(item.id)

        # ── Size ──
        if not _positive_finite(item.size):
            errors.append(ValidationError(iid, "size", f"Must be a finite number > 0, got {item.size!r}"))

        # ── Timestamp ──
        ts = item.recency_timestamp
        if ts is not None and not isinstance(ts, str):
            errors.append(ValidationError(iid, "recency_timestamp", f"Must be an ISO-8601 string, got {ts!r}"))

    return errors


def validate_bounds(bounds: RegionBounds) -> list[ValidationError]:
    errors: list[ValidationError] = []
    if not _positive_finite(bounds.width):
        errors.append(ValidationError("_bounds", "width", f"Must be > 0, got {bounds.width!r}"))
    if not _positive_finite(bounds.height):
        errors.append(ValidationError("_bounds", "height", f"Must be > 0, got {bounds.height!r}"))
    return errors


def validate_options(options: LayoutOptions) -> list[ValidationError]:
    errors: list[ValidationError] = []
    s = options.spacing
    if not isinstance(s, (int, float)) or not math.isfinite(s) or s < 0:
        errors.append(ValidationError("_options", "spacing", f"Must be a finite number >= 0, got {s!r}"))
    return errors


def validate_rules(rules: LayoutRules) -> list[ValidationError]:
    """Validate layout constants loaded from config or passed as an override."""
    errors: list[ValidationError] = []
    for name in ("boundary_factor", "search_step", "items_per_region", "max_regions"):
        v = getattr(rules, name)
        if not _positive_finite(v):
            errors.append(ValidationError("_rules", name, f"Must be a finite number > 0, got {v!r}"))
    g = rules.grid_buffer
    if not isinstance(g, (int, float)) or not math.isfinite(g) or g < 0:
        errors.append(ValidationError("_rules", "grid_buffer", f"Must be a finite number >= 0, got {g!r}"))
    t = rules.full_threshold
    if not isinstance(t, (int, float)) or not 0 <= t <= 1:
        errors.append(ValidationError("_rules", "full_threshold", f"Must be in [0, 1], got {t!r}"))
    return errors


def ensure_valid(*error_lists: list[ValidationError]) -> None:
    """Raise LayoutConfigError if any of the given error lists is non-empty."""
    errors = [e for errs in error_lists for e in errs]
    if errors:
        raise LayoutConfigError(errors)
