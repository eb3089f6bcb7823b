"""Age bucketing: split items into recency tiers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from overworld.config import LAYOUT_RULES, LayoutRules

from .models import AgeTier, Item, TIER_ORDER


log = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing ``Z``; naive timestamps are read as UTC.

    Raises
    ------
    ValueError
        If *value* is not ISO-8601.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _utc_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def age_tier_for(
    timestamp: str | None,
    now: datetime | None = None,
    *,
    rules: LayoutRules = LAYOUT_RULES,
) -> AgeTier:
    """Classify a recency timestamp. Missing or unreadable → LEGACY."""
    if not timestamp:
        return AgeTier.LEGACY
    try:
        edited = parse_timestamp(timestamp)
    except ValueError:
        log.warning("Unreadable recency timestamp %r, treating as legacy", timestamp)
        return AgeTier.LEGACY

    days_ago = (_utc_now(now) - edited).total_seconds() / _SECONDS_PER_DAY
    if days_ago <= rules.recent_days:
        return AgeTier.RECENT
    if days_ago <= rules.quarter_days:
        return AgeTier.QUARTER
    if days_ago <= rules.year_days:
        return AgeTier.YEAR
    return AgeTier.LEGACY


def bucket_by_age(
    items: Iterable[Item],
    now: datetime | None = None,
    *,
    rules: LayoutRules = LAYOUT_RULES,
) -> dict[AgeTier, list[Item]]:
    """Group items by age tier.

    All four tiers are present, in priority order, even when empty.
    Items keep their input order within a tier.
    """
    now = _utc_now(now)
    buckets: dict[AgeTier, list[Item]] = {tier: [] for tier in TIER_ORDER}
    for item in items:
        buckets[age_tier_for(item.recency_timestamp, now, rules=rules)].append(item)
    return buckets
