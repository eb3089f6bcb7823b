"""Item sizing from repository metrics.

Sizes are logarithmic so a repository ten times larger gets one more
unit of size rather than ten:

  files   ≤100 → 1.0,  1 000 → 2.0,  10 000 → 3.0,  100 000+ → 4.0
  lines  ≤10k  → 1.0,  100k  → 2.0,  1M     → 3.0,  10M+     → 4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass


MIN_SIZE = 1.0
MAX_SIZE = 4.0
MIN_COMPOSITE_SIZE = 1.5

DEFAULT_WEIGHTS = {
    "file_count": 0.4,
    "line_count": 0.4,
    "commit_count": 0.15,
    "contributors": 0.05,
}


@dataclass
class RepositoryMetrics:
    file_count: int | None = None
    line_count: int | None = None
    commit_count: int | None = None
    contributors: int | None = None


def _clamp(v: float, lo: float, hi: float) -> float:
    return min(max(v, lo), hi)


def _log_size(count: float, floor_exp: float) -> float:
    # log10(10**floor_exp) → 1.0, slope 1.0 per decade
    return _clamp(1.0 + (math.log10(count) - floor_exp), MIN_SIZE, MAX_SIZE)


def size_from_file_count(file_count: int) -> float:
    if file_count <= 100:
        return MIN_SIZE
    return _log_size(file_count, 2)


def size_from_line_count(line_count: int) -> float:
    if line_count <= 10_000:
        return MIN_SIZE
    return _log_size(line_count, 4)


def _present(v: int | None) -> bool:
    return v is not None and v > 0


def size_from_composite(
    metrics: RepositoryMetrics,
    weights: dict[str, float] | None = None,
) -> float:
    """Weighted size over whichever metrics are present.

    Weights are renormalised over the present metrics.  The result is
    clamped to [1.5, 4.0]; with no metrics at all it is 1.0.
    """
    w = {**DEFAULT_WEIGHTS, **(weights or {})}
    weighted = 0.0
    total_w = 0.0

    if _present(metrics.file_count):
        weighted += size_from_file_count(metrics.file_count) * w["file_count"]
        total_w += w["file_count"]
    if _present(metrics.line_count):
        weighted += size_from_line_count(metrics.line_count) * w["line_count"]
        total_w += w["line_count"]
    if _present(metrics.commit_count):
        commit_size = 1.0 + (math.log10(metrics.commit_count) - 1) * 0.5
        weighted += _clamp(commit_size, 1.0, 3.5) * w["commit_count"]
        total_w += w["commit_count"]
    if _present(metrics.contributors):
        contrib_size = 1.0 + math.log10(metrics.contributors) * 0.5
        weighted += _clamp(contrib_size, 1.0, 3.0) * w["contributors"]
        total_w += w["contributors"]

    if total_w == 0:
        return MIN_SIZE
    return _clamp(weighted / total_w, MIN_COMPOSITE_SIZE, MAX_SIZE)


def repository_size(metrics: RepositoryMetrics | None) -> float:
    """Pick the best size estimate for the metrics available.

    Two or more metrics → composite; otherwise file count, then line
    count, then 1.0.
    """
    if metrics is None:
        return MIN_SIZE
    available = sum(
        _present(v) for v in (
            metrics.file_count, metrics.line_count,
            metrics.commit_count, metrics.contributors,
        )
    )
    if available >= 2:
        return size_from_composite(metrics)
    if _present(metrics.file_count):
        return size_from_file_count(metrics.file_count)
    if _present(metrics.line_count):
        return size_from_line_count(metrics.line_count)
    return MIN_SIZE
