"""Tests for the single-region packer.

Validates:
  - Geometry helpers (collision, bounds, snapping, scan range)
  - Largest-first ordering with stable ties
  - First-fit raster-scan positions on whole tiles
  - Overflow when items do not fit
  - No collisions and full containment
  - Snapped positions are re-validated
  - Invalid input is rejected before searching
"""

from __future__ import annotations

import unittest

from overworld.config import LayoutRules
from overworld.layout import (
    Item, PlacedItem, RegionBounds, LayoutOptions, LayoutConfigError,
    pack_region, find_position, fits_empty_region,
    would_collide, snap_to_tile,
)
from overworld.layout.geometry import (
    min_center_distance, scan_positions, region_polygon, boundary_inside_region,
)
from tests.repo_fixture import make_items, assert_no_collisions, assert_contained


class TestPackerGeometryHelpers(unittest.TestCase):
    """Unit tests for low-level geometry functions."""

    def test_snap_rounds_halves_up(self):
        self.assertEqual(snap_to_tile(2.5), 3.0)
        self.assertEqual(snap_to_tile(3.5), 4.0)
        self.assertEqual(snap_to_tile(3.49), 3.0)
        self.assertEqual(snap_to_tile(4.0), 4.0)
        self.assertEqual(snap_to_tile(-2.5), -2.0)

    def test_min_center_distance(self):
        # radii 2 + 2, spacing 0.5, buffer 0.3 on each side
        self.assertAlmostEqual(min_center_distance(1.0, 1.0, 0.5), 5.1)
        self.assertAlmostEqual(min_center_distance(2.0, 1.0, 0.0), 6.6)

    def test_would_collide(self):
        self.assertTrue(would_collide(0, 0, 1.0, 5.0, 0, 1.0, spacing=0.5))
        self.assertFalse(would_collide(0, 0, 1.0, 5.2, 0, 1.0, spacing=0.5))
        self.assertTrue(would_collide(0, 0, 1.0, 3.0, 4.0, 1.0, spacing=0.5))

    def test_boundary_inside_region(self):
        region = region_polygon(RegionBounds(20, 20))
        self.assertTrue(boundary_inside_region(4, 4, 4, region))
        self.assertTrue(boundary_inside_region(16, 16, 4, region))
        self.assertFalse(boundary_inside_region(3.5, 10, 4, region))
        self.assertFalse(boundary_inside_region(10, 16.5, 4, region))

    def test_boundary_inside_region_matches_arithmetic(self):
        w, h = 20, 10
        region = region_polygon(RegionBounds(w, h))
        for cx, cy, r in [(5, 5, 5), (15, 5, 5), (5, 5, 5.5), (19, 2, 1), (19.5, 2, 1)]:
            inside = cx - r >= 0 and cx + r <= w and cy - r >= 0 and cy + r <= h
            self.assertEqual(
                boundary_inside_region(cx, cy, r, region),
                inside,
                f"mismatch at ({cx}, {cy}) r={r}",
            )

    def test_scan_positions_inclusive(self):
        self.assertEqual(list(scan_positions(2.0, 4.0, 0.5)), [2.0, 2.5, 3.0, 3.5, 4.0])
        self.assertEqual(list(scan_positions(3.0, 3.0, 0.5)), [3.0])
        self.assertEqual(list(scan_positions(6.0, 4.0, 0.5)), [])


class TestPackRegion(unittest.TestCase):

    def test_single_item_top_left(self):
        """Boundary radius is 2 tiles, so the first position is (2, 2)."""
        result = pack_region([Item("node1", 1.0)], RegionBounds(10, 10))
        self.assertEqual(len(result.placed), 1)
        self.assertEqual(result.overflow, [])
        p = result.placed[0]
        self.assertEqual((p.grid_x, p.grid_y), (2.0, 2.0))

    def test_three_items_example(self):
        """Three size-2 items in a 25×25 region: all placed, first-fit positions."""
        items = make_items(3, 2.0)
        result = pack_region(items, RegionBounds(25, 25), LayoutOptions(spacing=0.5))
        self.assertEqual(result.overflow, [])
        positions = [(p.id, p.grid_x, p.grid_y) for p in result.placed]
        self.assertEqual(positions, [
            ("repo0", 4.0, 4.0),
            ("repo1", 14.0, 4.0),   # first scan hit 13.5 snaps to 14
            ("repo2", 21.0, 10.0),  # first row far enough from repo1
        ])

    def test_largest_first(self):
        items = [Item("small", 1.0), Item("large", 3.0), Item("medium", 2.0)]
        result = pack_region(items, RegionBounds(50, 50))
        self.assertEqual([p.id for p in result.placed], ["large", "medium", "small"])
        large = result.placed[0]
        # Top-left-most valid position: radius 6 from both edges
        self.assertEqual((large.grid_x, large.grid_y), (6.0, 6.0))

    def test_equal_sizes_keep_input_order(self):
        items = [Item("b", 1.0), Item("a", 1.0), Item("c", 1.0)]
        result = pack_region(items, RegionBounds(30, 30))
        self.assertEqual([p.id for p in result.placed], ["b", "a", "c"])

    def test_overflow_when_too_large(self):
        """Radius 6 cannot fit in a 10×10 region."""
        result = pack_region([Item("node1", 3.0)], RegionBounds(10, 10))
        self.assertEqual(result.placed, [])
        self.assertEqual([i.id for i in result.overflow], ["node1"])

    def test_overflow_does_not_abort_smaller_items(self):
        items = [Item("huge", 3.0), Item("tiny", 0.5)]
        result = pack_region(items, RegionBounds(10, 10))
        self.assertEqual([p.id for p in result.placed], ["tiny"])
        self.assertEqual([i.id for i in result.overflow], ["huge"])

    def test_overflow_scenario(self):
        """50 size-2 items in one 25×25 region: only a handful fit."""
        items = make_items(50, 2.0)
        bounds = RegionBounds(25, 25)
        result = pack_region(items, bounds)
        self.assertGreater(len(result.placed), 0)
        self.assertLess(len(result.placed), 10)
        self.assertEqual(len(result.placed) + len(result.overflow), 50)
        placed_ids = {p.id for p in result.placed}
        overflow_ids = {i.id for i in result.overflow}
        self.assertFalse(placed_ids & overflow_ids)
        # Overflow keeps the input order
        self.assertEqual([i.id for i in result.overflow],
                         [i.id for i in items if i.id in overflow_ids])

    def test_no_collisions_and_contained(self):
        items = ([Item(f"l{i}", 2.5) for i in range(3)]
                 + [Item(f"m{i}", 1.5) for i in range(6)]
                 + [Item(f"s{i}", 1.0) for i in range(12)])
        bounds = RegionBounds(40, 30)
        result = pack_region(items, bounds, LayoutOptions(spacing=0.5))
        self.assertGreater(len(result.placed), 5)
        assert_no_collisions(self, result.placed, spacing=0.5)
        assert_contained(self, result.placed, bounds)

    def test_whole_tile_positions(self):
        items = [Item("n1", 1.5), Item("n2", 2.0), Item("n3", 2.5), Item("n4", 1.25)]
        result = pack_region(items, RegionBounds(50, 50))
        self.assertEqual(len(result.placed), 4)
        for p in result.placed:
            self.assertEqual(p.grid_x, round(p.grid_x))
            self.assertEqual(p.grid_y, round(p.grid_y))

    def test_zero_spacing_packs_tighter(self):
        items = make_items(30, 1.0)
        bounds = RegionBounds(25, 25)
        loose = pack_region(items, bounds, LayoutOptions(spacing=2.0))
        tight = pack_region(items, bounds, LayoutOptions(spacing=0.0))
        self.assertGreater(len(tight.placed), len(loose.placed))
        assert_no_collisions(self, tight.placed, spacing=0.0)

    def test_deterministic(self):
        items = [Item(f"r{i}", 1.0 + (i % 4) * 0.5) for i in range(25)]
        bounds = RegionBounds(25, 25)
        self.assertEqual(pack_region(items, bounds), pack_region(items, bounds))

    def test_input_not_modified(self):
        items = [Item("a", 1.0), Item("b", 2.0)]
        snapshot = list(items)
        pack_region(items, RegionBounds(25, 25))
        self.assertEqual(items, snapshot)

    def test_passthrough_fields(self):
        item = Item("pkg", 1.0, category="python", recency_timestamp="2025-12-01T00:00:00Z")
        p = pack_region([item], RegionBounds(10, 10)).placed[0]
        self.assertEqual(p.category, "python")
        self.assertEqual(p.recency_timestamp, "2025-12-01T00:00:00Z")
        self.assertEqual(p.to_item(), item)

    def test_rules_override_scales_boundary(self):
        rules = LayoutRules(boundary_factor=1.0)
        p = pack_region([Item("a", 1.0)], RegionBounds(10, 10), rules=rules).placed[0]
        self.assertEqual((p.grid_x, p.grid_y), (1.0, 1.0))


class TestSnapRevalidation(unittest.TestCase):
    """Snapping to whole tiles must never push an item out of bounds
    or into another item."""

    def test_snapped_position_out_of_bounds_is_rejected(self):
        # Radius 2.5: the only scan point is (2.5, 2.5), which snaps to
        # (3, 3) and would cross the right/bottom edge of a 5×5 region.
        result = pack_region([Item("a", 1.25)], RegionBounds(5, 5))
        self.assertEqual(result.placed, [])
        self.assertFalse(fits_empty_region(1.25, RegionBounds(5, 5)))

    def test_snapped_position_inside_is_accepted(self):
        result = pack_region([Item("a", 1.25)], RegionBounds(6, 6))
        p = result.placed[0]
        self.assertEqual((p.grid_x, p.grid_y), (3.0, 3.0))
        assert_contained(self, result.placed, RegionBounds(6, 6))

    def test_find_position_returns_snapped(self):
        pos = find_position(1.25, [], RegionBounds(20, 20), 0.5)
        self.assertEqual(pos, (3.0, 3.0))

    def test_snapped_position_colliding_is_rejected(self):
        # Radius 2.5 against a size-1 blocker at (8, 3): the first scan
        # point (2.5, 2.5) is clear of it, but its tile (3, 3) is only 5.0
        # away (min 5.1).  Points up to x=13.0 collide outright; (13.5, 2.5)
        # snaps to (14, 3).
        blocker = PlacedItem("blocker", 1.0, 8.0, 3.0)
        self.assertFalse(would_collide(2.5, 2.5, 1.25, 8.0, 3.0, 1.0))
        self.assertTrue(would_collide(3.0, 3.0, 1.25, 8.0, 3.0, 1.0))

        with self.assertLogs("overworld.layout.packer", level="DEBUG") as cm:
            pos = find_position(1.25, [blocker], RegionBounds(20, 20), 0.0)

        self.assertEqual(pos, (14.0, 3.0))
        self.assertTrue(any("(3.0, 3.0) rejected" in line for line in cm.output))
        self.assertFalse(would_collide(pos[0], pos[1], 1.25,
                                       blocker.grid_x, blocker.grid_y, blocker.size))

    def test_packed_items_clear_of_grid_buffer(self):
        # Mixed sizes force many snapped tiles into collisions; the full
        # padded distance must hold for every placed pair.
        items = [Item(f"r{i}", 1.0 + (i % 4) * 0.25) for i in range(12)]
        result = pack_region(items, RegionBounds(40, 40), LayoutOptions(spacing=0.5))
        self.assertGreater(len(result.placed), 6)
        for i, a in enumerate(result.placed):
            for b in result.placed[i + 1:]:
                self.assertFalse(
                    would_collide(a.grid_x, a.grid_y, a.size,
                                  b.grid_x, b.grid_y, b.size, spacing=0.5),
                    f"{a.id} at ({a.grid_x}, {a.grid_y}) collides with "
                    f"{b.id} at ({b.grid_x}, {b.grid_y})",
                )


class TestPackValidation(unittest.TestCase):

    def test_non_positive_size(self):
        with self.assertRaises(LayoutConfigError) as cm:
            pack_region([Item("a", 0.0)], RegionBounds(10, 10))
        self.assertEqual(cm.exception.errors[0].field, "size")

    def test_negative_spacing(self):
        with self.assertRaises(LayoutConfigError) as cm:
            pack_region([Item("a", 1.0)], RegionBounds(10, 10), LayoutOptions(spacing=-0.5))
        self.assertEqual(cm.exception.errors[0].field, "spacing")

    def test_non_positive_bounds(self):
        with self.assertRaises(LayoutConfigError):
            pack_region([Item("a", 1.0)], RegionBounds(0, 10))

    def test_duplicate_ids(self):
        with self.assertRaises(LayoutConfigError) as cm:
            pack_region([Item("a", 1.0), Item("a", 2.0)], RegionBounds(10, 10))
        self.assertIn("Duplicate", str(cm.exception))

    def test_zero_search_step_rejected(self):
        with self.assertRaises(LayoutConfigError) as cm:
            pack_region([Item("a", 1.0)], RegionBounds(10, 10),
                        rules=LayoutRules(search_step=0))
        self.assertEqual([e.field for e in cm.exception.errors], ["search_step"])

    def test_bad_rules_reported_together(self):
        rules = LayoutRules(boundary_factor=-1.0, grid_buffer=-0.1, full_threshold=1.5)
        with self.assertRaises(LayoutConfigError) as cm:
            pack_region([Item("a", 1.0)], RegionBounds(10, 10), rules=rules)
        self.assertEqual(
            [(e.item_id, e.field) for e in cm.exception.errors],
            [("_rules", "boundary_factor"), ("_rules", "grid_buffer"),
             ("_rules", "full_threshold")],
        )

    def test_non_string_timestamp_rejected(self):
        with self.assertRaises(LayoutConfigError) as cm:
            pack_region([Item("a", 1.0, recency_timestamp=1700000000000)],
                        RegionBounds(10, 10))
        self.assertEqual(cm.exception.errors[0].field, "recency_timestamp")

    def test_config_error_is_value_error(self):
        with self.assertRaises(ValueError):
            pack_region([Item("", 1.0)], RegionBounds(10, 10))


if __name__ == "__main__":
    unittest.main()
