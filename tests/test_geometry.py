"""
Geometry Tests
==============

Layout validation, point → region lookup and legal position sampling.
"""

import pytest
from pydantic import ValidationError

from event_sentinel.geometry import GeofenceIndex, load_layout, point_in_ring
from event_sentinel.models.geometry import (
    Point,
    Polygon,
    Rect,
    RegionKind,
    VenueLayout,
)


def _ring(*coords):
    return [{"x": x, "y": y} for x, y in coords]


class TestPolygonValidation:
    """Load-time checks on polygon rings."""

    def test_closed_square_is_valid(self):
        poly = Polygon(vertices=_ring((0, 0), (10, 0), (10, 10), (0, 10), (0, 0)))
        assert len(poly.as_tuples()) == 5

    def test_open_ring_rejected(self):
        with pytest.raises(ValidationError, match="not closed"):
            Polygon(vertices=_ring((0, 0), (10, 0), (10, 10), (0, 10)))

    def test_too_few_distinct_vertices_rejected(self):
        with pytest.raises(ValidationError, match="3 distinct"):
            Polygon(vertices=_ring((0, 0), (1, 1), (0, 0), (1, 1), (0, 0)))

    def test_self_intersecting_rejected(self):
        with pytest.raises(ValidationError, match="self-intersecting"):
            Polygon(vertices=_ring((0, 0), (10, 10), (10, 0), (0, 10), (0, 0)))

    def test_degenerate_rect_rejected(self):
        with pytest.raises(ValidationError, match="Degenerate"):
            Rect(name="flat", min_x=0, min_y=5, max_x=10, max_y=5)


class TestLayoutValidation:
    """Whole-layout checks."""

    def test_duplicate_region_ids_rejected(self, zone_layout_data):
        zone_layout_data["regions"][1]["id"] = "floor"
        with pytest.raises(ValidationError, match="Duplicate region id"):
            VenueLayout.model_validate(zone_layout_data)

    def test_spawn_area_overlapping_exclusion_rejected(self, zone_layout_data):
        zone_layout_data["seating_areas"].append(
            {"name": "bad", "min_x": 30, "min_y": 30, "max_x": 45, "max_y": 45}
        )
        with pytest.raises(ValidationError, match="overlaps the exclusion zone"):
            VenueLayout.model_validate(zone_layout_data)

    def test_declared_outside_region_rejected(self, zone_layout_data):
        zone_layout_data["regions"][0]["kind"] = "outside"
        with pytest.raises(ValidationError, match="synthetic"):
            VenueLayout.model_validate(zone_layout_data)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_layout(str(tmp_path / "nope.json"))

    def test_bundled_layout_loads(self):
        layout = load_layout()
        assert layout.width == 500
        assert layout.height == 350
        assert {r.id for r in layout.regions} == {
            "bowl", "field", "vip-north", "vip-south",
            "tunnel", "concourse-east", "concourse-west",
        }


class TestPointInRing:
    """Even-odd containment."""

    def test_inside_and_outside(self):
        ring = [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]
        assert point_in_ring(5, 5, ring)
        assert not point_in_ring(15, 5, ring)
        assert not point_in_ring(5, -1, ring)

    def test_concave_notch(self):
        # U shape: the notch (4..6, 5..10) is outside
        ring = [(0, 0), (10, 0), (10, 10), (6, 10), (6, 5), (4, 5), (4, 10), (0, 10), (0, 0)]
        assert point_in_ring(2, 8, ring)
        assert not point_in_ring(5, 8, ring)


class TestRegionLookup:
    """Priority-ordered first-match lookup."""

    def test_lookup_order_follows_priority(self, zone_index):
        assert [r.id for r in zone_index.regions] == [
            "vault", "backstage", "lounge", "hall", "floor",
        ]

    def test_specific_regions_win_over_floor(self, zone_index):
        assert zone_index.region_at(Point(x=20, y=20)).kind == RegionKind.CRITICAL
        assert zone_index.region_at(Point(x=50, y=20)).kind == RegionKind.RESTRICTED
        assert zone_index.region_at(Point(x=80, y=20)).kind == RegionKind.VIP
        assert zone_index.region_at(Point(x=50, y=75)).kind == RegionKind.CONCOURSE
        assert zone_index.region_at(Point(x=50, y=95)).id == "floor"

    def test_point_outside_every_region(self, zone_index):
        region = zone_index.region_at(Point(x=150, y=150))
        assert region.id == "outside"
        assert region.kind == RegionKind.OUTSIDE

    def test_get_region_includes_outside(self, zone_index):
        assert zone_index.get_region("outside") is not None
        assert zone_index.get_region("vault").name == "Vault"
        assert zone_index.get_region("missing") is None

    def test_stadium_bowl_shadows_nested_regions(self, stadium_index):
        # Tunnel and field lie inside the bowl, which is tested first
        assert stadium_index.region_at(Point(x=240, y=60)).id == "bowl"
        assert stadium_index.region_at(Point(x=240, y=160)).id == "bowl"

    def test_stadium_strips_outside_the_bowl(self, stadium_index):
        assert stadium_index.region_at(Point(x=440, y=150)).id == "concourse-east"
        assert stadium_index.region_at(Point(x=40, y=150)).id == "concourse-west"
        assert stadium_index.region_at(Point(x=240, y=25)).id == "vip-south"
        assert stadium_index.region_at(Point(x=5, y=5)).id == "outside"

    def test_lookup_is_deterministic(self, stadium_index):
        p = Point(x=123.4, y=56.7)
        assert stadium_index.region_at(p) == stadium_index.region_at(p)


class TestExclusionZone:
    """Cheap axis-aligned exclusion check."""

    def test_strict_containment(self, stadium_index):
        assert stadium_index.in_exclusion_zone(Point(x=240, y=160))
        assert not stadium_index.in_exclusion_zone(Point(x=110, y=160))
        assert not stadium_index.in_exclusion_zone(Point(x=240, y=240))
        assert not stadium_index.in_exclusion_zone(Point(x=60, y=160))


class TestSampling:
    """Legal position sampling."""

    def test_seating_samples_are_legal(self, stadium_index, rng):
        rects = stadium_index.layout.seating_areas
        for _ in range(300):
            p = stadium_index.sample_seating(rng)
            assert not stadium_index.in_exclusion_zone(p)
            assert any(r.min_x <= p.x <= r.max_x and r.min_y <= p.y <= r.max_y for r in rects)

    def test_full_concourse_bias_targets_concourse(self, zone_index, rng):
        for _ in range(50):
            p = zone_index.sample_target(rng, concourse_bias=1.0)
            assert 15 <= p.x <= 85 and 65 <= p.y <= 85

    def test_no_bias_targets_seating(self, zone_index, rng):
        for _ in range(50):
            p = zone_index.sample_target(rng)
            assert 5 <= p.x <= 35 and 40 <= p.y <= 55

    def test_from_index_constructor(self, zone_layout_data):
        index = GeofenceIndex(VenueLayout.model_validate(zone_layout_data))
        assert index.layout.venue_id == "test_venue"
