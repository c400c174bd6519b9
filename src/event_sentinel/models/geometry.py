"""
Geometry Models
===============

This module defines the static spatial layout of the venue.

Design Philosophy:
    Regions are EXPLICITLY DECLARED geometry, NOT discovered at runtime.
    They are loaded from JSON configuration, validated once, and remain
    fixed for the lifetime of the process.

Supported Geometries:
    - Point: 2D coordinate on the venue plane
    - Polygon: Closed ring of vertices (first vertex repeated last)
    - Rect: Axis-aligned rectangle (exclusion zone, spawn areas)
    - Region: Named polygon with a kind and an explicit lookup priority
    - VenueLayout: Complete venue definition

Example Region:
    {
        "id": "tunnel",
        "name": "Team Tunnel",
        "kind": "critical",
        "priority": 4,
        "boundary": {
            "vertices": [
                {"x": 220, "y": 90}, {"x": 260, "y": 90},
                {"x": 260, "y": 30}, {"x": 220, "y": 30},
                {"x": 220, "y": 90}
            ]
        }
    }

Note:
    The plane is flat and bounded. It stands in for GPS coordinates;
    no geographic projection is applied.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class RegionKind(str, Enum):
    """
    Category of a venue region.

    The kind drives zone-violation scoring and motion constraints.
    """

    PUBLIC = "public"
    CONCOURSE = "concourse"
    VIP = "vip"
    RESTRICTED = "restricted"
    CRITICAL = "critical"
    OUTSIDE = "outside"


class Point(BaseModel):
    """
    2D point on the venue plane.

    Attributes:
        x: Horizontal coordinate (plane units)
        y: Vertical coordinate (plane units)
    """

    x: float = Field(..., description="Horizontal coordinate")
    y: float = Field(..., description="Vertical coordinate")

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return ((other.x - self.x) ** 2 + (other.y - self.y) ** 2) ** 0.5


def _orientation(p: Point, q: Point, r: Point) -> int:
    """Sign of the cross product (q - p) x (r - p)."""
    cross = (q.x - p.x) * (r.y - p.y) - (q.y - p.y) * (r.x - p.x)
    if cross > 0:
        return 1
    if cross < 0:
        return -1
    return 0


def _on_segment(p: Point, q: Point, r: Point) -> bool:
    """Whether collinear point q lies on segment pr."""
    return (
        min(p.x, r.x) <= q.x <= max(p.x, r.x)
        and min(p.y, r.y) <= q.y <= max(p.y, r.y)
    )


def segments_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """Whether segments a1a2 and b1b2 share at least one point."""
    o1 = _orientation(a1, a2, b1)
    o2 = _orientation(a1, a2, b2)
    o3 = _orientation(b1, b2, a1)
    o4 = _orientation(b1, b2, a2)

    if o1 != o2 and o3 != o4:
        return True

    if o1 == 0 and _on_segment(a1, b1, a2):
        return True
    if o2 == 0 and _on_segment(a1, b2, a2):
        return True
    if o3 == 0 and _on_segment(b1, a1, b2):
        return True
    if o4 == 0 and _on_segment(b1, a2, b2):
        return True

    return False


class Polygon(BaseModel):
    """
    Closed polygon ring.

    The ring must be explicitly closed: the last vertex repeats the first.
    It must enclose at least 3 distinct vertices and must not
    self-intersect.

    Attributes:
        vertices: Ordered ring of points, first == last
    """

    vertices: List[Point] = Field(
        ...,
        min_length=4,
        description="Closed ring of vertices (first vertex repeated last)",
    )

    @field_validator("vertices")
    @classmethod
    def validate_ring(cls, v: List[Point]) -> List[Point]:
        """Ensure the ring is closed, non-degenerate and simple."""
        first, last = v[0], v[-1]
        if first.x != last.x or first.y != last.y:
            raise ValueError("Polygon ring is not closed (first vertex != last vertex)")

        distinct = {(p.x, p.y) for p in v[:-1]}
        if len(distinct) < 3:
            raise ValueError("Polygon must have at least 3 distinct vertices")

        edges = list(zip(v[:-1], v[1:]))
        count = len(edges)
        for i in range(count):
            for j in range(i + 1, count):
                # Adjacent edges share a vertex by construction
                if j == i + 1 or (i == 0 and j == count - 1):
                    continue
                if segments_intersect(edges[i][0], edges[i][1], edges[j][0], edges[j][1]):
                    raise ValueError(
                        f"Polygon is self-intersecting (edges {i} and {j})"
                    )
        return v

    def as_tuples(self) -> List[tuple]:
        """Vertices as (x, y) tuples for the hot-path containment test."""
        return [(p.x, p.y) for p in self.vertices]


class Rect(BaseModel):
    """
    Axis-aligned rectangle.

    Containment is strict: points on the border are outside.

    Attributes:
        name: Optional label (e.g. "north seating")
        min_x, min_y, max_x, max_y: Bounds on the venue plane
    """

    name: Optional[str] = Field(default=None, description="Human-readable label")
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @model_validator(mode="after")
    def validate_bounds(self) -> "Rect":
        """Reject empty rectangles."""
        if self.max_x <= self.min_x or self.max_y <= self.min_y:
            raise ValueError(f"Degenerate rectangle: {self.name or 'unnamed'}")
        return self

    def contains(self, x: float, y: float) -> bool:
        """Strict axis-aligned containment test."""
        return self.min_x < x < self.max_x and self.min_y < y < self.max_y

    def overlaps(self, other: "Rect") -> bool:
        """Whether the open interiors of two rectangles intersect."""
        return (
            self.min_x < other.max_x and other.min_x < self.max_x
            and self.min_y < other.max_y and other.min_y < self.max_y
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


class Region(BaseModel):
    """
    Named polygonal region of the venue.

    Regions may overlap. Lookups test regions in ascending `priority`
    and the first containing region wins, so priority is part of the
    data, not an accident of file order.

    Attributes:
        id: Unique region identifier
        name: Human-readable name
        kind: Region category
        priority: Lookup order (lower is tested first)
        boundary: Closed polygon (None only for the synthetic outside region)
    """

    id: str = Field(..., description="Unique region identifier")
    name: str = Field(..., description="Human-readable name")
    kind: RegionKind = Field(..., description="Region category")
    priority: int = Field(default=0, description="Lookup order (lower first)")
    boundary: Optional[Polygon] = Field(
        default=None,
        description="Region boundary (None only for the outside region)",
    )


OUTSIDE_REGION = Region(
    id="outside",
    name="Outside",
    kind=RegionKind.OUTSIDE,
    priority=10**6,
)


class VenueLayout(BaseModel):
    """
    Complete venue definition loaded from JSON.

    Attributes:
        venue_id: Identifier of the venue
        name: Human-readable venue name
        width: Plane width (x extent)
        height: Plane height (y extent)
        regions: Region polygons (any order; priority governs lookup)
        exclusion_zone: Hard-excluded rectangle for unprivileged agents
        seating_areas: Legal spawn/target rectangles in seating
        concourse_areas: Legal spawn/target rectangles in the concourse
    """

    venue_id: str = Field(..., description="Unique identifier for this venue")
    name: str = Field(..., description="Human-readable venue name")
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    regions: List[Region] = Field(..., min_length=1)
    exclusion_zone: Rect = Field(..., description="Hard-excluded rectangle")
    seating_areas: List[Rect] = Field(..., min_length=1)
    concourse_areas: List[Rect] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_regions(self) -> "VenueLayout":
        """Region ids must be unique and every region needs a boundary."""
        seen = set()
        for region in self.regions:
            if region.id in seen:
                raise ValueError(f"Duplicate region id: {region.id}")
            seen.add(region.id)
            if region.boundary is None:
                raise ValueError(f"Region {region.id} has no boundary")
            if region.kind == RegionKind.OUTSIDE:
                raise ValueError("The outside region is synthetic and cannot be declared")

        # Sampled positions must always be legal for unprivileged agents
        for area in self.seating_areas + self.concourse_areas:
            if area.overlaps(self.exclusion_zone):
                raise ValueError(
                    f"Spawn area '{area.name or 'unnamed'}' overlaps the exclusion zone"
                )
        return self
