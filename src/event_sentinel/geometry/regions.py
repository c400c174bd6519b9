"""
Geofence Index
==============

Loading and querying of the static venue layout.

This module handles:
    - Loading the venue layout from JSON (validated once, at load time)
    - Point → region lookup in explicit priority order
    - The cheap exclusion-zone check used on every agent every tick
    - Sampling legal positions in seating and concourse areas

All geometry is STATIC and loaded at startup. No runtime discovery.

Lookup Order:
    Regions are tested in ascending `priority`; the first containing
    region wins. Overlapping regions are therefore resolved by data,
    which matters for zone-violation scoring. A point outside every
    polygon resolves to the synthetic `outside` region.

Example:
    from event_sentinel.geometry import GeofenceIndex

    index = GeofenceIndex.from_file()          # bundled stadium layout
    region = index.region_at(Point(x=240, y=60))
    blocked = index.in_exclusion_zone(Point(x=240, y=160))
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from event_sentinel.models.geometry import (
    OUTSIDE_REGION,
    Point,
    Rect,
    Region,
    VenueLayout,
)
from event_sentinel.simulation.randomness import RandomSource, chance, pick, uniform


logger = logging.getLogger(__name__)


DEFAULT_LAYOUT_PATH = Path(__file__).parent / "layouts" / "stadium.json"


def load_layout(path: Optional[str] = None) -> VenueLayout:
    """
    Load and validate a venue layout from a JSON file.

    Args:
        path: Path to the layout JSON (None = bundled stadium layout)

    Returns:
        Validated VenueLayout

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON or the geometry is invalid
    """
    file_path = Path(path) if path else DEFAULT_LAYOUT_PATH

    if not file_path.exists():
        raise FileNotFoundError(f"Venue layout not found: {file_path}")

    logger.info(f"Loading venue layout from: {file_path}")

    with open(file_path, "r") as f:
        data = json.load(f)

    layout = VenueLayout.model_validate(data)

    logger.info(
        f"Loaded layout: venue={layout.venue_id}, regions={len(layout.regions)}, "
        f"seating_areas={len(layout.seating_areas)}"
    )
    return layout


def point_in_ring(x: float, y: float, ring: Sequence[Tuple[float, float]]) -> bool:
    """
    Even-odd ray-casting containment test.

    Casts a ray toward +x and counts edge crossings. O(vertices).

    Args:
        x, y: Point to test
        ring: Polygon vertices as (x, y) tuples

    Returns:
        True if the point is inside the ring
    """
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


class GeofenceIndex:
    """
    Immutable point → region index over a venue layout.

    Deterministic and side-effect-free; called several times per agent
    per tick.

    Attributes:
        layout: Validated venue layout
    """

    def __init__(self, layout: VenueLayout) -> None:
        """
        Build the index.

        Args:
            layout: Validated venue layout
        """
        self.layout = layout
        # sorted() is stable: equal priorities keep declaration order
        self._ordered: List[Region] = sorted(layout.regions, key=lambda r: r.priority)
        self._rings: List[Tuple[Region, List[Tuple[float, float]]]] = [
            (region, region.boundary.as_tuples()) for region in self._ordered
        ]
        self._by_id: Dict[str, Region] = {r.id: r for r in self._ordered}
        self._by_id[OUTSIDE_REGION.id] = OUTSIDE_REGION

        logger.info(
            f"GeofenceIndex initialized: lookup order="
            f"{[r.id for r in self._ordered]}"
        )

    @classmethod
    def from_file(cls, path: Optional[str] = None) -> "GeofenceIndex":
        """Load a layout file and index it."""
        return cls(load_layout(path))

    @property
    def regions(self) -> List[Region]:
        """Declared regions in lookup order."""
        return list(self._ordered)

    def get_region(self, region_id: str) -> Optional[Region]:
        """
        Get a region by its id.

        Args:
            region_id: Region identifier (including "outside")

        Returns:
            Region if found, None otherwise
        """
        return self._by_id.get(region_id)

    def region_at(self, point: Point) -> Region:
        """
        Resolve the region containing a point.

        Args:
            point: Position on the venue plane

        Returns:
            First containing region in priority order, or the outside region
        """
        for region, ring in self._rings:
            if point_in_ring(point.x, point.y, ring):
                return region
        return OUTSIDE_REGION

    def in_exclusion_zone(self, point: Point) -> bool:
        """Cheap axis-aligned check against the hard-excluded rectangle."""
        return self.layout.exclusion_zone.contains(point.x, point.y)

    # -------------------------------------------------------------------------
    # Legal position sampling
    # -------------------------------------------------------------------------

    def sample_seating(self, rng: RandomSource) -> Point:
        """Uniformly pick a seating area, then a point inside it."""
        return _sample_rect(rng, pick(rng, self.layout.seating_areas))

    def sample_concourse(self, rng: RandomSource) -> Point:
        """Uniformly pick a concourse area, then a point inside it."""
        return _sample_rect(rng, pick(rng, self.layout.concourse_areas))

    def sample_target(
        self,
        rng: RandomSource,
        concourse_bias: float = 0.0,
    ) -> Point:
        """
        Sample a new walking target.

        Args:
            rng: Random source
            concourse_bias: Probability of heading to the concourse instead
                of seating

        Returns:
            A legal position (never inside the exclusion zone)
        """
        if concourse_bias > 0 and chance(rng, concourse_bias):
            return self.sample_concourse(rng)
        return self.sample_seating(rng)


def _sample_rect(rng: RandomSource, rect: Rect) -> Point:
    """Uniform point inside a rectangle."""
    return Point(
        x=uniform(rng, rect.min_x, rect.max_x),
        y=uniform(rng, rect.min_y, rect.max_y),
    )
