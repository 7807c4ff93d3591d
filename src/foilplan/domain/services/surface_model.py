"""Surface decomposition of a vessel.

SurfaceModel turns VesselGeometry into the list of surfaces the planner
has to cover: the floor, the wall perimeter (as one loop or as separate
walls), stairs, the secondary basin and its partition wall.
"""

from __future__ import annotations

import logging
import math
import string

from foilplan.domain.settings import PlannerSettings
from foilplan.domain.value_objects import (
    FoilAssignment,
    JointKind,
    MembraneSubtype,
    Surface,
    VesselGeometry,
    WallLayout,
    WallSegment,
)

logger = logging.getLogger(__name__)

FLOOR_KEY = "floor"
WALLS_KEY = "walls"
WALL_LONG_KEY = "wall-long"
WALL_SHORT_KEY = "wall-short"
STAIRS_KEY = "stairs"
BASIN_FLOOR_KEY = "basin-floor"
BASIN_WALLS_KEY = "basin-walls"
PARTITION_WALL_KEY = "partition-wall"


def corner_label(index: int) -> str:
    """Corner name for a zero-based vertex index: A, B, ..., Z, A1, B1, ..."""
    letter = string.ascii_uppercase[index % 26]
    cycle = index // 26
    return letter if cycle == 0 else f"{letter}{cycle}"


class SurfaceModel:
    """Derives the surfaces to cover from vessel geometry.

    Attributes:
        settings: Planner settings supplying overlaps and the bottom fold.
    """

    def __init__(self, settings: PlannerSettings | None = None) -> None:
        self.settings = settings or PlannerSettings()

    def wall_segments(self, geometry: VesselGeometry) -> list[WallSegment]:
        """Ordered wall segments of the perimeter loop.

        A rectangle yields A-B (long), B-C (short), C-D (long), D-A (short).
        Custom vertices yield one segment per polygon edge, the last one
        wrapping back to the first corner. Zero-length edges are dropped.
        """
        if geometry.has_custom_perimeter:
            points = list(geometry.vertices or ())
        else:
            longer, shorter = geometry.longer_side, geometry.shorter_side
            points = [(0.0, 0.0), (longer, 0.0), (longer, shorter), (0.0, shorter)]

        segments: list[WallSegment] = []
        count = len(points)
        for i, (x1, y1) in enumerate(points):
            x2, y2 = points[(i + 1) % count]
            length = math.hypot(x2 - x1, y2 - y1)
            if length <= 0:
                continue
            segments.append(
                WallSegment(
                    index=len(segments),
                    start_corner=corner_label(i),
                    end_corner=corner_label((i + 1) % count),
                    length=length,
                )
            )
        return segments

    def perimeter(self, geometry: VesselGeometry) -> float:
        """Total length of the wall loop."""
        return sum(segment.length for segment in self.wall_segments(geometry))

    def derive(
        self,
        geometry: VesselGeometry,
        subtype: MembraneSubtype = MembraneSubtype.SINGLE_COLOR,
        layout: WallLayout = WallLayout.PERIMETER,
    ) -> list[Surface]:
        """Build every surface of the vessel, main pool surfaces first."""
        surfaces = [self._floor(geometry, subtype)]
        if layout == WallLayout.SEPARATE:
            surfaces.extend(self._separate_walls(geometry))
        else:
            surfaces.append(self._wall_loop(geometry))

        if geometry.stairs is not None:
            surfaces.append(self._stairs(geometry))
        if geometry.basin is not None:
            surfaces.extend(self._basin(geometry))

        logger.debug(
            "Derived %d surfaces for %.2fx%.2fx%.2f vessel",
            len(surfaces),
            geometry.length,
            geometry.width,
            geometry.depth,
        )
        return surfaces

    def _overlapping(
        self,
        key: str,
        label: str,
        strip_length: float,
        cover_width: float,
        min_overlap: float,
        repetition_count: int = 1,
        foil_assignment: FoilAssignment = FoilAssignment.MAIN,
        is_floor: bool = False,
        is_wall: bool = False,
        is_perimeter: bool = False,
    ) -> Surface:
        return Surface(
            key=key,
            label=label,
            strip_length=strip_length,
            cover_width=cover_width,
            repetition_count=repetition_count,
            min_overlap=min_overlap,
            max_overlap=self.settings.max_overlap_for(min_overlap),
            foil_assignment=foil_assignment,
            is_floor=is_floor,
            is_wall=is_wall or is_perimeter,
            is_perimeter=is_perimeter,
        )

    def _wall_height(self, depth: float) -> float:
        return depth + self.settings.bottom_fold

    def _floor(self, geometry: VesselGeometry, subtype: MembraneSubtype) -> Surface:
        if self.settings.floor_joint(subtype) == JointKind.BUTT:
            return Surface(
                key=FLOOR_KEY,
                label="Floor",
                strip_length=geometry.longer_side,
                cover_width=geometry.shorter_side,
                joint_kind=JointKind.BUTT,
                is_floor=True,
            )
        return self._overlapping(
            FLOOR_KEY,
            "Floor",
            geometry.longer_side,
            geometry.shorter_side,
            self.settings.floor_min_overlap,
            is_floor=True,
        )

    def _wall_loop(self, geometry: VesselGeometry) -> Surface:
        return self._overlapping(
            WALLS_KEY,
            "Walls",
            self.perimeter(geometry),
            self._wall_height(geometry.depth),
            self.settings.wall_min_overlap,
            is_perimeter=True,
        )

    def _separate_walls(self, geometry: VesselGeometry) -> list[Surface]:
        height = self._wall_height(geometry.depth)
        overlap = self.settings.wall_min_overlap
        if not geometry.has_custom_perimeter:
            return [
                self._overlapping(
                    WALL_LONG_KEY, "Long walls", geometry.longer_side, height,
                    overlap, repetition_count=2, is_wall=True,
                ),
                self._overlapping(
                    WALL_SHORT_KEY, "Short walls", geometry.shorter_side, height,
                    overlap, repetition_count=2, is_wall=True,
                ),
            ]
        return [
            self._overlapping(
                f"wall-{segment.label.lower()}",
                f"Wall {segment.label}",
                segment.length,
                height,
                overlap,
                is_wall=True,
            )
            for segment in self.wall_segments(geometry)
        ]

    def _stairs(self, geometry: VesselGeometry) -> Surface:
        stairs = geometry.stairs
        assert stairs is not None
        width = stairs.width if stairs.width is not None else geometry.shorter_side
        return self._overlapping(
            STAIRS_KEY,
            "Stairs",
            stairs.run_length,
            width,
            self.settings.wall_min_overlap,
            foil_assignment=FoilAssignment.STRUCTURAL,
        )

    def _basin(self, geometry: VesselGeometry) -> list[Surface]:
        basin = geometry.basin
        assert basin is not None
        surfaces = [
            self._overlapping(
                BASIN_FLOOR_KEY,
                "Basin floor",
                max(basin.length, basin.width),
                min(basin.length, basin.width),
                self.settings.floor_min_overlap,
                foil_assignment=FoilAssignment.STRUCTURAL,
            ),
            # Three outer walls; the fourth side is the partition or pool wall.
            self._overlapping(
                BASIN_WALLS_KEY,
                "Basin walls",
                2 * basin.length + basin.width,
                self._wall_height(basin.depth),
                self.settings.wall_min_overlap,
            ),
        ]
        if basin.has_partition_wall:
            height = geometry.depth - basin.depth + basin.partition_offset
            if height > 0:
                surfaces.append(
                    self._overlapping(
                        PARTITION_WALL_KEY,
                        "Partition wall",
                        basin.width,
                        height,
                        self.settings.wall_min_overlap,
                    )
                )
        return surfaces
