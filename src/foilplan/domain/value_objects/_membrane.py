"""Membrane enumerations: roll widths, subtypes, joints and priorities."""

from __future__ import annotations

from enum import Enum


class RollWidth(str, Enum):
    """Fixed roll width classes the membrane is sold in.

    Metric widths live in PlannerSettings so that a different supplier
    catalogue only changes configuration, never the planner.
    """

    NARROW = "narrow"
    WIDE = "wide"


class MembraneSubtype(str, Enum):
    """Membrane product families with different width restrictions.

    - SINGLE_COLOR: plain membrane, both roll widths available
    - PRINTED: patterned membrane, only made in the narrow width
    - TEXTURED: anti-slip embossed membrane, narrow only, floor butt-welded
    """

    SINGLE_COLOR = "single-color"
    PRINTED = "printed"
    TEXTURED = "textured"


class JointKind(str, Enum):
    """How adjacent strips are joined along their long edges."""

    OVERLAP = "overlap"
    BUTT = "butt"


class FoilAssignment(str, Enum):
    """Independently priced membrane pools.

    MAIN covers floor and walls in the chosen subtype. STRUCTURAL is the
    anti-slip membrane on stairs and the secondary-basin floor, which is
    always ordered in the narrow width.
    """

    MAIN = "main"
    STRUCTURAL = "structural"


class OptimizationPriority(str, Enum):
    """Objective used to rank otherwise valid plans."""

    MINIMIZE_WASTE = "minimize-waste"
    MINIMIZE_TOTAL_MATERIAL = "minimize-total-material"


class WallLayout(str, Enum):
    """How the vessel walls are decomposed into surfaces.

    - PERIMETER: one closed loop, partitioned into long strips
    - SEPARATE: each wall (or pair of equal walls) as its own surface
    """

    PERIMETER = "perimeter"
    SEPARATE = "separate"
