from typing import NamedTuple, Optional, Sequence, Tuple

class Point3D(NamedTuple):
    """Represents a 3D point with x, y, and z coordinates."""
    x: float
    y: float
    z: float

# 21 joints, any of which may be None when the tracker drops it.
HandPose = Sequence[Optional[Point3D]]

# [Thumb, Index, Middle, Ring, Pinky] extension angles in degrees.
AngleVector = Tuple[float, float, float, float, float]

FINGER_NAMES = ("Thumb", "Index", "Middle", "Ring", "Pinky")

NUM_LANDMARKS = 21

# Landmark indices used by the pose analysis
WRIST = 0
THUMB_CMC, THUMB_MCP, THUMB_TIP = 1, 2, 4
INDEX_MCP, INDEX_TIP = 5, 8
MIDDLE_MCP, MIDDLE_TIP = 9, 12
RING_MCP, RING_TIP = 13, 16
PINKY_MCP, PINKY_TIP = 17, 20
