from ..utils.datatypes import (
    HandPose, AngleVector,
    WRIST, THUMB_CMC, THUMB_MCP, THUMB_TIP,
    INDEX_MCP, INDEX_TIP, MIDDLE_MCP, MIDDLE_TIP,
    RING_MCP, RING_TIP, PINKY_MCP, PINKY_TIP,
)
from ..utils.math_utils import angle_at

# (a, pivot, b) per finger, Thumb -> Pinky. The angle is measured at the pivot.
# The thumb uses its own CMC joint as the base since it does not hinge at the wrist.
FINGER_ANGLE_JOINTS = (
    (THUMB_CMC, THUMB_MCP, THUMB_TIP),
    (WRIST, INDEX_MCP, INDEX_TIP),
    (WRIST, MIDDLE_MCP, MIDDLE_TIP),
    (WRIST, RING_MCP, RING_TIP),
    (WRIST, PINKY_MCP, PINKY_TIP),
)


def get_joint(pose: HandPose, index: int):
    """Returns the joint at `index`, or None if the pose does not carry it."""
    if pose is None or index >= len(pose):
        return None
    return pose[index]


def extract_angles(pose: HandPose) -> AngleVector:
    """
    Computes the extension angle of each finger.

    Args:
        pose: 21 joint positions. Missing joints may be None.

    Returns:
        tuple: Five angles in degrees, [Thumb, Index, Middle, Ring, Pinky].
               180 means fully extended, values near 0-30 mean curled.
               A finger whose joints are missing or degenerate gets 0.
    """
    return tuple(
        angle_at(get_joint(pose, a), get_joint(pose, pivot), get_joint(pose, b))
        for a, pivot, b in FINGER_ANGLE_JOINTS
    )
