import math
from .datatypes import Point3D


def distance(p1: Point3D, p2: Point3D) -> float:
    """
    Calculates the Euclidean distance between two 3D points.

    Args:
        p1: The first point (anything exposing x, y, z).
        p2: The second point.

    Returns:
        The Euclidean distance, or 0.0 if either point is missing.
    """
    if p1 is None or p2 is None:
        return 0.0
    return math.sqrt((p1.x - p2.x)**2 + (p1.y - p2.y)**2 + (p1.z - p2.z)**2)


def angle_at(a: Point3D, pivot: Point3D, b: Point3D) -> float:
    """
    Calculates the angle at `pivot` between the rays pivot->a and pivot->b.

    Args:
        a: End point of the first ray.
        pivot: The vertex of the angle.
        b: End point of the second ray.

    Returns:
        The angle in degrees within [0, 180]. Returns 0.0 when any point is
        missing or either ray has zero length.
    """
    if a is None or pivot is None or b is None:
        return 0.0

    v1 = (a.x - pivot.x, a.y - pivot.y, a.z - pivot.z)
    v2 = (b.x - pivot.x, b.y - pivot.y, b.z - pivot.z)

    dot = v1[0] * v2[0] + v1[1] * v2[1] + v1[2] * v2[2]
    mag1 = math.sqrt(v1[0] * v1[0] + v1[1] * v1[1] + v1[2] * v1[2])
    mag2 = math.sqrt(v2[0] * v2[0] + v2[1] * v2[1] + v2[2] * v2[2])

    if mag1 * mag2 == 0:
        return 0.0

    cosine = dot / (mag1 * mag2)
    if math.isnan(cosine):
        return 0.0
    # Rounding can push the cosine just outside [-1, 1]
    return math.degrees(math.acos(clamp(cosine, -1.0, 1.0)))


def clamp(value: float, min_val: float, max_val: float) -> float:
    """
    Clamps a value to be within the range [min_val, max_val].

    Args:
        value: The value to clamp.
        min_val: The minimum allowed value.
        max_val: The maximum allowed value.

    Returns:
        The clamped value.
    """
    if min_val > max_val:
        raise ValueError("min_val cannot be greater than max_val in clamp function.")
    return max(min_val, min(value, max_val))
