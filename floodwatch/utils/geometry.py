"""
Planar geometry helpers for risk-zone membership.

Rings are sequences of (longitude, latitude) vertices, the layout used by
the risk-zone feed. Coordinates are treated as planar; the zones are small
enough that projection error does not matter for membership.
"""

from typing import Sequence, Tuple


def point_in_ring(lat: float, lng: float, ring: Sequence[Tuple[float, float]]) -> bool:
    """
    Test whether a point lies inside a ring using ray casting.

    A ray is cast from the point towards increasing longitude; every edge it
    crosses flips the result. The wrap-around edge from the last vertex back
    to the first is included, so rings need not repeat their first vertex.

    Points exactly on the boundary may report either result.

    Args:
        lat: Point latitude
        lng: Point longitude
        ring: Ordered (longitude, latitude) vertices

    Returns:
        True if the point is inside the ring. Rings with fewer than
        three vertices contain nothing.

    Example:
        >>> square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        >>> point_in_ring(5, 5, square)
        True
    """
    n = len(ring)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > lat) != (yj > lat):
            # yi != yj is guaranteed by the straddle check
            x_cross = (xj - xi) * (lat - yi) / (yj - yi) + xi
            if lng < x_cross:
                inside = not inside
        j = i
    return inside
