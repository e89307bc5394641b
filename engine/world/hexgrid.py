"""
Axial hex-grid math.

Coordinates are (q, r) tuples; the third cube axis is s = -q - r.
Pixel conversions assume pointy-top hexes of HEX_SIZE pixels.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from ..core.types import HexCoord

HEX_SIZE = 40

DIRECTIONS: Tuple[HexCoord, ...] = (
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)

ORIGIN: HexCoord = (0, 0)


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """Number of steps between two hexes."""
    dq = a[0] - b[0]
    dr = a[1] - b[1]
    return (abs(dq) + abs(dq + dr) + abs(dr)) // 2


def is_adjacent(a: HexCoord, b: HexCoord) -> bool:
    return hex_distance(a, b) == 1


def neighbors(coord: HexCoord) -> List[HexCoord]:
    q, r = coord
    return [(q + dq, r + dr) for dq, dr in DIRECTIONS]


def ring(center: HexCoord, radius: int) -> List[HexCoord]:
    """
    Hexes at exactly ``radius`` steps from ``center``.

    Walks the ring starting from its south-west corner, so the order is
    stable for a given radius.
    """
    if radius == 0:
        return [center]

    results: List[HexCoord] = []
    q = center[0] - radius
    r = center[1] + radius
    for dq, dr in DIRECTIONS:
        for _ in range(radius):
            results.append((q, r))
            q += dq
            r += dr
    return results


def spiral(center: HexCoord, radius: int) -> List[HexCoord]:
    """All hexes within ``radius``, ring by ring from the center outward."""
    results: List[HexCoord] = []
    for k in range(radius + 1):
        results.extend(ring(center, k))
    return results


def hex_count(radius: int) -> int:
    """Hexes in a filled hexagon of the given radius."""
    return 3 * radius * radius + 3 * radius + 1


def axial_to_pixel(coord: HexCoord, size: float = HEX_SIZE) -> Tuple[float, float]:
    q, r = coord
    x = size * (math.sqrt(3) * q + math.sqrt(3) / 2 * r)
    y = size * (3 / 2) * r
    return x, y


def pixel_to_axial(x: float, y: float, size: float = HEX_SIZE) -> HexCoord:
    """Inverse of axial_to_pixel, snapped to the nearest hex."""
    q = (math.sqrt(3) / 3 * x - y / 3) / size
    r = (2 / 3 * y) / size
    return cube_round(q, r)


def cube_round(q: float, r: float) -> HexCoord:
    s = -q - r
    rq, rr, rs = round(q), round(r), round(s)

    dq = abs(rq - q)
    dr = abs(rr - r)
    ds = abs(rs - s)

    # Reset the component with the largest rounding error
    if dq > dr and dq > ds:
        rq = -rr - rs
    elif dr > ds:
        rr = -rq - rs

    return int(rq), int(rr)
