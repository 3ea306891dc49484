"""
Packing initializer for ForceBubbles
Circle packing used to choose starting positions

Algorithm:
1. Each entity becomes a circle with radius sqrt(weight)
2. Circles are packed with a front-chain sibling packing: each new circle
   is placed tangent to two circles on the front chain, closest to the
   centroid, without overlapping anything already placed
3. The minimal enclosing circle of the front chain (Welzl) gives the
   radius of the parent
4. The packing is repeated with padding, then scaled to fit the canvas
5. Positions are magnified from the canvas centre for the opening animation
"""
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass
import math
import logging

import numpy as np

from .types import Entity

logger = logging.getLogger(__name__)


@dataclass
class Circle:
    """Circle being packed; coordinates are relative to the parent centre"""
    x: float = 0.0
    y: float = 0.0
    r: float = 0.0


class _ChainNode:
    """Front-chain link"""
    __slots__ = ('circle', 'next', 'previous')

    def __init__(self, circle: Circle) -> None:
        self.circle = circle
        self.next: Optional[_ChainNode] = None
        self.previous: Optional[_ChainNode] = None


class PackingInitializer:
    """
    Computes initial positions by circle packing

    Weight of each entity is its value at the last year of the series.
    Steady-state radii are NOT set here; the transition controller owns them.
    """

    def __init__(self, config, seed: int = 0):
        """
        Initialize packing initializer

        Args:
            config: Layout configuration (width, height, pack_padding, magnification)
            seed: Seed for the enclosing-circle shuffle (packing is deterministic)
        """
        self.config = config
        self.seed = seed

    def pack(self, weights: Sequence[float]) -> List[Circle]:
        """
        Pack circles of area proportional to weight into the canvas

        Args:
            weights: One weight per circle; negative or NaN counts as zero

        Returns:
            Circles in canvas coordinates, in input order
        """
        width = self.config.width
        height = self.config.height
        side = min(width, height)

        circles = [Circle(r=math.sqrt(_clean_weight(w))) for w in weights]
        if not circles:
            return []

        # Unpadded pass gives the scale; padded pass gives the final packing
        root_r = pack_siblings(circles, self.seed)
        if root_r <= 0:
            logger.warning("All packing weights are zero; placing every circle at the centre")
            for circle in circles:
                circle.x, circle.y, circle.r = width / 2, height / 2, 0.0
            return circles

        padding = self.config.pack_padding * root_r / side
        if padding:
            for circle in circles:
                circle.r += padding
        root_r = pack_siblings(circles, self.seed)
        if padding:
            for circle in circles:
                circle.r -= padding
        root_r += padding

        k = side / (2 * root_r)
        for circle in circles:
            circle.x = width / 2 + k * circle.x
            circle.y = height / 2 + k * circle.y
            circle.r *= k

        return circles

    def initialize(self, entities: List[Entity]) -> None:
        """
        Set starting positions of entities in place

        Args:
            entities: Entities to position (x, y and velocities are overwritten)
        """
        weights = [entity.series[-1] if entity.series else 0.0 for entity in entities]
        circles = self.pack(weights)

        cx, cy = self.config.width * 0.5, self.config.height * 0.5
        magnification = self.config.magnification
        for entity, circle in zip(entities, circles):
            entity.x = cx + (circle.x - cx) * magnification
            entity.y = cy + (circle.y - cy) * magnification
            entity.vx = 0.0
            entity.vy = 0.0

        logger.info(f"Packed {len(entities)} entities (magnification x{magnification:g})")


def _clean_weight(weight: float) -> float:
    if weight is None or not math.isfinite(weight) or weight < 0:
        return 0.0
    return float(weight)


# ============================================================
# SIBLING PACKING
# ============================================================

def _place(b: Circle, a: Circle, c: Circle) -> None:
    """Place c tangent to both a and b"""
    dx = b.x - a.x
    dy = b.y - a.y
    d2 = dx * dx + dy * dy
    if d2:
        a2 = (a.r + c.r) ** 2
        b2 = (b.r + c.r) ** 2
        if a2 > b2:
            x = (d2 + b2 - a2) / (2 * d2)
            y = math.sqrt(max(0.0, b2 / d2 - x * x))
            c.x = b.x - x * dx - y * dy
            c.y = b.y - x * dy + y * dx
        else:
            x = (d2 + a2 - b2) / (2 * d2)
            y = math.sqrt(max(0.0, a2 / d2 - x * x))
            c.x = a.x + x * dx - y * dy
            c.y = a.y + x * dy + y * dx
    else:
        c.x = a.x + c.r
        c.y = a.y


def _intersects(a: Circle, b: Circle) -> bool:
    dr = a.r + b.r - 1e-6
    dx = b.x - a.x
    dy = b.y - a.y
    return dr > 0 and dr * dr > dx * dx + dy * dy


def _score(node: _ChainNode) -> float:
    """Squared distance from origin of the weighted midpoint of node and its successor"""
    a = node.circle
    b = node.next.circle
    ab = a.r + b.r
    if ab == 0:
        return a.x * a.x + a.y * a.y
    dx = (a.x * b.r + b.x * a.r) / ab
    dy = (a.y * b.r + b.y * a.r) / ab
    return dx * dx + dy * dy


def pack_siblings(circles: List[Circle], seed: int = 0) -> float:
    """
    Pack circles tightly around the origin, in place

    Args:
        circles: Circles with radii set; x and y are overwritten
        seed: Seed for the enclosing-circle shuffle

    Returns:
        Radius of the enclosing circle
    """
    n = len(circles)
    if n == 0:
        return 0.0

    a = circles[0]
    a.x, a.y = 0.0, 0.0
    if n == 1:
        return a.r

    b = circles[1]
    a.x = -b.r
    b.x = a.r
    b.y = 0.0
    if n == 2:
        return a.r + b.r

    c = circles[2]
    _place(b, a, c)

    na, nb, nc = _ChainNode(a), _ChainNode(b), _ChainNode(c)
    na.next = nc.previous = nb
    nb.next = na.previous = nc
    nc.next = nb.previous = na

    i = 3
    while i < n:
        _place(na.circle, nb.circle, circles[i])
        node = _ChainNode(circles[i])

        # Closest intersecting circle on the front chain, by distance along the chain
        j, k = nb.next, na.previous
        sj, sk = nb.circle.r, na.circle.r
        collided = False
        while True:
            if sj <= sk:
                if _intersects(j.circle, node.circle):
                    nb = j
                    na.next = nb
                    nb.previous = na
                    collided = True
                    break
                sj += j.circle.r
                j = j.next
            else:
                if _intersects(k.circle, node.circle):
                    na = k
                    na.next = nb
                    nb.previous = na
                    collided = True
                    break
                sk += k.circle.r
                k = k.previous
            if j is k.next:
                break
        if collided:
            continue

        # Insert between a and b
        node.previous = na
        node.next = nb
        na.next = nb.previous = nb = node

        # New closest pair to the centroid
        best = _score(na)
        cursor = node.next
        while cursor is not nb:
            score = _score(cursor)
            if score < best:
                na, best = cursor, score
            cursor = cursor.next
        nb = na.next
        i += 1

    chain = [nb.circle]
    cursor = nb.next
    while cursor is not nb:
        chain.append(cursor.circle)
        cursor = cursor.next
    enclosing = enclose(chain, seed)

    for circle in circles:
        circle.x -= enclosing.x
        circle.y -= enclosing.y
    return enclosing.r


# ============================================================
# MINIMAL ENCLOSING CIRCLE
# ============================================================

def enclose(circles: Sequence[Circle], seed: int = 0) -> Circle:
    """
    Smallest circle enclosing all circles (Welzl, move-to-front)

    Args:
        circles: Circles to enclose
        seed: Seed for the random processing order

    Returns:
        Enclosing circle
    """
    order = np.random.default_rng(seed).permutation(len(circles))
    shuffled = [circles[idx] for idx in order]

    basis: List[Circle] = []
    enclosing: Optional[Circle] = None
    i = 0
    while i < len(shuffled):
        p = shuffled[i]
        if enclosing is not None and _encloses_weak(enclosing, p):
            i += 1
        else:
            basis = _extend_basis(basis, p)
            enclosing = _enclose_basis(basis)
            i = 0
    return enclosing if enclosing is not None else Circle()


def _extend_basis(basis: List[Circle], p: Circle) -> List[Circle]:
    if _encloses_weak_all(p, basis):
        return [p]

    for bi in basis:
        if _encloses_not(p, bi) and _encloses_weak_all(_enclose_basis2(bi, p), basis):
            return [bi, p]

    for i in range(len(basis) - 1):
        for j in range(i + 1, len(basis)):
            bi, bj = basis[i], basis[j]
            if (_encloses_not(_enclose_basis2(bi, bj), p)
                    and _encloses_not(_enclose_basis2(bi, p), bj)
                    and _encloses_not(_enclose_basis2(bj, p), bi)):
                candidate = _enclose_basis3(bi, bj, p)
                if candidate is not None and _encloses_weak_all(candidate, basis):
                    return [bi, bj, p]

    raise ValueError(f"Could not extend enclosing basis of {len(basis)} circles")


def _encloses_not(a: Circle, b: Circle) -> bool:
    dr = a.r - b.r
    dx = b.x - a.x
    dy = b.y - a.y
    return dr < 0 or dr * dr < dx * dx + dy * dy


def _encloses_weak(a: Circle, b: Circle) -> bool:
    dr = a.r - b.r + max(a.r, b.r, 1) * 1e-9
    dx = b.x - a.x
    dy = b.y - a.y
    return dr > 0 and dr * dr > dx * dx + dy * dy


def _encloses_weak_all(a: Circle, basis: Sequence[Circle]) -> bool:
    return all(_encloses_weak(a, b) for b in basis)


def _enclose_basis(basis: Sequence[Circle]) -> Circle:
    if len(basis) == 1:
        only = basis[0]
        return Circle(only.x, only.y, only.r)
    if len(basis) == 2:
        return _enclose_basis2(basis[0], basis[1])
    candidate = _enclose_basis3(basis[0], basis[1], basis[2])
    if candidate is None:
        return _enclose_basis2(basis[0], basis[2])
    return candidate


def _enclose_basis2(a: Circle, b: Circle) -> Circle:
    x21 = b.x - a.x
    y21 = b.y - a.y
    r21 = b.r - a.r
    length = math.hypot(x21, y21)
    if length == 0:
        bigger = a if a.r >= b.r else b
        return Circle(bigger.x, bigger.y, bigger.r)
    return Circle(
        (a.x + b.x + x21 / length * r21) / 2,
        (a.y + b.y + y21 / length * r21) / 2,
        (length + a.r + b.r) / 2
    )


def _enclose_basis3(a: Circle, b: Circle, c: Circle) -> Optional[Circle]:
    """Circle tangent to three circles; None when the centres are collinear"""
    x1, y1, r1 = a.x, a.y, a.r
    x2, y2, r2 = b.x, b.y, b.r
    x3, y3, r3 = c.x, c.y, c.r
    a2 = x1 - x2
    a3 = x1 - x3
    b2 = y1 - y2
    b3 = y1 - y3
    c2 = r2 - r1
    c3 = r3 - r1
    d1 = x1 * x1 + y1 * y1 - r1 * r1
    d2 = d1 - x2 * x2 - y2 * y2 + r2 * r2
    d3 = d1 - x3 * x3 - y3 * y3 + r3 * r3
    ab = a3 * b2 - a2 * b3
    if ab == 0:
        return None
    xa = (b2 * d3 - b3 * d2) / (ab * 2) - x1
    xb = (b3 * c2 - b2 * c3) / ab
    ya = (a3 * d2 - a2 * d3) / (ab * 2) - y1
    yb = (a2 * c3 - a3 * c2) / ab
    qa = xb * xb + yb * yb - 1
    qb = 2 * (r1 + xa * xb + ya * yb)
    qc = xa * xa + ya * ya - r1 * r1
    if abs(qa) > 1e-6:
        discriminant = max(0.0, qb * qb - 4 * qa * qc)
        r = -(qb + math.sqrt(discriminant)) / (2 * qa)
    elif qb != 0:
        r = -qc / qb
    else:
        return None
    return Circle(x1 + xa + xb * r, y1 + ya + yb * r, r)


def bounding_box(circles: Sequence[Circle]) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of a set of circles"""
    if not circles:
        return 0.0, 0.0, 0.0, 0.0
    return (
        min(c.x - c.r for c in circles),
        min(c.y - c.r for c in circles),
        max(c.x + c.r for c in circles),
        max(c.y + c.r for c in circles),
    )
