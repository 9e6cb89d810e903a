"""
Legal-Move Enumerator
=====================

Capacity-only pair enumeration; drives terminal detection.

A pair (a, b) is legal when both points have a spare slot; the self-pair
(a, a) needs two spare slots since a loop uses two.
"""

from typing import List, Sequence, Tuple

from sprouts_engine.schemas.board import Point


def legal_pairs(points: Sequence[Point]) -> List[Tuple[str, str]]:
    """
    All legal pairs in (i <= j) creation order.

    Example:
        >>> legal_pairs([Point("point-0", (0, 0)), Point("point-1", (50, 0))])
        [('point-0', 'point-0'), ('point-0', 'point-1'), ('point-1', 'point-1')]
    """
    live = [p for p in points if p.spare > 0]
    pairs = []
    for i, a in enumerate(live):
        if a.spare >= 2:
            pairs.append((a.id, a.id))
        for b in live[i + 1:]:
            pairs.append((a.id, b.id))
    return pairs


def count_legal_pairs(points: Sequence[Point]) -> int:
    """Closed-form count: C(live, 2) + points with >= 2 spare slots."""
    live = sum(1 for p in points if p.spare > 0)
    loopable = sum(1 for p in points if p.spare >= 2)
    return live * (live - 1) // 2 + loopable


def has_legal_pairs(points: Sequence[Point]) -> bool:
    live = 0
    for p in points:
        if p.spare >= 2:
            return True
        if p.spare > 0:
            live += 1
            if live >= 2:
                return True
    return False
