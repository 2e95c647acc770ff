"""
Synthetic hand poses for tests.
"""
from typing import Tuple

from signtrainer.types import Point3, Pose

HAND_SIZE = 21


def hand_a(dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> Pose:
    """Fingers fanned to the right, wrist at (0.5 + dx, 0.5 + dy, dz)."""
    return tuple(
        Point3(0.5 + dx + 0.01 * i, 0.5 + dy - 0.02 * (i % 5), dz + 0.001 * i)
        for i in range(HAND_SIZE)
    )


def hand_b(dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> Pose:
    """Fingers fanned to the left, clearly different from hand_a."""
    return tuple(
        Point3(0.5 + dx - 0.015 * i, 0.5 + dy + 0.01 * (i % 7), dz)
        for i in range(HAND_SIZE)
    )


def bend(pose: Pose, amount: float) -> Pose:
    """
    Shift every landmark except the wrist along x by amount.

    The normalized result is amount * (n - 1) / n away from the original
    in mean landmark distance.
    """
    return (pose[0],) + tuple(Point3(p.x + amount, p.y, p.z) for p in pose[1:])


def bend_for_distance(pose: Pose, distance: float) -> Pose:
    """bend() with the amount that yields the given mean distance."""
    n = len(pose)
    return bend(pose, distance * n / (n - 1))


def as_tuples(pose: Pose) -> Tuple[Tuple[float, float, float], ...]:
    return tuple(p.as_tuple() for p in pose)
