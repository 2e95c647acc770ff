"""
Hand landmark helpers: coercion of raw landmark data and normalization.
"""
import math
from typing import Any, Iterable, Optional

from .errors import InvalidPose
from .types import NormalizedPose, Point3, Pose

# MediaPipe Hands tracks 21 landmarks per hand, index 0 is the wrist
HAND_LANDMARK_COUNT = 21
WRIST = 0


def as_point(value: Any) -> Point3:
    """
    Coerce a single landmark into a Point3.

    Accepts Point3, mappings with x/y/z keys, objects with x/y/z attributes
    (e.g. MediaPipe NormalizedLandmark) and 3-element sequences.
    """
    if isinstance(value, Point3):
        point = value
    else:
        try:
            if isinstance(value, dict):
                point = Point3(float(value["x"]), float(value["y"]), float(value["z"]))
            elif hasattr(value, "x") and hasattr(value, "y") and hasattr(value, "z"):
                point = Point3(float(value.x), float(value.y), float(value.z))
            else:
                x, y, z = value
                point = Point3(float(x), float(y), float(z))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidPose(f"Malformed landmark {value!r}: {e}") from e
    if not all(math.isfinite(c) for c in point.as_tuple()):
        raise InvalidPose(f"Non-finite landmark {point!r}")
    return point


def as_pose(landmarks: Optional[Iterable[Any]],
            landmark_count: int = HAND_LANDMARK_COUNT) -> Pose:
    """
    Convert raw landmark data into a Pose of exactly landmark_count points.

    Raises:
        InvalidPose: if landmarks is None, empty, malformed or has the wrong cardinality
    """
    if landmarks is None:
        raise InvalidPose("No landmarks")
    try:
        pose = tuple(as_point(lm) for lm in landmarks)
    except TypeError as e:
        raise InvalidPose(f"Landmarks are not a sequence: {e}") from e
    if not pose:
        raise InvalidPose("Empty pose")
    if len(pose) != landmark_count:
        raise InvalidPose(f"Expected {landmark_count} landmarks, got {len(pose)}")
    return pose


def normalize(landmarks: Iterable[Any], landmark_count: int = HAND_LANDMARK_COUNT,
              anchor_index: int = WRIST) -> NormalizedPose:
    """
    Express a pose relative to its anchor landmark.

    Every point has the anchor subtracted component-wise, so the anchor
    itself becomes exactly (0, 0, 0) and the same hand shape yields the same
    result wherever it appears in the frame.

    Args:
        landmarks: Raw landmarks (see as_pose)
        landmark_count: Expected number of landmarks (K)
        anchor_index: Index of the landmark that becomes the origin

    Returns:
        Normalized pose with the same cardinality as the input

    Raises:
        InvalidPose: if the input is empty or has the wrong cardinality
    """
    pose = as_pose(landmarks, landmark_count)
    if not 0 <= anchor_index < len(pose):
        raise InvalidPose(f"Anchor index {anchor_index} outside pose of {len(pose)} points")
    anchor = pose[anchor_index]
    return tuple(p - anchor for p in pose)


def translate(pose: Iterable[Point3], dx: float, dy: float, dz: float = 0.0) -> Pose:
    """Shift every point of a pose by the same offset."""
    return tuple(Point3(p.x + dx, p.y + dy, p.z + dz) for p in pose)


def is_normalized(pose: NormalizedPose, anchor_index: int = WRIST) -> bool:
    """Check that the anchor landmark sits exactly at the origin."""
    return 0 <= anchor_index < len(pose) and pose[anchor_index] == Point3(0.0, 0.0, 0.0)
