"""
Type definitions for the sign training and detection system.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Tuple, runtime_checkable

from .errors import EmptyInput


@dataclass(frozen=True)
class Point3:
    """A single hand landmark in normalized image-space units."""
    x: float
    y: float
    z: float

    def __sub__(self, other: "Point3") -> "Point3":
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


# One frame's worth of landmarks, one entry per tracked hand landmark
Pose = Tuple[Point3, ...]

# A Pose expressed relative to its anchor landmark (anchor is the origin)
NormalizedPose = Tuple[Point3, ...]


@dataclass(frozen=True)
class SignRecord:
    """A named gesture: label, normalized landmarks and a captured thumbnail."""
    name: str
    landmarks: NormalizedPose
    thumbnail: Optional[str] = None  # opaque image blob (PNG data URL)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise EmptyInput("sign name is blank")
        if self.name != self.name.strip():
            raise ValueError(f"sign name {self.name!r} has surrounding whitespace")


class SessionState(Enum):
    """Which mode the session controller is in."""
    IDLE = "idle"
    TRAINING = "training"
    DETECTING = "detecting"


@dataclass(frozen=True)
class SignSaved:
    name: str


@dataclass(frozen=True)
class SignDeleted:
    name: str


@dataclass(frozen=True)
class AllSignsCleared:
    pass


@dataclass(frozen=True)
class SignAnnounced:
    """User asked to hear a saved sign's name."""
    name: str


@dataclass(frozen=True)
class ClassificationChanged:
    """The detected sign changed; name is None for an explicit no-match."""
    name: Optional[str]


@dataclass(frozen=True)
class SessionStarted:
    mode: SessionState


@dataclass(frozen=True)
class SessionStopped:
    mode: SessionState


# Frame callback: a raw pose, or None when no hand is in view
FrameCallback = Callable[[Optional[Pose]], object]


@runtime_checkable
class SubscriptionProto(Protocol):
    """Handle returned by a pose source; cancel() stops delivery."""

    def cancel(self) -> None:
        ...

    @property
    def active(self) -> bool:
        ...


@runtime_checkable
class PoseSourceProto(Protocol):
    """Pushes poses to subscribers on an externally driven cadence."""

    def subscribe(self, callback: FrameCallback) -> SubscriptionProto:
        ...


@runtime_checkable
class PersistenceProto(Protocol):
    """Key-value style storage of the encoded vocabulary."""

    def load_vocabulary(self) -> Optional[bytes]:
        """Return the stored bytes, or None when nothing has been saved."""
        ...

    def save_vocabulary(self, data: bytes) -> None:
        """Replace the stored bytes."""
        ...


@runtime_checkable
class ThumbnailCaptureProto(Protocol):
    """Rendering surface that can snapshot the current preview."""

    def capture_current_frame(self) -> Optional[str]:
        ...


@runtime_checkable
class NotifierProto(Protocol):
    """Receives discrete events from the session controller."""

    def notify(self, event: object) -> None:
        ...


@runtime_checkable
class ExporterProto(Protocol):
    """Turns a thumbnail and a name into a downloadable artifact."""

    def export(self, thumbnail: Optional[str], name: str) -> object:
        ...
