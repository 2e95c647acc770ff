"""
Sign Trainer

Teach a small vocabulary of hand signs by recording wrist-relative hand
landmarks under a label, then recognize them live from a stream of frames.
"""

__version__ = "0.1.0"

from .types import (
    Point3, Pose, NormalizedPose, SignRecord, SessionState,
    SignSaved, SignDeleted, AllSignsCleared, SignAnnounced,
    ClassificationChanged, SessionStarted, SessionStopped,
)
from .errors import SignTrainerError, InvalidPose, IndexOutOfRange, PersistenceCorrupt, EmptyInput
from .config import load_config, Cfg
from .landmarks import normalize, translate
from .matcher import DEFAULT_MATCH_THRESHOLD, Matcher, classify, mean_distance
from .store import SignStore, SignVocabulary, encode_vocabulary, decode_vocabulary
from .persistence import FileVocabularyBackend, InMemoryVocabularyBackend
from .source import FramePublisher, Subscription
from .session import SessionController
from .notifier import MockNotifier, LoggingNotifier, describe_event

__all__ = [
    "Point3",
    "Pose",
    "NormalizedPose",
    "SignRecord",
    "SessionState",
    "SignSaved",
    "SignDeleted",
    "AllSignsCleared",
    "SignAnnounced",
    "ClassificationChanged",
    "SessionStarted",
    "SessionStopped",
    "SignTrainerError",
    "InvalidPose",
    "IndexOutOfRange",
    "PersistenceCorrupt",
    "EmptyInput",
    "load_config",
    "Cfg",
    "normalize",
    "translate",
    "DEFAULT_MATCH_THRESHOLD",
    "Matcher",
    "classify",
    "mean_distance",
    "SignStore",
    "SignVocabulary",
    "encode_vocabulary",
    "decode_vocabulary",
    "FileVocabularyBackend",
    "InMemoryVocabularyBackend",
    "FramePublisher",
    "Subscription",
    "SessionController",
    "MockNotifier",
    "LoggingNotifier",
    "describe_event",
]
