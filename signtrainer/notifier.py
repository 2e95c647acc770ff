"""
Notifier implementations that receive session events.
"""
import logging
from typing import List

from .types import (
    AllSignsCleared,
    ClassificationChanged,
    SessionStarted,
    SessionState,
    SessionStopped,
    SignAnnounced,
    SignDeleted,
    SignSaved,
)

logger = logging.getLogger(__name__)


def describe_event(event: object) -> str:
    """Phrase presented to the user (spoken or shown) for an event."""
    if isinstance(event, SignSaved):
        return f"Saved {event.name} successfully!"
    if isinstance(event, SignDeleted):
        return "Sign deleted successfully!"
    if isinstance(event, AllSignsCleared):
        return "All signs cleared."
    if isinstance(event, SignAnnounced):
        return event.name
    if isinstance(event, ClassificationChanged):
        return event.name if event.name is not None else "No sign detected."
    if isinstance(event, SessionStarted):
        if event.mode is SessionState.TRAINING:
            return "Training started, camera is now active."
        return "Detection started, camera is now active."
    if isinstance(event, SessionStopped):
        if event.mode is SessionState.TRAINING:
            return "Training stopped, camera is now inactive."
        return "Detection stopped, camera is now inactive."
    return str(event)


class MockNotifier:
    """Notifier that records and prints events instead of presenting them."""
    
    def __init__(self, verbose: bool = True):
        """Initialize the mock notifier."""
        self.verbose = verbose
        self.events: List[object] = []
    
    def notify(self, event: object) -> None:
        """Record the event and print its phrase."""
        self.events.append(event)
        if self.verbose:
            print(f"[MockNotifier] {describe_event(event)} (event #{len(self.events)})")
    
    def of_type(self, event_type: type) -> List[object]:
        """Recorded events of a single type, in order."""
        return [e for e in self.events if isinstance(e, event_type)]
    
    def reset(self) -> None:
        """Forget recorded events."""
        self.events.clear()


class LoggingNotifier:
    """Notifier that writes each event's phrase to the log."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def notify(self, event: object) -> None:
        logger.log(self.level, describe_event(event))
