"""
In-process pose source that fans frames out to cancellable subscriptions.
"""
import logging
import threading
from typing import List, Optional

from .types import FrameCallback, Pose

logger = logging.getLogger(__name__)


class Subscription:
    """Handle for a registered frame callback."""

    def __init__(self, publisher: "FramePublisher", callback: FrameCallback):
        self._publisher = publisher
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop delivery. Safe to call more than once."""
        if self._active:
            self._active = False
            self._publisher._remove(self)


class FramePublisher:
    """
    Long-lived pose source.

    The capture loop calls publish() once per frame with the tracked pose
    (or None when no hand is visible); every active subscription receives
    it synchronously, in subscription order.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: FrameCallback) -> Subscription:
        subscription = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, pose: Optional[Pose]) -> int:
        """
        Deliver a frame to all active subscribers.

        Returns:
            Number of subscribers the frame was delivered to
        """
        with self._lock:
            subscriptions = list(self._subscriptions)
        delivered = 0
        for subscription in subscriptions:
            # Cancelled after the copy was taken
            if not subscription.active:
                continue
            subscription.callback(pose)
            delivered += 1
        return delivered

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
