"""
Session state machine: idle, training and detecting.

The controller owns the per-frame pipeline. While a session is active it
normalizes every incoming pose, keeps the latest one for saving, and while
detecting classifies it against the store and reports changes in the result.
"""
import logging
import threading
from typing import Optional

from .errors import EmptyInput, InvalidPose, SignTrainerError
from .landmarks import HAND_LANDMARK_COUNT, WRIST, normalize
from .matcher import ClassificationDebouncer, Matcher
from .store import SignStore, SignVocabulary
from .types import (
    AllSignsCleared,
    ClassificationChanged,
    ExporterProto,
    NormalizedPose,
    NotifierProto,
    PoseSourceProto,
    SessionStarted,
    SessionState,
    SessionStopped,
    SignAnnounced,
    SignDeleted,
    SignRecord,
    SignSaved,
    SubscriptionProto,
    ThumbnailCaptureProto,
)

logger = logging.getLogger(__name__)


class SessionController:
    """
    Drives training and detection sessions over a stream of poses.

    Frames arrive either through a subscription on pose_source (opened when
    a session starts and cancelled when it returns to idle) or by calling
    on_frame() directly. At most one frame is processed at a time; a frame
    that arrives while another is in flight is dropped. State changes wait
    for an in-flight frame to finish, so once stop_training() or
    stop_detecting() returns no further save or classification can be
    reported for that session.
    """

    def __init__(self, store: SignStore, matcher: Matcher,
                 notifier: Optional[NotifierProto] = None,
                 pose_source: Optional[PoseSourceProto] = None,
                 thumbnails: Optional[ThumbnailCaptureProto] = None,
                 exporter: Optional[ExporterProto] = None,
                 landmark_count: int = HAND_LANDMARK_COUNT,
                 anchor_index: int = WRIST):
        self.store = store
        self.matcher = matcher
        self.notifier = notifier
        self.pose_source = pose_source
        self.thumbnails = thumbnails
        self.exporter = exporter
        self.landmark_count = landmark_count
        self.anchor_index = anchor_index

        self._state = SessionState.IDLE
        self._live_pose: Optional[NormalizedPose] = None
        self._debouncer = ClassificationDebouncer()
        self._subscription: Optional[SubscriptionProto] = None
        self._generation = 0

        self._lock = threading.RLock()
        self._frame_gate = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def live_pose(self) -> Optional[NormalizedPose]:
        """Most recent normalized pose, or None when no hand is in view."""
        return self._live_pose

    @property
    def last_classification(self) -> Optional[str]:
        return self._debouncer.last

    @property
    def signs(self) -> SignVocabulary:
        return self.store.snapshot()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_training(self) -> bool:
        return self._start(SessionState.TRAINING)

    def stop_training(self) -> bool:
        return self._stop(SessionState.TRAINING)

    def start_detecting(self) -> bool:
        return self._start(SessionState.DETECTING)

    def stop_detecting(self) -> bool:
        return self._stop(SessionState.DETECTING)

    def stop(self) -> bool:
        """Stop whichever session is active."""
        with self._lock:
            if self._state is SessionState.IDLE:
                return False
            return self._stop(self._state)

    def _start(self, mode: SessionState) -> bool:
        with self._lock:
            if self._state is mode:
                logger.debug(f"Already {mode.value}")
                return False
            previous = self._state
            self._subscribe()
            self._debouncer.reset()
            self._state = mode
            if previous is not SessionState.IDLE:
                self._emit(SessionStopped(previous))
            logger.info(f"Session {previous.value} -> {mode.value}")
            self._emit(SessionStarted(mode))
            return True

    def _stop(self, mode: SessionState) -> bool:
        with self._lock:
            if self._state is not mode:
                logger.debug(f"Ignoring stop of {mode.value} while {self._state.value}")
                return False
            self._state = SessionState.IDLE
            self._unsubscribe()
            self._live_pose = None
            self._debouncer.reset()
            logger.info(f"Session {mode.value} -> idle")
            self._emit(SessionStopped(mode))
            return True

    def _subscribe(self) -> None:
        if self.pose_source is None or self._subscription is not None:
            return
        self._generation += 1
        generation = self._generation
        self._subscription = self.pose_source.subscribe(
            lambda pose: self._on_subscribed_frame(generation, pose)
        )

    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _on_subscribed_frame(self, generation: int, pose) -> bool:
        # Frames from a subscription that has since been replaced are stale
        if generation != self._generation:
            return False
        return self.on_frame(pose)

    # ------------------------------------------------------------------
    # Frame pipeline
    # ------------------------------------------------------------------

    def on_frame(self, pose) -> bool:
        """
        Process one frame's pose (None or malformed data means no hand).

        Returns:
            True if the frame was consumed, False if the controller is idle
            or the frame was dropped because another is still in flight
        """
        if not self._frame_gate.acquire(blocking=False):
            logger.debug("Dropping frame: previous frame still in flight")
            return False
        try:
            with self._lock:
                if self._state is SessionState.IDLE:
                    return False
                live = self._normalize(pose)
                self._live_pose = live
                if self._state is SessionState.DETECTING:
                    result = None
                    if live is not None:
                        result = self.matcher.classify(live, self.store.snapshot())
                    if self._debouncer.update(result):
                        self._emit(ClassificationChanged(result))
                return True
        finally:
            self._frame_gate.release()

    def _normalize(self, pose) -> Optional[NormalizedPose]:
        if pose is None:
            return None
        try:
            return normalize(pose, self.landmark_count, self.anchor_index)
        except InvalidPose as e:
            logger.debug(f"Treating frame as no hand: {e}")
            return None

    # ------------------------------------------------------------------
    # Vocabulary actions
    # ------------------------------------------------------------------

    def save_sign(self, name: Optional[str]) -> Optional[SignRecord]:
        """
        Save the live pose under name while training.

        Blank names, a missing live pose or a session that is not training
        make this a silent no-op.

        Returns:
            The stored record, or None if nothing was saved
        """
        with self._lock:
            if self._state is not SessionState.TRAINING:
                logger.debug(f"Ignoring save while {self._state.value}")
                return None
            try:
                record = self._build_record(name)
            except EmptyInput as e:
                logger.debug(f"Ignoring save: {e}")
                return None
            self.store.add(record)
            self._emit(SignSaved(record.name))
            return record

    def _build_record(self, name: Optional[str]) -> SignRecord:
        name = (name or "").strip()
        if not name:
            raise EmptyInput("sign name is blank")
        if self._live_pose is None:
            raise EmptyInput("no hand in view")
        thumbnail = None
        if self.thumbnails is not None:
            thumbnail = self.thumbnails.capture_current_frame()
        return SignRecord(name=name, landmarks=self._live_pose, thumbnail=thumbnail)

    def delete_sign(self, index: int) -> SignRecord:
        """
        Delete the sign at index; later signs shift down by one.

        Raises:
            IndexOutOfRange: if index is stale or invalid
        """
        with self._lock:
            removed = self.store.remove(index)
            self._emit(SignDeleted(removed.name))
            return removed

    def clear_signs(self) -> None:
        with self._lock:
            self.store.clear()
            self._emit(AllSignsCleared())

    def announce_sign(self, index: int) -> SignRecord:
        """Ask the notifier to present a saved sign's name."""
        with self._lock:
            record = self.store[index]
            self._emit(SignAnnounced(record.name))
            return record

    def export_sign(self, index: int):
        """Hand a saved sign's thumbnail to the exporter."""
        if self.exporter is None:
            raise SignTrainerError("No exporter configured")
        record = self.store[index]
        return self.exporter.export(record.thumbnail, record.name)

    def _emit(self, event) -> None:
        if self.notifier is not None:
            self.notifier.notify(event)
