"""
Hand landmark tracking using MediaPipe.
"""
import cv2
import mediapipe as mp
import numpy as np
from typing import Optional

from .types import Point3, Pose


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""
    
    def __init__(self, max_num_hands: int = 2, model_complexity: int = 1,
                 min_detection_conf: float = 0.5, min_tracking_conf: float = 0.5):
        """
        Initialize the hands tracker.
        
        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: MediaPipe model complexity (0 or 1)
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )
    
    def process(self, frame_bgr: np.ndarray) -> Optional[Pose]:
        """
        Process a frame and return the first hand's landmarks.
        
        Args:
            frame_bgr: Input frame in BGR format
            
        Returns:
            Pose of 21 points (x, y in [0..1], z depth-relative), or None if no hand detected
        """
        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)
        return first_hand_pose(results)
    
    def draw_landmarks(self, frame: np.ndarray, pose: Pose) -> np.ndarray:
        """
        Draw hand landmarks on the frame as red dots.
        
        Args:
            frame: Input frame
            pose: Landmarks with x, y in [0..1] range
            
        Returns:
            Frame with landmarks drawn
        """
        height, width = frame.shape[:2]
        for point in pose:
            px = int(point.x * width)
            py = int(point.y * height)
            cv2.circle(frame, (px, py), 5, (0, 0, 255), -1)
        return frame

    def close(self) -> None:
        self.hands.close()


def first_hand_pose(results) -> Optional[Pose]:
    """Extract the first detected hand from a MediaPipe Hands result."""
    if not getattr(results, "multi_hand_landmarks", None):
        return None
    hand_landmarks = results.multi_hand_landmarks[0]
    return tuple(Point3(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark)
