"""
Main application: webcam preview driving sign training and detection.
"""
import logging
import os
import sys
from typing import Optional

import cv2
from dotenv import load_dotenv

from .capture import FrameThumbnailCapture, ImageFileExporter
from .config import load_config
from .errors import IndexOutOfRange, SignTrainerError
from .matcher import Matcher
from .notifier import MockNotifier
from .persistence import FileVocabularyBackend
from .session import SessionController
from .source import FramePublisher
from .store import SignStore
from .tracker import HandsTracker
from .types import SessionState

KEY_HELP = [
    "t = start/stop training",
    "d = start/stop detecting",
    "n = name and save current sign",
    "l = list signs, p = play, r = delete, e = export",
    "c = clear all signs, q = quit",
]


class SignTrainerApp:
    """Main application class wiring camera, tracker and session controller."""
    
    def __init__(self, config_path: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.tracker = HandsTracker(
            max_num_hands=self.config.mediapipe.max_num_hands,
            model_complexity=self.config.mediapipe.model_complexity,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )
        
        self.publisher = FramePublisher()
        self.thumbnails = FrameThumbnailCapture()
        self.store = SignStore(FileVocabularyBackend(self.config.storage.path))
        self.store.load()
        self.notifier = MockNotifier()
        self.controller = SessionController(
            store=self.store,
            matcher=Matcher(self.config.matcher.threshold),
            notifier=self.notifier,
            pose_source=self.publisher,
            thumbnails=self.thumbnails,
            exporter=ImageFileExporter(self.config.storage.export_dir),
            landmark_count=self.config.matcher.landmark_count,
            anchor_index=self.config.matcher.anchor_index
        )
        
        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)
        
        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")
    
    def run(self):
        """Run the main application loop."""
        print(f"Starting {self.config.display.window_name}")
        print(f"📚 {len(self.store)} saved sign(s) loaded from {self.config.storage.path}")
        for line in KEY_HELP:
            print(f"  - {line}")
        
        try:
            while True:
                ret, frame = self.cap.read()
                if not ret:
                    print("Failed to read frame from camera")
                    break
                
                if self.config.display.mirror:
                    frame = cv2.flip(frame, 1)
                
                # Only run the tracker while a session wants frames
                if self.controller.state is not SessionState.IDLE:
                    pose = self.tracker.process(frame)
                    if pose is not None and self.config.display.show_landmarks:
                        frame = self.tracker.draw_landmarks(frame, pose)
                    self.thumbnails.update(frame)
                    self.publisher.publish(pose)
                
                self._draw_status(frame)
                cv2.imshow(self.config.display.window_name, frame)
                
                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                self.handle_key(key)
        finally:
            self.controller.stop()
            self.tracker.close()
            self.cap.release()
            cv2.destroyAllWindows()
    
    def handle_key(self, key: int) -> None:
        """Dispatch a key press to the session controller."""
        controller = self.controller
        if key == ord('t'):
            if controller.state is SessionState.TRAINING:
                controller.stop_training()
            else:
                controller.start_training()
        elif key == ord('d'):
            if controller.state is SessionState.DETECTING:
                controller.stop_detecting()
            else:
                controller.start_detecting()
        elif key == ord('n'):
            name = input("Enter sign meaning: ")
            if controller.save_sign(name) is None:
                print("⚠️  Nothing saved (training inactive, blank name or no hand in view)")
        elif key == ord('l'):
            self._list_signs()
        elif key == ord('c'):
            controller.clear_signs()
        elif key in (ord('p'), ord('r'), ord('e')):
            index = self._prompt_index()
            if index is None:
                return
            try:
                if key == ord('p'):
                    controller.announce_sign(index)
                elif key == ord('r'):
                    controller.delete_sign(index)
                else:
                    path = controller.export_sign(index)
                    print(f"📥 Exported to {path}")
            except IndexOutOfRange as e:
                print(f"❌ {e}")
            except (SignTrainerError, ValueError) as e:
                print(f"❌ Export failed: {e}")
    
    def _prompt_index(self) -> Optional[int]:
        self._list_signs()
        raw = input("Sign number: ").strip()
        try:
            return int(raw)
        except ValueError:
            print(f"❌ Not a number: {raw!r}")
            return None
    
    def _list_signs(self) -> None:
        signs = self.controller.signs
        if not signs:
            print("No saved signs")
        for i, sign in enumerate(signs):
            print(f"  [{i}] {sign.name}")
    
    def _draw_status(self, frame) -> None:
        state = self.controller.state
        status_text = f"Mode: {state.value}"
        if state is SessionState.DETECTING:
            detected = self.controller.last_classification
            status_text += f" | Sign: {detected if detected is not None else '-'}"
        elif state is SessionState.TRAINING:
            hand = "hand in view" if self.controller.live_pose is not None else "no hand"
            status_text += f" | {hand}"
        cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        cv2.putText(frame, f"Signs: {len(self.store)}", (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
    
    def __del__(self):
        """Cleanup resources."""
        if hasattr(self, 'cap') and self.cap.isOpened():
            self.cap.release()


def run():
    """Entry point for the application."""
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("SIGNTRAINER_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    
    config_path = sys.argv[1] if len(sys.argv) > 1 else os.getenv("SIGNTRAINER_CONFIG")
    
    try:
        app = SignTrainerApp(config_path=config_path)
        app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
    except (RuntimeError, FileNotFoundError, ValueError, TypeError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
