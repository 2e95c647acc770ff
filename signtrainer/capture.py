"""
Thumbnail capture from the preview image and export of saved thumbnails.
"""
import base64
import logging
import re
import threading
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)

PNG_DATA_URL_PREFIX = "data:image/png;base64,"


def encode_png_data_url(image_bgr: np.ndarray) -> str:
    """Encode a BGR image as a PNG data URL."""
    ok, buffer = cv2.imencode(".png", image_bgr)
    if not ok:
        raise ValueError("Failed to encode image as PNG")
    return PNG_DATA_URL_PREFIX + base64.b64encode(buffer.tobytes()).decode("ascii")


def decode_data_url(data_url: str) -> bytes:
    """Return the raw bytes of a base64 data URL (or of bare base64 text)."""
    _, sep, payload = data_url.partition(";base64,")
    if not sep:
        payload = data_url
    return base64.b64decode(payload, validate=True)


class FrameThumbnailCapture:
    """
    Holds the most recently rendered preview frame.

    The capture loop calls update() with each rendered frame (landmarks
    already drawn); capture_current_frame() snapshots it as a PNG data URL.
    """

    def __init__(self, size: Optional[tuple] = None):
        """
        Args:
            size: Optional (width, height) to shrink thumbnails to
        """
        self.size = size
        self._frame: Optional[np.ndarray] = None
        self._lock = threading.Lock()

    def update(self, frame_bgr: np.ndarray) -> None:
        with self._lock:
            self._frame = frame_bgr.copy()

    def capture_current_frame(self) -> Optional[str]:
        """PNG data URL of the latest frame, or None if nothing was rendered yet."""
        with self._lock:
            frame = self._frame
        if frame is None:
            return None
        if self.size is not None:
            frame = cv2.resize(frame, self.size, interpolation=cv2.INTER_AREA)
        return encode_png_data_url(frame)


class ImageFileExporter:
    """Writes a sign's thumbnail to <directory>/<name>.png."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def export(self, thumbnail: Optional[str], name: str) -> Path:
        if not thumbnail:
            raise ValueError(f"Sign '{name}' has no thumbnail to export")
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{safe_filename(name)}.png"
        path.write_bytes(decode_data_url(thumbnail))
        logger.info(f"Exported '{name}' to {path}")
        return path


def safe_filename(name: str) -> str:
    """Sign name reduced to characters that are safe in a file name."""
    cleaned = re.sub(r"[^\w\- ]+", "_", name).strip()
    return cleaned or "sign"
