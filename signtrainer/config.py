"""
Configuration management for the sign trainer.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from .landmarks import HAND_LANDMARK_COUNT, WRIST
from .matcher import DEFAULT_MATCH_THRESHOLD

# Default config file in project root
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.default.yaml"


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int = 2
    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class MatcherConfig:
    """Sign matching configuration."""
    threshold: float = DEFAULT_MATCH_THRESHOLD  # mean landmark distance
    landmark_count: int = HAND_LANDMARK_COUNT
    anchor_index: int = WRIST


@dataclass
class StorageConfig:
    """Where signs and exported images are kept."""
    path: str = "signs.json"
    export_dir: str = "exports"


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    window_name: str = "Sign Trainer"
    show_landmarks: bool = True
    mirror: bool = True


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    matcher: MatcherConfig
    storage: StorageConfig
    display: DisplayConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.
    
    Args:
        path: Path to config file. If None, uses config.default.yaml, or the
            built-in defaults when that file is absent
        
    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Installed copies may not ship the project-root file
        if not DEFAULT_CONFIG_PATH.exists():
            return _dict_to_config({})
        path = DEFAULT_CONFIG_PATH
    
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}
    
    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object. Missing keys keep their defaults."""
    camera = CameraConfig(**(data.get('camera') or {}))
    mediapipe = MediaPipeConfig(**(data.get('mediapipe') or {}))

    matcher = MatcherConfig(**(data.get('matcher') or {}))
    if not matcher.threshold > 0:
        raise ValueError(f"matcher.threshold must be positive, got {matcher.threshold}")
    if not 0 <= matcher.anchor_index < matcher.landmark_count:
        raise ValueError(
            f"matcher.anchor_index {matcher.anchor_index} outside 0..{matcher.landmark_count - 1}"
        )

    storage = StorageConfig(**(data.get('storage') or {}))
    display = DisplayConfig(**(data.get('display') or {}))

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        matcher=matcher,
        storage=storage,
        display=display
    )
