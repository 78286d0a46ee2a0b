# all configurations in one place

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
MODELS_DIR = PROJECT_ROOT / "models"

BLAZE_FACE_MODEL = "blaze_face_short_range.tflite"


@dataclass
class VideoConfig:
    source: Union[int, str] = 0  # 0 for webcam, or path to video file
    frame_width: int = 1280
    frame_height: int = 720
    mirror: bool = True  # display the frame selfie-style (horizontally flipped)


@dataclass
class DetectionConfig:
    backend: str = "mediapipe"  # "mediapipe", "yolo" or "dummy"
    model_path: Path = MODELS_DIR / BLAZE_FACE_MODEL
    yolo_model_path: Path = MODELS_DIR / "detector" / "yolov8n-face.pt"
    confidence_threshold: float = 0.5
    max_faces: int = 10


@dataclass
class TrackingConfig:
    proximity_threshold: float = 100.0  # max center distance (px) to keep the same id
    max_miss_frames: int = 5            # frames a track survives without a detection
    line_position: float = 0.5          # relative horizontal position of the line (0-1)

    def __post_init__(self):
        if self.proximity_threshold <= 0:
            raise ValueError(f"proximity_threshold must be positive, got {self.proximity_threshold}")
        if self.max_miss_frames < 0:
            raise ValueError(f"max_miss_frames must be >= 0, got {self.max_miss_frames}")
        if not 0.0 <= self.line_position <= 1.0:
            raise ValueError(f"line_position must be within [0, 1], got {self.line_position}")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_events: bool = True
    log_path: Path = DATA_DIR / "logs" / "events.csv"


@dataclass
class PipelineConfig:
    video: VideoConfig = field(default_factory=VideoConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
