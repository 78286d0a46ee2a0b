import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional

import cv2
import numpy as np

from face_counter.config import DetectionConfig
from face_counter.data_types import BoundingBox, Detection, FrameDetections
from face_counter.model_downloader import ModelDownloader

logger = logging.getLogger(__name__)

# COCO class used when no face weights are available for YOLO
PERSON_CLASS_ID = 0


class BaseDetector(ABC):
    """
    Abstract interface for all detectors.
    """

    @abstractmethod
    def detect(self, frame: np.ndarray, frame_id: int) -> FrameDetections:
        """
        Run detection on a single BGR frame.
        Must return FrameDetections with boxes in unmirrored frame pixels.
        """
        raise NotImplementedError

    def close(self) -> None:
        pass


class DummyDetector(BaseDetector):
    """
    Placeholder detector.
    Returns no detections.
    """

    def detect(self, frame: np.ndarray, frame_id: int) -> FrameDetections:
        return FrameDetections(frame_id=frame_id, detections=[])


def detections_from_mediapipe(result, frame_id: int, max_faces: Optional[int] = None) -> FrameDetections:
    """
    Convert a MediaPipe FaceDetectorResult.
    Its bounding_box already uses origin_x / origin_y / width / height.
    """
    detections: List[Detection] = []

    for det in getattr(result, "detections", None) or []:
        bb = det.bounding_box
        score = float(det.categories[0].score) if det.categories else 1.0
        detections.append(
            Detection(
                box=BoundingBox(
                    origin_x=float(bb.origin_x),
                    origin_y=float(bb.origin_y),
                    width=float(bb.width),
                    height=float(bb.height),
                ),
                score=score,
            )
        )

    if max_faces is not None:
        detections = detections[:max_faces]
    return FrameDetections(frame_id=frame_id, detections=detections)


def detections_from_yolo(
    results,
    frame_id: int,
    confidence_threshold: float,
    classes: Optional[Iterable[int]] = None,
) -> FrameDetections:
    """
    Convert one ultralytics Results object (xyxy boxes) to FrameDetections.
    """
    detections: List[Detection] = []
    allowed = set(classes) if classes is not None else None

    if results.boxes is None:
        return FrameDetections(frame_id=frame_id, detections=detections)

    # Each box in results.boxes has xyxy, conf, cls
    for box in results.boxes:
        score = float(box.conf[0].item())
        if score < confidence_threshold:
            continue

        class_id = int(box.cls[0].item())
        if allowed is not None and class_id not in allowed:
            continue

        x1, y1, x2, y2 = box.xyxy[0].tolist()
        detections.append(
            Detection(
                box=BoundingBox.from_xyxy(float(x1), float(y1), float(x2), float(y2)),
                score=score,
            )
        )

    return FrameDetections(frame_id=frame_id, detections=detections)


class MediaPipeFaceDetector(BaseDetector):
    """
    BlazeFace short-range detector through the MediaPipe Tasks API,
    running in VIDEO mode (timestamps must strictly increase).
    """

    def __init__(self, config: DetectionConfig):
        import mediapipe as mp

        self.config = config
        model_path = Path(config.model_path)
        if not model_path.is_file():
            model_path = ModelDownloader(model_path.parent).ensure(model_path.name)

        logger.info("Loading face detection model from %s", model_path)
        options = mp.tasks.vision.FaceDetectorOptions(
            base_options=mp.tasks.BaseOptions(model_asset_path=str(model_path)),
            running_mode=mp.tasks.vision.RunningMode.VIDEO,
            min_detection_confidence=config.confidence_threshold,
        )
        self._mp = mp
        self.detector = mp.tasks.vision.FaceDetector.create_from_options(options)
        self._last_timestamp_ms = -1

    def _next_timestamp(self) -> int:
        now = int(time.monotonic() * 1000)
        self._last_timestamp_ms = max(now, self._last_timestamp_ms + 1)
        return self._last_timestamp_ms

    def detect(self, frame: np.ndarray, frame_id: int) -> FrameDetections:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=np.ascontiguousarray(rgb))
        result = self.detector.detect_for_video(image, self._next_timestamp())
        return detections_from_mediapipe(result, frame_id, self.config.max_faces)

    def close(self) -> None:
        self.detector.close()


class YoloFaceDetector(BaseDetector):
    """
    YOLOv8-based detector using the ultralytics package.

    Behavior:
      - If face weights exist at DetectionConfig.yolo_model_path, use them.
      - Otherwise fall back to pretrained 'yolov8n.pt' and keep only the
        person class, so the pipeline still runs end to end.
    """

    def __init__(self, config: DetectionConfig):
        from ultralytics import YOLO

        self.config = config
        weights_path = Path(config.yolo_model_path)

        if weights_path.is_file():
            self.model = YOLO(str(weights_path))
            self.classes = None
        else:
            logger.warning("Face weights not found at %s, using yolov8n.pt (person class)", weights_path)
            # This will download yolov8n.pt on first use.
            self.model = YOLO("yolov8n.pt")
            self.classes = [PERSON_CLASS_ID]

    def detect(self, frame: np.ndarray, frame_id: int) -> FrameDetections:
        results = self.model(
            frame,
            conf=self.config.confidence_threshold,
            iou=0.7,
            verbose=False,
            max_det=self.config.max_faces,
        )[0]
        return detections_from_yolo(results, frame_id, self.config.confidence_threshold, self.classes)


def create_detector(config: DetectionConfig) -> BaseDetector:
    backend = config.backend.lower()
    if backend == "mediapipe":
        return MediaPipeFaceDetector(config)
    if backend == "yolo":
        return YoloFaceDetector(config)
    if backend == "dummy":
        return DummyDetector()
    raise ValueError(f"Unknown detector backend: {config.backend}")
