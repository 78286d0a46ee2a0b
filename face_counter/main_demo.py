# End-to-end doorway face counter demo

import argparse
import logging
from typing import List, Optional

import cv2

from face_counter.config import PipelineConfig, TrackingConfig
from face_counter.detector import create_detector
from face_counter.event_log import CsvEventLog
from face_counter.overlay import draw_status, draw_tracks_and_counts
from face_counter.tracker import ProximityTracker

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Face Crossing Counter"
ERROR_DISPLAY_MS = 3000


def run_demo(config: PipelineConfig, video_source=None) -> None:
    """
    End-to-end demo:
      frame -> detector -> tracker (+ line counter) -> overlay -> display
    """

    if video_source is None:
        video_source = config.video.source

    cap = cv2.VideoCapture(video_source)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open video source: {video_source}")

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, config.video.frame_width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, config.video.frame_height)

    detector = None
    try:
        ret, frame = cap.read()
        if ret:
            cv2.imshow(WINDOW_TITLE, draw_status(frame.copy(), "Loading face detection model..."))
            cv2.waitKey(1)

        try:
            detector = create_detector(config.detection)
        except Exception as e:
            logger.exception("Failed to initialize the face detector")
            if ret:
                cv2.imshow(WINDOW_TITLE, draw_status(frame.copy(), f"Initialization Error: {e}", is_error=True))
                cv2.waitKey(ERROR_DISPLAY_MS)
            raise

        tracker = ProximityTracker.from_config(config.tracking)
        event_log = CsvEventLog(config.logging.log_path) if config.logging.log_events else None

        frame_id = 0
        while ret:
            frame_id += 1

            # 1) Detection, in unmirrored camera space
            frame_detections = detector.detect(frame, frame_id)

            # 2) Tracking and counting
            frame_tracks = tracker.update(frame_detections, frame.shape[1])
            if event_log is not None:
                event_log.write(frame_tracks.events)

            # 3) Visualization
            shown = draw_tracks_and_counts(
                frame,
                frame_tracks,
                line_position=config.tracking.line_position,
                mirror=config.video.mirror,
            )
            cv2.imshow(WINDOW_TITLE, shown)

            key = cv2.waitKey(1) & 0xFF
            if key == 27 or key == ord("q"):  # ESC or q
                break

            ret, frame = cap.read()

        counts = tracker.counts
        logger.info("Stopped after %d frames: %d entered, %d exited", frame_id, counts.enter_count, counts.exit_count)
    finally:
        if detector is not None:
            detector.close()
        cap.release()
        cv2.destroyAllWindows()


def build_config(args: argparse.Namespace) -> PipelineConfig:
    cfg = PipelineConfig()

    if args.video is not None:
        # If argument is a digit, treat it as camera index; else as path
        cfg.video.source = int(args.video) if args.video.isdigit() else args.video
    if args.backend is not None:
        cfg.detection.backend = args.backend
    if args.no_mirror:
        cfg.video.mirror = False
    if args.no_event_log:
        cfg.logging.log_events = False
    cfg.logging.level = args.log_level

    # rebuild so the values are validated
    cfg.tracking = TrackingConfig(
        proximity_threshold=args.proximity if args.proximity is not None else cfg.tracking.proximity_threshold,
        max_miss_frames=args.max_miss if args.max_miss is not None else cfg.tracking.max_miss_frames,
        line_position=args.line if args.line is not None else cfg.tracking.line_position,
    )
    return cfg


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Count faces crossing a vertical line (left to right = enter)")
    parser.add_argument(
        "--video",
        type=str,
        default=None,
        help="Video file path or camera index (e.g. 0 for default webcam)",
    )
    parser.add_argument("--backend", choices=["mediapipe", "yolo", "dummy"], default=None,
                        help="Face detector backend")
    parser.add_argument("--proximity", type=float, default=None,
                        help="Max center distance in pixels to keep the same track")
    parser.add_argument("--max-miss", type=int, default=None,
                        help="Frames a track survives without a detection")
    parser.add_argument("--line", type=float, default=None,
                        help="Line position as a fraction of frame width")
    parser.add_argument("--no-mirror", action="store_true", help="Do not flip the display")
    parser.add_argument("--no-event-log", action="store_true", help="Do not write crossings to CSV")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        cfg = build_config(args)
    except ValueError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    run_demo(cfg)


if __name__ == "__main__":
    main()
