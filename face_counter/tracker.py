import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import List, Optional, Sequence, Union

from face_counter.config import TrackingConfig
from face_counter.counter import LineCounter
from face_counter.data_types import (
    BoundingBox,
    CountingState,
    CrossingEvent,
    Detection,
    FrameDetections,
    FrameTracks,
    Track,
)
from face_counter.geometry import mirrored_center_x

logger = logging.getLogger(__name__)

DetectionsInput = Union[FrameDetections, Sequence[Detection], Sequence[BoundingBox]]


class BaseTracker(ABC):
    """
    Abstract interface for all trackers.
    """

    @abstractmethod
    def update(self, detections: DetectionsInput, frame_width: float) -> FrameTracks:
        """
        Update tracker with detections for current frame.
        Must return FrameTracks.
        """
        raise NotImplementedError


def _as_detections(detections: DetectionsInput) -> List[Detection]:
    if isinstance(detections, FrameDetections):
        detections = detections.detections
    return [d if isinstance(d, Detection) else Detection(box=d) for d in detections]


class ProximityTracker(BaseTracker):
    """
    Greedy nearest-center tracker with line crossing counts.

    Logic:
      - Existing tracks are visited in ascending id order. Each takes the
        closest still-unmatched detection (horizontal distance between
        mirrored centers) if that distance is < proximity_threshold.
        A taken detection leaves the pool, so earlier ids win ties.
      - Matched tracks move to the new center and go through the
        LineCounter crossing rule.
      - Unmatched tracks keep their last position ("ghosted") until
        missed_frames exceeds max_miss_frames, then they are dropped.
      - Leftover detections become new tracks. A new track never counts
        on the frame it is created.

    The track list is rebuilt on every call and swapped in at the end;
    ids are never reused, even after reset().
    """

    def __init__(
        self,
        proximity_threshold: float = 100.0,
        max_miss_frames: int = 5,
        line_position: float = 0.5,
    ):
        # TrackingConfig validates the values
        self.config = TrackingConfig(proximity_threshold, max_miss_frames, line_position)

        self.proximity_threshold = proximity_threshold
        self.max_miss_frames = max_miss_frames
        self.counter = LineCounter(line_position)

        self._tracks: List[Track] = []
        self._next_id: int = 0
        self._frame_id: int = 0

    @classmethod
    def from_config(cls, config: TrackingConfig) -> "ProximityTracker":
        return cls(
            proximity_threshold=config.proximity_threshold,
            max_miss_frames=config.max_miss_frames,
            line_position=config.line_position,
        )

    @property
    def tracks(self) -> List[Track]:
        return list(self._tracks)

    @property
    def counts(self) -> CountingState:
        return CountingState(self.counter.state.enter_count, self.counter.state.exit_count)

    def _find_match(self, track: Track, centers: List[Optional[float]]) -> Optional[int]:
        best_idx = None
        min_distance = float("inf")
        for idx, cx in enumerate(centers):
            if cx is None:
                continue  # already taken this frame
            distance = abs(cx - track.center_x)
            if distance < self.proximity_threshold and distance < min_distance:
                min_distance = distance
                best_idx = idx
        return best_idx

    def update(self, detections: DetectionsInput, frame_width: float) -> FrameTracks:
        """
        Run one frame of association, aging, spawning and counting.

        detections: FrameDetections, or a list of Detection / BoundingBox
        frame_width: width of the frame in pixels, same for every call

        Returns:
            FrameTracks with every surviving track (ascending id), the
            running enter/exit totals and the crossings counted this frame.
        """
        if isinstance(detections, FrameDetections):
            frame_id = detections.frame_id
        else:
            frame_id = self._frame_id + 1
        self._frame_id = frame_id

        dets = _as_detections(detections)
        centers: List[Optional[float]] = [mirrored_center_x(d.box, frame_width) for d in dets]

        next_tracks: List[Track] = []
        events: List[CrossingEvent] = []

        # --- Match existing tracks ---
        for old_track in self._tracks:
            idx = self._find_match(old_track, centers)

            if idx is not None:
                matched = replace(
                    old_track,
                    center_x=centers[idx],
                    box=dets[idx].box,
                    missed_frames=0,
                )
                centers[idx] = None
                matched, event = self.counter.evaluate(matched, frame_width, frame_id)
                if event is not None:
                    events.append(event)
                next_tracks.append(matched)
                continue

            # --- No match: ghost or drop ---
            missed = old_track.missed_frames + 1
            if missed <= self.max_miss_frames:
                next_tracks.append(replace(old_track, missed_frames=missed))
            else:
                logger.debug("Track %d dropped after %d missed frames", old_track.track_id, missed)

        # --- Spawn tracks for leftover detections ---
        for det, cx in zip(dets, centers):
            if cx is None:
                continue
            track = Track(
                track_id=self._next_id,
                center_x=cx,
                side=self.counter.side_of(cx, frame_width),
                box=det.box,
            )
            self._next_id += 1
            next_tracks.append(track)
            logger.debug("Track %d created on the %s side", track.track_id, track.side.value)

        self._tracks = next_tracks

        state = self.counter.state
        return FrameTracks(
            frame_id=frame_id,
            tracks=list(next_tracks),
            enter_count=state.enter_count,
            exit_count=state.exit_count,
            events=events,
        )

    def reset(self) -> None:
        """Forget all tracks and totals. The id sequence keeps counting."""
        self._tracks = []
        self.counter.reset()
