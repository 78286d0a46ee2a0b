# Core data structures (boxes, detections, tracks, counts)

from dataclasses import dataclass, field
from enum import Enum
from typing import List


# box coordinates
@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned bounding box in detector pixel coordinates (unmirrored).
    (origin_x, origin_y) = top-left corner.
    """
    origin_x: float
    origin_y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.origin_x + self.width

    @property
    def y2(self) -> float:
        return self.origin_y + self.height

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        return cls(origin_x=x1, origin_y=y1, width=x2 - x1, height=y2 - y1)


@dataclass(frozen=True)
class Detection:
    """
    Single face found by the detector. Carries no identity across frames.
    """
    box: BoundingBox
    score: float = 1.0


@dataclass
class FrameDetections:
    """
    All detections for a single frame.
    """
    frame_id: int
    detections: List[Detection]


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Track:
    """
    A face followed across frames.

    Snapshots are immutable; the tracker builds a new Track every frame.
    center_x is in mirrored (as-displayed) coordinates, box is the last
    detector box and is kept for drawing only.
    """
    track_id: int
    center_x: float
    side: Side
    box: BoundingBox
    entered: bool = False   # L -> R crossing already counted
    exited: bool = False    # R -> L crossing already counted
    missed_frames: int = 0  # consecutive frames without a matching detection

    @property
    def is_active(self) -> bool:
        return self.missed_frames == 0


@dataclass(frozen=True)
class CrossingEvent:
    """
    One counted crossing of the reference line.
    direction is "enter" (left to right) or "exit" (right to left).
    """
    frame_id: int
    track_id: int
    direction: str
    center_x: float


@dataclass
class CountingState:
    """
    Running totals owned by a single counter instance.
    """
    enter_count: int = 0
    exit_count: int = 0


@dataclass
class FrameTracks:
    """
    All live tracks after one tracker update, plus the running totals.
    """
    frame_id: int
    tracks: List[Track]
    enter_count: int = 0
    exit_count: int = 0
    events: List[CrossingEvent] = field(default_factory=list)

    @property
    def active_count(self) -> int:
        return sum(1 for t in self.tracks if t.is_active)

    @property
    def tracked_count(self) -> int:
        return len(self.tracks)
