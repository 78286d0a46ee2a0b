"""
Shared pytest fixtures for face_counter tests.
"""
import pytest

from face_counter.data_types import BoundingBox, Detection
from face_counter.tracker import ProximityTracker

FRAME_WIDTH = 1000
LINE_X = FRAME_WIDTH * 0.5
BOX_SIZE = 40


def box_at(center_x: float, frame_width: float = FRAME_WIDTH, size: float = BOX_SIZE, y: float = 100) -> BoundingBox:
    """Detector-space box whose mirrored center lands on center_x."""
    return BoundingBox(origin_x=frame_width - center_x - size / 2, origin_y=y, width=size, height=size)


def dets_at(*centers: float):
    return [Detection(box=box_at(cx)) for cx in centers]


@pytest.fixture
def tracker():
    """Tracker with the default settings (100 px, 5 frames, line at 0.5)."""
    return ProximityTracker()


@pytest.fixture
def step(tracker):
    """Feed one frame of mirrored centers to the tracker."""
    def _step(*centers):
        return tracker.update(dets_at(*centers), FRAME_WIDTH)
    return _step
