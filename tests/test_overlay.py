"""
Unit tests for face_counter.overlay
"""
import numpy as np

from face_counter.data_types import BoundingBox, FrameTracks, Side, Track
from face_counter.overlay import (
    ACTIVE_COLOR,
    LINE_COLOR,
    draw_rounded_box,
    draw_status,
    draw_tracks_and_counts,
)

W, H = 400, 200


def blank():
    return np.zeros((H, W, 3), dtype=np.uint8)


def frame_tracks(*tracks):
    return FrameTracks(frame_id=1, tracks=list(tracks), enter_count=2, exit_count=1)


ACTIVE = Track(track_id=0, center_x=320, side=Side.RIGHT,
               box=BoundingBox(origin_x=50, origin_y=100, width=60, height=60))
GHOST = Track(track_id=1, center_x=80, side=Side.LEFT,
              box=BoundingBox(origin_x=290, origin_y=100, width=60, height=60), missed_frames=2)


class TestDrawTracks:

    def test_mirror_does_not_touch_input(self):
        frame = blank()
        out = draw_tracks_and_counts(frame, frame_tracks(ACTIVE))
        assert out.shape == frame.shape
        assert not frame.any()
        assert out.any()

    def test_line_is_drawn_at_position(self):
        out = draw_tracks_and_counts(blank(), frame_tracks(), line_position=0.5)
        assert tuple(out[2, 200]) == LINE_COLOR
        # gap between dashes
        assert tuple(out[12, 200]) != LINE_COLOR

    def test_active_box_at_mirrored_position(self):
        out = draw_tracks_and_counts(blank(), frame_tracks(ACTIVE))
        # mirrored origin: 400 - 50 - 60 = 290, top edge at y=100
        assert tuple(out[100, 320]) == ACTIVE_COLOR
        assert tuple(out[100, 80]) == (0, 0, 0)

    def test_unmirrored_box_at_detector_position(self):
        out = draw_tracks_and_counts(blank(), frame_tracks(ACTIVE), mirror=False)
        assert tuple(out[100, 80]) == ACTIVE_COLOR

    def test_ghost_is_faded(self):
        out = draw_tracks_and_counts(blank(), frame_tracks(GHOST))
        pixel = out[100, 80]
        assert pixel.any()
        assert tuple(pixel) != ACTIVE_COLOR
        assert pixel.max() < 128

    def test_line_is_dashed_down_the_frame(self):
        out = draw_tracks_and_counts(blank(), frame_tracks(), line_position=0.5)
        column = [tuple(out[y, 200]) == LINE_COLOR for y in range(0, 45)]
        # 10 px dash, 5 px gap
        assert column == ([True] * 10 + [False] * 5) * 3
        # dash is 3 px wide
        assert tuple(out[5, 199]) == LINE_COLOR
        assert tuple(out[5, 201]) == LINE_COLOR
        assert tuple(out[5, 202]) != LINE_COLOR

    def test_empty_frame_tracks(self):
        out = draw_tracks_and_counts(blank(), frame_tracks())
        assert out.shape == (H, W, 3)


class TestHelpers:

    def test_rounded_box_leaves_corners_empty(self):
        frame = blank()
        draw_rounded_box(frame, 100, 50, 200, 150, (255, 255, 255), thickness=2, radius=12)
        assert tuple(frame[50, 150]) == (255, 255, 255)
        assert tuple(frame[50, 100]) == (0, 0, 0)

    def test_tiny_box_falls_back_to_rectangle(self):
        frame = blank()
        draw_rounded_box(frame, 10, 10, 10, 10, (255, 255, 255), thickness=1)
        assert tuple(frame[10, 10]) == (255, 255, 255)

    def test_status_banner(self):
        frame = draw_status(blank(), "Loading face detection model...")
        assert frame[H - 2].any()
        err = draw_status(blank(), "Camera error", is_error=True)
        assert tuple(err[H - 2, W - 2]) != tuple(frame[H - 2, W - 2])
