# Drawing the mirrored frame, reference line, face boxes and counts

import cv2
import numpy as np

from face_counter.data_types import BoundingBox, FrameTracks
from face_counter.geometry import mirrored_origin_x

# BGR colors
ACTIVE_COLOR = (246, 130, 59)   # bright blue, matched this frame
GHOST_COLOR = (128, 114, 107)   # gray, drawn half transparent
LINE_COLOR = (0, 255, 255)      # yellow
TEXT_COLOR = (255, 255, 255)
ERROR_BG = (28, 28, 185)
STATUS_BG = (39, 24, 17)

BOX_THICKNESS = 4
BOX_RADIUS = 12
DASH, GAP = 10, 5


def draw_dashed_vline(frame: np.ndarray, x: int, color=LINE_COLOR, thickness: int = 3) -> None:
    h = frame.shape[0]
    for y in range(0, h, DASH + GAP):
        # filled rectangles: thick cv2.line caps would close the gaps
        half = thickness // 2
        cv2.rectangle(frame, (x - half, y), (x + half, min(y + DASH - 1, h - 1)), color, -1)


def draw_rounded_box(frame: np.ndarray, x1: int, y1: int, x2: int, y2: int, color, thickness: int = BOX_THICKNESS, radius: int = BOX_RADIUS) -> None:
    r = max(0, min(radius, (x2 - x1) // 2, (y2 - y1) // 2))
    if r == 0:
        cv2.rectangle(frame, (x1, y1), (x2, y2), color, thickness)
        return

    # edges
    cv2.line(frame, (x1 + r, y1), (x2 - r, y1), color, thickness)
    cv2.line(frame, (x2, y1 + r), (x2, y2 - r), color, thickness)
    cv2.line(frame, (x1 + r, y2), (x2 - r, y2), color, thickness)
    cv2.line(frame, (x1, y1 + r), (x1, y2 - r), color, thickness)
    # corners
    cv2.ellipse(frame, (x1 + r, y1 + r), (r, r), 0, 180, 270, color, thickness)
    cv2.ellipse(frame, (x2 - r, y1 + r), (r, r), 0, 270, 360, color, thickness)
    cv2.ellipse(frame, (x2 - r, y2 - r), (r, r), 0, 0, 90, color, thickness)
    cv2.ellipse(frame, (x1 + r, y2 - r), (r, r), 0, 90, 180, color, thickness)


def _display_rect(box: BoundingBox, frame_width: int, mirror: bool):
    x1 = int(mirrored_origin_x(box, frame_width) if mirror else box.origin_x)
    y1 = int(box.origin_y)
    return x1, y1, int(x1 + box.width), int(y1 + box.height)


def draw_status(frame: np.ndarray, text: str, is_error: bool = False) -> np.ndarray:
    """
    Draw a status banner across the bottom of the frame (loading, errors).
    """
    h, w = frame.shape[:2]
    cv2.rectangle(frame, (0, h - 36), (w, h), ERROR_BG if is_error else STATUS_BG, -1)
    cv2.putText(frame, text, (10, h - 12), cv2.FONT_HERSHEY_SIMPLEX, 0.6, TEXT_COLOR, 1, cv2.LINE_AA)
    return frame


def draw_tracks_and_counts(
    frame: np.ndarray,
    frame_tracks: FrameTracks,
    line_position: float = 0.5,
    mirror: bool = True,
) -> np.ndarray:
    """
    Draw the reference line, every tracked face and the enter/exit totals.

    frame: numpy array (BGR), as captured (unmirrored)
    frame_tracks: output of the tracker for this frame
    line_position: float in [0,1], horizontal position of the line in
                   mirrored (as-displayed) space
    mirror: flip the frame horizontally before drawing

    Returns the frame that was drawn on (a flipped copy when mirror is set).
    """
    h, w = frame.shape[:2]
    if mirror:
        frame = cv2.flip(frame, 1)

    # ----- Draw center line -----
    line_x = line_position * w if mirror else (1.0 - line_position) * w
    draw_dashed_vline(frame, int(line_x))

    # ----- Draw tracks (ghosts first, at 50% opacity) -----
    ghosts = [t for t in frame_tracks.tracks if not t.is_active]
    if ghosts:
        ghost_layer = frame.copy()
        for track in ghosts:
            x1, y1, x2, y2 = _display_rect(track.box, w, mirror)
            draw_rounded_box(ghost_layer, x1, y1, x2, y2, GHOST_COLOR)
        frame = cv2.addWeighted(ghost_layer, 0.5, frame, 0.5, 0)

    for track in frame_tracks.tracks:
        if not track.is_active:
            continue
        x1, y1, x2, y2 = _display_rect(track.box, w, mirror)
        draw_rounded_box(frame, x1, y1, x2, y2, ACTIVE_COLOR)
        cv2.putText(frame, f"#{track.track_id}", (x1, max(0, y1 - 8)),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, ACTIVE_COLOR, 1, cv2.LINE_AA)

    # ----- Draw counts -----
    cv2.putText(frame, f"Enter: {frame_tracks.enter_count}", (10, 25),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 200, 0), 2, cv2.LINE_AA)
    cv2.putText(frame, f"Exit: {frame_tracks.exit_count}", (10, 55),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 220), 2, cv2.LINE_AA)

    status = f"{frame_tracks.active_count} detected ({frame_tracks.tracked_count} tracked)"
    cv2.putText(frame, status, (10, 85),
                cv2.FONT_HERSHEY_SIMPLEX, 0.6, TEXT_COLOR, 1, cv2.LINE_AA)

    return frame
