# Conversions from detector space to the mirrored, as-displayed frame

from face_counter.data_types import BoundingBox, Side


def mirrored_origin_x(box: BoundingBox, frame_width: float) -> float:
    """Left edge of the box once the frame is flipped horizontally."""
    return frame_width - box.origin_x - box.width


def mirrored_center_x(box: BoundingBox, frame_width: float) -> float:
    """
    Horizontal center of the box as it appears on the mirrored display.

    All distance and side computations use this value, both when matching
    existing tracks and when seeding new ones.
    frame_width must be positive; it is not checked here.
    """
    return mirrored_origin_x(box, frame_width) + box.width / 2


def side_of(center_x: float, line_x: float) -> Side:
    # a center exactly on the line counts as right
    return Side.LEFT if center_x < line_x else Side.RIGHT
