import logging
from dataclasses import replace
from typing import Optional, Tuple

from face_counter.data_types import CountingState, CrossingEvent, Side, Track
from face_counter.geometry import side_of

logger = logging.getLogger(__name__)

ENTER = "enter"
EXIT = "exit"


class LineCounter:
    """
    Directional crossing counter for a VERTICAL reference line.

    Interpretation:
      - line_position is horizontal, in mirrored (as-displayed) space:
          0.0 = left edge, 1.0 = right edge
      - LEFT -> RIGHT is an entry, RIGHT -> LEFT is an exit.

    Behavior:
      - Owns its CountingState, so one counter per stream.
      - Compares the side stored on the track (previous matched frame)
        against the side of the track's new center.
      - Track.entered / Track.exited make each direction count at most
        once per track, however often it oscillates across the line.
    """

    def __init__(self, line_position: float = 0.5):
        # relative horizontal position of the line in [0, 1]
        self.line_x_rel = line_position
        self.state = CountingState()

    def line_x(self, frame_width: float) -> float:
        return frame_width * self.line_x_rel

    def side_of(self, center_x: float, frame_width: float) -> Side:
        return side_of(center_x, self.line_x(frame_width))

    def evaluate(
        self,
        track: Track,
        frame_width: float,
        frame_id: int = 0,
    ) -> Tuple[Track, Optional[CrossingEvent]]:
        """
        Apply the crossing rule to a freshly matched track.

        track: matched track whose center_x is already the new position
               but whose side is still the side before this frame
        frame_width: width of the frame in pixels

        Returns:
            The track with its side updated (and entered/exited set if a
            count fired), plus the CrossingEvent or None.
        """
        current_side = self.side_of(track.center_x, frame_width)
        if current_side == track.side:
            return track, None

        event = None
        if track.side == Side.LEFT and current_side == Side.RIGHT and not track.entered:
            self.state.enter_count += 1
            track = replace(track, entered=True)
            event = CrossingEvent(frame_id, track.track_id, ENTER, track.center_x)
        elif track.side == Side.RIGHT and current_side == Side.LEFT and not track.exited:
            self.state.exit_count += 1
            track = replace(track, exited=True)
            event = CrossingEvent(frame_id, track.track_id, EXIT, track.center_x)

        if event is not None:
            logger.info(
                "Track %d %s (enter=%d, exit=%d)",
                track.track_id,
                "entered" if event.direction == ENTER else "exited",
                self.state.enter_count,
                self.state.exit_count,
            )
        else:
            logger.debug("Track %d re-crossed to %s, already counted", track.track_id, current_side.value)

        # side always follows the latest matched position
        return replace(track, side=current_side), event

    def reset(self) -> None:
        self.state = CountingState()
