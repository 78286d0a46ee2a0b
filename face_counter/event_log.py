import csv
from datetime import datetime
from pathlib import Path
from typing import Iterable, Union

from face_counter.data_types import CrossingEvent

FIELDS = ["timestamp", "frame_id", "track_id", "direction", "center_x"]


class CsvEventLog:
    """
    Appends counted crossings to a CSV file, one row per event.
    The header is written when the file is created.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def write(self, events: Iterable[CrossingEvent]) -> int:
        events = list(events)
        if not events:
            return 0

        self.path.parent.mkdir(parents=True, exist_ok=True)
        new_file = not self.path.exists()
        now = datetime.now().isoformat(timespec="seconds")

        with open(self.path, "a", newline="") as f:
            writer = csv.writer(f)
            if new_file:
                writer.writerow(FIELDS)
            for ev in events:
                writer.writerow([now, ev.frame_id, ev.track_id, ev.direction, round(ev.center_x, 1)])

        return len(events)
