"""Chord label file export (tab-separated start, end, label)."""

from pathlib import Path
from typing import List, Optional

from ..core import Timeline


class LabExporter:
    """Write timelines as ``.lab`` files, one ``start<TAB>end<TAB>label`` line per chord."""

    def __init__(self, precision: int = 3):
        self.precision = precision

    def to_lines(self, timeline: Timeline, end_time: Optional[float] = None) -> List[str]:
        """
        Format a timeline as lab lines.

        Args:
            timeline: Chord timeline
            end_time: End of the last chord (its own start if omitted)
        """
        lines = []
        for event, duration in zip(timeline, timeline.durations(end_time)):
            start = event.time
            end = start + duration
            lines.append(f"{start:.{self.precision}f}\t{end:.{self.precision}f}\t{event.label}")
        return lines

    def export(
        self,
        timeline: Timeline,
        output_path: str,
        end_time: Optional[float] = None,
    ) -> None:
        """Write a timeline to a lab file."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = self.to_lines(timeline, end_time)
        path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
