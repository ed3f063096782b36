"""Output range tracking and navigation.

Every put() that appends lines registers one tagged range with the host.
Navigation rebuilds the partition of the whole buffer from those ranges on
each query:

    lines  1-2   gap      (input)
    lines  3-5   output
    lines  6-8   gap
    line   9     output
    lines 10-12  gap

The host may hand marks back in creation order or any other order, so they
are always sorted before the partition is built.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from neorepl.core.types import Highlight, OutputRange, Segment

if TYPE_CHECKING:
    from neorepl.core.host import Host

logger = logging.getLogger(__name__)

# Mark ids are pre-incremented from this value, so the first id handed out
# is 2 and 0 is never used.
FIRST_MARK_ID = 1


class OutputRanges:
    """Output ranges of one REPL buffer, stored as host marks."""

    def __init__(self, host: Host, bufnr: int) -> None:
        self.host = host
        self.bufnr = bufnr
        self.mark_id = FIRST_MARK_ID

    def put(self, start: int, end: int, highlight: Highlight) -> int:
        """Register lines start..end (1-based, inclusive) as output.

        Returns:
            The id of the new range.
        """
        if end < start:
            raise ValueError(f"empty range {start}..{end}")
        self.mark_id += 1
        self.host.set_extmark(self.bufnr, self.mark_id, start - 1, end, highlight.value)
        return self.mark_id

    def clear(self) -> None:
        self.mark_id = FIRST_MARK_ID
        self.host.clear_extmarks(self.bufnr)

    def ranges(self) -> list[OutputRange]:
        """Registered ranges in ascending line order."""
        result = [
            OutputRange(id=m.id, start=m.start_row + 1, end=m.end_row, highlight=m.hl_group)
            for m in self.host.get_extmarks(self.bufnr)
            if m.end_row > m.start_row
        ]
        result.sort(key=lambda r: (r.start, r.end))
        return result

    def highlight_at(self, line: int) -> str | None:
        """Highlight group covering line, None for input lines."""
        for r in self.ranges():
            if r.start <= line <= r.end:
                return r.highlight
        return None

    def segments(self, line_count: int | None = None) -> list[Segment]:
        """Partition lines 1..line_count into alternating gaps and outputs."""
        if line_count is None:
            line_count = self.host.line_count(self.bufnr)
        return partition(self.ranges(), line_count)

    def goto(self, backward: bool, to_end: bool, count: int, current_line: int) -> int:
        """Line to jump to from current_line.

        Args:
            backward: Move towards line 1.
            to_end: Land on the last line of the target segment.
            count: Number of segments to move.
            current_line: Line the cursor is on.
        """
        return goto_segment(self.segments(), backward, to_end, count, current_line)


def partition(ranges: list[OutputRange], line_count: int) -> list[Segment]:
    """Build the ordered buffer partition from sorted output ranges.

    Gaps are only emitted when they hold at least one line. Ranges that run
    into an earlier one are clipped rather than allowed to overlap.
    """
    segments: list[Segment] = []
    lnum = 1
    for r in ranges:
        start = max(r.start, lnum)
        end = min(r.end, line_count)
        if end < start:
            continue
        if start > lnum:
            segments.append(Segment(lnum, start - 1))
        segments.append(Segment(start, end, output=True))
        lnum = end + 1
    if line_count >= lnum:
        segments.append(Segment(lnum, line_count))
    return segments


def goto_segment(
    segments: list[Segment],
    backward: bool,
    to_end: bool,
    count: int,
    current_line: int,
) -> int:
    """Apply the vi-style section motion to a partition.

    Moving backward to a start, or forward to an end, first lands on the
    edge of the segment the cursor is in when it is not already there; that
    consumes one count. Remaining counts step whole segments, clamped to the
    first and last segment.
    """
    count = max(count, 1)
    for i, seg in enumerate(segments):
        if not seg.start <= current_line <= seg.end:
            continue

        if backward and not to_end and current_line > seg.start:
            if count == 1:
                return seg.start
            count -= 1
        elif not backward and to_end and current_line < seg.end:
            if count == 1:
                return seg.end
            count -= 1

        idx = i - count if backward else i + count
        target = segments[min(max(idx, 0), len(segments) - 1)]
        return target.end if to_end else target.start

    logger.debug("goto_segment: line %d outside partition", current_line)
    return current_line
