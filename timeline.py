"""
Timeline Module for CPU Scheduling Simulator

This module records who occupied the CPU over time. A timeline is the
data behind a Gantt chart: an ordered list of segments, each saying that
the CPU was idle or running one process between two instants.

OS Concepts:
- Gantt charts as the standard picture of a CPU schedule
- Context switches appear as boundaries between segments
- Idle periods when the ready queue is empty

Author: Student
Date: December 2024
"""

from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Iterator, Union

from validators import SimulationError


# =============================================================================
# CPU OCCUPANT
# =============================================================================

@dataclass(frozen=True)
class Idle:
    """The CPU had nothing to run."""

    def __str__(self) -> str:
        return "Idle"


@dataclass(frozen=True)
class Running:
    """The CPU was running process `pid`."""
    pid: int

    def __str__(self) -> str:
        return f"P{self.pid}"


IDLE = Idle()

Occupant = Union[Idle, Running]


# =============================================================================
# TIMELINE SEGMENT
# =============================================================================

@dataclass
class TimelineSegment:
    """
    One contiguous stretch of CPU time with a single occupant.

    Attributes:
        who: Idle or Running(pid)
        start_time: First instant of the segment
        end_time: Instant the segment ends (exclusive, end > start)
        queue_id: 1-based queue the process was served from (queue-aware policies only)
        reason: Human-readable explanation of the scheduling decision
    """
    who: Occupant
    start_time: int
    end_time: int
    queue_id: Optional[int] = None
    reason: str = ""

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return isinstance(self.who, Idle)

    @property
    def pid(self) -> Optional[int]:
        """Process id, or None for idle segments."""
        return None if self.is_idle else self.who.pid

    @property
    def label(self) -> str:
        return str(self.who)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert segment to dictionary for serialization.

        Idle segments use the string 'idle' as process id.
        """
        return {
            'process_id': 'idle' if self.is_idle else self.who.pid,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'queue_id': self.queue_id,
            'reason': self.reason,
        }


# =============================================================================
# TIMELINE
# =============================================================================

class Timeline:
    """
    Ordered, contiguous sequence of TimelineSegments.

    Segments are only ever appended at the current end. An append that
    continues the last segment with the same occupant and queue extends it
    instead of creating a new segment, so a process that keeps the CPU for
    several ticks shows up as one bar. The merged segment keeps the reason
    of the decision that started it.
    """

    def __init__(self):
        self._segments: List[TimelineSegment] = []

    def append(self, who: Occupant, start_time: int, end_time: int,
               queue_id: Optional[int] = None, reason: str = "") -> TimelineSegment:
        """
        Append a segment or extend the last one.

        Args:
            who: Idle or Running(pid)
            start_time: Must equal the current end of the timeline (0 if empty)
            end_time: Must be greater than start_time
            queue_id: Queue the process ran from, if any
            reason: Explanation of the scheduling decision

        Returns:
            The segment that now covers [start_time, end_time)

        Raises:
            SimulationError: On an empty or non-contiguous segment
        """
        if end_time <= start_time:
            raise SimulationError(
                f"Segment for {who} must have positive duration ({start_time} -> {end_time})"
            )
        if start_time != self.end_time:
            raise SimulationError(
                f"Segment for {who} starts at {start_time} but timeline ends at {self.end_time}"
            )

        if self._segments:
            last = self._segments[-1]
            if last.who == who and last.queue_id == queue_id:
                last.end_time = end_time
                return last

        segment = TimelineSegment(who, start_time, end_time, queue_id, reason)
        self._segments.append(segment)
        return segment

    def __iter__(self) -> Iterator[TimelineSegment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index):
        return self._segments[index]

    @property
    def segments(self) -> List[TimelineSegment]:
        return list(self._segments)

    @property
    def end_time(self) -> int:
        """End of the last segment (0 for an empty timeline)."""
        return self._segments[-1].end_time if self._segments else 0

    @property
    def has_queues(self) -> bool:
        """True if any segment was tagged with a queue id."""
        return any(s.queue_id is not None for s in self._segments)

    def queue_ids(self) -> List[int]:
        """Sorted distinct queue ids used in the timeline."""
        return sorted({s.queue_id for s in self._segments if s.queue_id is not None})

    def busy_time(self) -> int:
        """Total time the CPU ran a process."""
        return sum(s.duration for s in self._segments if not s.is_idle)

    def idle_time(self) -> int:
        return sum(s.duration for s in self._segments if s.is_idle)

    def busy_time_for(self, pid: int) -> int:
        """Total CPU time given to one process."""
        return sum(s.duration for s in self.segments_for(pid))

    def segments_for(self, pid: int) -> List[TimelineSegment]:
        return [s for s in self._segments if s.pid == pid]

    def occupant_at(self, time: int) -> Optional[TimelineSegment]:
        """Segment covering instant `time`, or None if outside the timeline."""
        for segment in self._segments:
            if segment.start_time <= time < segment.end_time:
                return segment
        return None

    def count_context_switches(self) -> int:
        """
        Number of times the CPU switched from one process to another.

        Idle gaps are not counted as switches; a process resumed after an
        idle gap by a different process still counts as one switch.
        """
        switches = 0
        previous_pid = None
        for segment in self._segments:
            if segment.is_idle:
                continue
            if previous_pid is not None and segment.pid != previous_pid:
                switches += 1
            previous_pid = segment.pid
        return switches

    def to_list(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self._segments]

    def __repr__(self) -> str:
        return f"Timeline({' | '.join(f'{s.label}[{s.start_time}-{s.end_time}]' for s in self._segments)})"
