"""
Playback Module for CPU Scheduling Simulator

This module replays a finished simulation one time unit at a time, the way
a classroom visualizer animates a Gantt chart: at every step it tells who
holds the CPU, why, and what state every process is in.

A PlaybackSession is an explicit value owning its own cursor, speed and
pause flag. Several sessions can replay the same result independently;
none of them modifies the result.

Author: Student
Date: December 2024
"""

from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Callable
import logging
import threading

from config import PlaybackConfig, DEFAULT_PLAYBACK_CONFIG
from timeline import Timeline, Occupant
from validators import ConfigurationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackStep:
    """
    One time unit of a replayed timeline.

    Attributes:
        time: Start of the unit
        who: Idle or Running(pid)
        queue_id: Queue the process was served from, if any
        reason: Explanation of the scheduling decision
    """
    time: int
    who: Occupant
    queue_id: Optional[int] = None
    reason: str = ""

    @property
    def label(self) -> str:
        return str(self.who)


def expand_timeline(timeline: Timeline) -> List[PlaybackStep]:
    """
    Expand timeline segments into one step per time unit.

    Args:
        timeline: Timeline of a finished simulation

    Returns:
        Steps for t = 0 .. end_time - 1
    """
    steps = []
    for segment in timeline:
        for t in range(segment.start_time, segment.end_time):
            steps.append(PlaybackStep(t, segment.who, segment.queue_id, segment.reason))
    return steps


class PlaybackSession:
    """
    Step-by-step replay of a SimulationResult.

    Usage:
        session = PlaybackSession(result)
        while not session.is_finished:
            step = session.advance()
            print(step.time, step.label, session.process_states())
        # or timed:
        session.run(on_step=print)
    """

    def __init__(self, result, config: PlaybackConfig = None):
        """
        Initialize a playback session.

        Args:
            result: SimulationResult to replay
            config: Playback configuration (speeds and delays)
        """
        self.result = result
        self.config = config or DEFAULT_PLAYBACK_CONFIG
        self.steps: List[PlaybackStep] = expand_timeline(result.timeline)
        self.cursor = 0
        self.speed = self.config.default_speed
        self.paused = False
        self.running = False

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # =========================================================================
    # Cursor control
    # =========================================================================

    @property
    def current_time(self) -> int:
        return self.cursor

    @property
    def is_finished(self) -> bool:
        return self.cursor >= len(self.steps)

    @property
    def current_step(self) -> Optional[PlaybackStep]:
        """Most recently shown step, or None before the first advance."""
        if self.cursor == 0:
            return None
        return self.steps[self.cursor - 1]

    def advance(self) -> Optional[PlaybackStep]:
        """
        Show the next time unit.

        Returns:
            The step just shown, or None if playback already finished
        """
        if self.is_finished:
            return None
        step = self.steps[self.cursor]
        self.cursor += 1
        return step

    def toggle_pause(self) -> bool:
        """Pause or resume; returns the new paused flag."""
        self.paused = not self.paused
        logger.debug(f"Playback {'paused' if self.paused else 'resumed'} at t={self.cursor}")
        return self.paused

    def set_speed(self, speed: int) -> None:
        """
        Change playback speed.

        Args:
            speed: Speed level defined in PlaybackConfig (1 slowest .. 5 fastest)

        Raises:
            ConfigurationError: If the level is not defined
        """
        if speed not in self.config.step_delays_ms:
            raise ConfigurationError(
                f"speed must be one of {sorted(self.config.step_delays_ms)}",
                "speed", speed
            )
        self.speed = speed

    @property
    def speed_label(self) -> str:
        return self.config.speed_labels.get(self.speed, f"{self.speed}")

    @property
    def delay_seconds(self) -> float:
        """Delay between steps at the current speed."""
        return self.config.get_delay(self.speed)

    def reset(self) -> None:
        """Rewind to t=0 and clear the pause flag."""
        self.cursor = 0
        self.paused = False

    # =========================================================================
    # State at the cursor
    # =========================================================================

    def process_states(self) -> List[Dict[str, Any]]:
        """
        State of every process at the cursor.

        A process is 'waiting' before its arrival, 'completed' once its
        finish time has been reached, 'running' if it holds the CPU in the
        step just shown, and 'ready' otherwise.

        Returns:
            One dict per process (pid order) with status, remaining and progress
        """
        time = self.cursor
        shown = self.current_step
        executed: Dict[int, int] = {}
        for step in self.steps[:time]:
            pid = getattr(step.who, 'pid', None)
            if pid is not None:
                executed[pid] = executed.get(pid, 0) + 1

        states = []
        for process in self.result.processes:
            done = executed.get(process.pid, 0)
            if process.finish_time is not None and process.finish_time <= time:
                status = 'completed'
            elif process.arrival_time > time:
                status = 'waiting'
            elif shown is not None and getattr(shown.who, 'pid', None) == process.pid:
                status = 'running'
            else:
                status = 'ready'
            states.append({
                'pid': process.pid,
                'status': status,
                'remaining_time': process.burst_time - done,
                'progress': done / process.burst_time,
            })
        return states

    # =========================================================================
    # Timed playback
    # =========================================================================

    def run(self, on_step: Callable[[PlaybackStep], None] = None,
            sleep: Callable[[float], Any] = None) -> int:
        """
        Play until finished or stopped, blocking the caller.

        Args:
            on_step: Called with every step shown
            sleep: Delay function (defaults to an interruptible wait)

        Returns:
            Number of steps shown
        """
        self._stop_event.clear()
        return self._play(on_step, sleep)

    def _play(self, on_step, sleep) -> int:
        sleep = sleep or self._stop_event.wait
        shown = 0
        self.running = True
        try:
            while not self.is_finished and not self._stop_event.is_set():
                if self.paused:
                    sleep(self.delay_seconds)
                    continue
                step = self.advance()
                shown += 1
                if on_step:
                    on_step(step)
                if not self.is_finished:
                    sleep(self.delay_seconds)
        finally:
            self.running = False
        return shown

    def run_async(self, on_step: Callable[[PlaybackStep], None] = None,
                  on_complete: Callable[[], None] = None,
                  sleep: Callable[[float], Any] = None) -> threading.Thread:
        """
        Play in a background thread.

        Args:
            on_step: Called with every step shown
            on_complete: Called when playback ends
            sleep: Delay function (defaults to an interruptible wait)

        Returns:
            The started thread
        """
        self._stop_event.clear()

        def _run():
            self._play(on_step, sleep)
            if on_complete:
                on_complete()

        self._thread = threading.Thread(target=_run, daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop timed playback and wait for the background thread."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
