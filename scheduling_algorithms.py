"""
CPU Scheduling Algorithms Module

This module implements the classic CPU scheduling algorithms every OS student
should know. Each algorithm is a policy object: the simulation engine owns the
clock and asks the policy, at every decision point, which process to run next
and for how long.

Algorithms Implemented:
1. FCFS (First Come First Served) - The OG scheduler
2. SJF (Shortest Job First) - Non-preemptive, optimal average waiting time
3. SRTF (Shortest Remaining Time First) - Preemptive SJF
4. Round Robin - Fixed time slices in FIFO order
5. Priority Scheduling - Non-preemptive and preemptive variants
6. Multilevel Queue - Fixed queues, each with its own algorithm
7. MLFQ (Multilevel Feedback Queue) - Demotion on quantum expiry

OS Concepts Demonstrated:
- Preemptive vs Non-preemptive scheduling
- Time quanta and context switches
- Queue-based priority management
- Starvation of low priority queues

Author: Student
Date: December 2024
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any, Tuple, Deque, Sequence
from dataclasses import dataclass
from collections import deque
import logging

from config import (
    SchedulingAlgorithm,
    QueueAlgorithm,
    QueueConfig,
    SimulationConfig,
    DEFAULT_SIMULATION_CONFIG
)
from process import Process
from validators import ConfigValidator, require_positive


logger = logging.getLogger(__name__)


# =============================================================================
# DISPATCH DECISION
# =============================================================================

@dataclass
class Dispatch:
    """
    A scheduling decision: run `process` for up to `run_time` units.

    Attributes:
        process: Process selected to run
        run_time: Maximum time units before the next decision point
        queue_id: 1-based queue the process was taken from (queue-aware policies)
        reason: Human-readable explanation of the decision
    """
    process: Process
    run_time: int
    queue_id: Optional[int] = None
    reason: str = ""


# =============================================================================
# BASE POLICY
# =============================================================================

class SchedulingPolicy(ABC):
    """
    Abstract base class for CPU scheduling policies.

    A policy owns the ready queue(s) of one simulation run:
    - admit() is called once per process when it arrives
    - select() picks the next dispatch from ready processes
    - on_dispatch_complete() lets the policy requeue, demote or drop
      the process after its slice ran

    Policies hold per-run state; create a fresh one (or reset()) for
    every run.
    """

    def __init__(self):
        self.ready: List[Process] = []
        self.dispatch_count = 0
        self.preemptions = 0
        self.quantum_expirations = 0
        self.expired_process: Optional[Process] = None

    @property
    @abstractmethod
    def algorithm_name(self) -> str:
        """Return the algorithm name."""
        pass

    @property
    @abstractmethod
    def is_preemptive(self) -> bool:
        """Whether this policy can take the CPU from an unfinished process."""
        pass

    @abstractmethod
    def select(self, current_time: int, running: Optional[Process] = None) -> Optional[Dispatch]:
        """
        Select the next process to run.

        This is the core scheduling decision - each algorithm
        implements this differently.

        Args:
            current_time: Current simulation time
            running: Process that held the CPU just before this decision, if unfinished

        Returns:
            Dispatch, or None if nothing is ready
        """
        pass

    def admit(self, process: Process, current_time: int) -> None:
        """Add a newly arrived process to the ready queue."""
        process.set_ready()
        self.ready.append(process)

    def has_ready(self) -> bool:
        return bool(self.ready)

    def on_dispatch_complete(self, dispatch: Dispatch, current_time: int) -> None:
        """Drop the process from the ready queue once it has completed."""
        if dispatch.process.is_completed():
            self.ready.remove(dispatch.process)

    def _make_dispatch(self, process: Process, run_time: int, running: Optional[Process],
                       reason: str, queue_id: Optional[int] = None) -> Dispatch:
        """
        Build a Dispatch and update the decision counters.

        Taking the CPU from an unfinished process counts as a preemption,
        unless that process was just rotated out for using up its quantum.
        """
        self.dispatch_count += 1
        expired, self.expired_process = self.expired_process, None
        if running is not None and running is not process and not running.is_completed():
            if running is expired:
                self.quantum_expirations += 1
                reason = f"{reason} P{running.pid} used up its quantum."
            else:
                self.preemptions += 1
                reason = f"{reason} Preempted P{running.pid}."
        return Dispatch(process, run_time, queue_id, reason)

    def get_statistics(self) -> Dict[str, Any]:
        """Get policy statistics."""
        return {
            'algorithm': self.algorithm_name,
            'is_preemptive': self.is_preemptive,
            'queue_size': len(self.ready),
            'dispatches': self.dispatch_count,
            'preemptions': self.preemptions,
            'quantum_expirations': self.quantum_expirations,
        }

    def reset(self):
        """Reset policy state for a new run."""
        self.ready.clear()
        self.dispatch_count = 0
        self.quantum_expirations = 0
        self.expired_process = None
        self.preemptions = 0


class KeyedPolicy(SchedulingPolicy):
    """
    Policy that picks the ready process with the smallest selection key.

    Non-preemptive subclasses run the chosen process to completion;
    preemptive ones run it for one tick and decide again.
    """

    @abstractmethod
    def _selection_key(self, process: Process, running: Optional[Process]) -> Tuple:
        pass

    @abstractmethod
    def _reason(self, process: Process) -> str:
        pass

    def select(self, current_time: int, running: Optional[Process] = None) -> Optional[Dispatch]:
        if not self.ready:
            return None
        process = min(self.ready, key=lambda p: self._selection_key(p, running))
        run_time = 1 if self.is_preemptive else process.remaining_time
        return self._make_dispatch(process, run_time, running, self._reason(process))


# =============================================================================
# FCFS - FIRST COME FIRST SERVED
# =============================================================================

class FCFSPolicy(KeyedPolicy):
    """
    First Come First Served (FCFS) Scheduler

    The OG of schedulers. Whoever comes first gets the CPU first.

    Characteristics:
    - Non-preemptive: Once a process starts, it runs to completion
    - Ties on arrival time go to the process listed first

    Cons:
    - Convoy Effect: Short processes stuck behind long ones
    """

    @property
    def algorithm_name(self) -> str:
        return SchedulingAlgorithm.FCFS.value

    @property
    def is_preemptive(self) -> bool:
        return False  # FCFS never preempts

    def _selection_key(self, process, running):
        return (process.arrival_time, process.input_order)

    def _reason(self, process):
        return f"Selected P{process.pid} because it arrived first (Arrival: {process.arrival_time})."


# =============================================================================
# SJF - SHORTEST JOB FIRST
# =============================================================================

class SJFPolicy(KeyedPolicy):
    """
    Shortest Job First (SJF) Scheduler - Non-preemptive

    Picks the ready process with the smallest total burst time and runs it
    to completion. Provably optimal for average waiting time among
    non-preemptive policies, but long jobs can starve.
    """

    @property
    def algorithm_name(self) -> str:
        return SchedulingAlgorithm.SJF.value

    @property
    def is_preemptive(self) -> bool:
        return False

    def _selection_key(self, process, running):
        return (process.burst_time, process.arrival_time, process.input_order)

    def _reason(self, process):
        return f"Selected P{process.pid} because it has the shortest burst time (Burst: {process.burst_time})."


# =============================================================================
# SRTF - SHORTEST REMAINING TIME FIRST
# =============================================================================

class SRTFPolicy(KeyedPolicy):
    """
    Shortest Remaining Time First (SRTF) Scheduler

    Preemptive SJF. The decision is repeated every time unit, so a newly
    arrived process with less remaining work takes over the CPU. On equal
    remaining time the earlier arrival wins, then the process that is
    already running.
    """

    @property
    def algorithm_name(self) -> str:
        return SchedulingAlgorithm.SRTF.value

    @property
    def is_preemptive(self) -> bool:
        return True

    def _selection_key(self, process, running):
        return (process.remaining_time, process.arrival_time, process is not running, process.input_order)

    def _reason(self, process):
        return (
            f"Selected P{process.pid} because it has the shortest remaining time "
            f"(Remaining: {process.remaining_time})."
        )


# =============================================================================
# PRIORITY SCHEDULING
# =============================================================================

class PriorityPolicy(KeyedPolicy):
    """
    Priority Scheduler (lower number = more urgent)

    Non-preemptive: the most urgent ready process runs to completion.

    Preemptive: the decision is repeated every time unit. An arriving
    process takes the CPU only if its priority is strictly better than
    the running one's; on equal priority the earlier arrival keeps it.
    """

    def __init__(self, preemptive: bool = False):
        super().__init__()
        self._preemptive = preemptive

    @property
    def algorithm_name(self) -> str:
        if self._preemptive:
            return SchedulingAlgorithm.PRIORITY_PREEMPTIVE.value
        return SchedulingAlgorithm.PRIORITY.value

    @property
    def is_preemptive(self) -> bool:
        return self._preemptive

    def _selection_key(self, process, running):
        if self._preemptive:
            return (process.priority, process.arrival_time, process is not running, process.input_order)
        return (process.priority, process.arrival_time, process.input_order)

    def _reason(self, process):
        return f"Selected P{process.pid} because it has the highest priority (Priority: {process.priority})."


# =============================================================================
# ROUND ROBIN
# =============================================================================

class RoundRobinPolicy(SchedulingPolicy):
    """
    Round Robin Scheduler

    The ready queue is served in FIFO order; the head runs for at most one
    time quantum. An unfinished process goes back to the tail after any
    process that arrived during its slice.
    """

    def __init__(self, quantum: int = 2):
        super().__init__()
        self.quantum = require_positive(quantum, "quantum")
        self.queue: Deque[Process] = deque()

    @property
    def algorithm_name(self) -> str:
        return f"{SchedulingAlgorithm.ROUND_ROBIN.value} (q={self.quantum})"

    @property
    def is_preemptive(self) -> bool:
        return True

    def admit(self, process: Process, current_time: int) -> None:
        process.set_ready()
        self.queue.append(process)

    def has_ready(self) -> bool:
        return bool(self.queue)

    def select(self, current_time: int, running: Optional[Process] = None) -> Optional[Dispatch]:
        if not self.queue:
            return None
        process = self.queue[0]
        run_time = min(process.remaining_time, self.quantum)
        reason = (
            f"Selected P{process.pid} from the front of the ready queue "
            f"(Quantum: {self.quantum}, Remaining: {process.remaining_time})."
        )
        return self._make_dispatch(process, run_time, running, reason)

    def on_dispatch_complete(self, dispatch: Dispatch, current_time: int) -> None:
        process = self.queue.popleft()
        if not process.is_completed():
            self.queue.append(process)
            self.expired_process = process

    def get_statistics(self) -> Dict[str, Any]:
        stats = super().get_statistics()
        stats['queue_size'] = len(self.queue)
        stats['quantum'] = self.quantum
        return stats

    def reset(self):
        super().reset()
        self.queue.clear()


def create_queue_policy(queue: QueueConfig) -> SchedulingPolicy:
    """
    Build the policy that serves one queue of a multilevel scheduler.

    Args:
        queue: Validated queue configuration

    Returns:
        SchedulingPolicy for the queue's algorithm
    """
    builders = {
        QueueAlgorithm.FCFS: FCFSPolicy,
        QueueAlgorithm.SJF: SJFPolicy,
        QueueAlgorithm.SRTF: SRTFPolicy,
        QueueAlgorithm.RR: lambda: RoundRobinPolicy(queue.quantum),
        QueueAlgorithm.PRIORITY: lambda: PriorityPolicy(preemptive=False),
        QueueAlgorithm.PRIORITY_PREEMPTIVE: lambda: PriorityPolicy(preemptive=True),
    }
    return builders[queue.algorithm]()


# =============================================================================
# MULTILEVEL QUEUE
# =============================================================================

class MultilevelQueuePolicy(SchedulingPolicy):
    """
    Multilevel Queue Scheduler

    Processes are permanently assigned to one of several ranked queues by
    their queue_id (clamped into 1..N). The highest ranked queue with a
    ready process is active and picks a process with its own algorithm.

    A dispatch already computed is never cut short by an arrival in a
    higher queue; the higher queue takes over at the next decision point.
    Low queues can starve while higher queues stay busy.
    """

    def __init__(self, queues: Sequence[QueueConfig]):
        super().__init__()
        ConfigValidator.validate_queues(queues)
        self.queue_configs: Tuple[QueueConfig, ...] = tuple(queues)
        self.levels: List[SchedulingPolicy] = [create_queue_policy(q) for q in self.queue_configs]

    @property
    def algorithm_name(self) -> str:
        labels = ", ".join(q.label for q in self.queue_configs)
        return f"{SchedulingAlgorithm.MULTILEVEL_QUEUE.value} [{labels}]"

    @property
    def is_preemptive(self) -> bool:
        return True

    def admit(self, process: Process, current_time: int) -> None:
        requested = process.queue_id if process.queue_id is not None else 1
        index = min(max(requested, 1), len(self.levels)) - 1
        process.current_queue_index = index
        self.levels[index].admit(process, current_time)

    def has_ready(self) -> bool:
        return any(level.has_ready() for level in self.levels)

    def select(self, current_time: int, running: Optional[Process] = None) -> Optional[Dispatch]:
        for index, level in enumerate(self.levels):
            if not level.has_ready():
                continue
            level_running = running if running is not None and running.current_queue_index == index else None
            inner = level.select(current_time, level_running)
            queue = self.queue_configs[index]
            reason = (
                f"Selected P{inner.process.pid} from Queue {index + 1} ({queue.algorithm.name}) "
                f"because it was the highest priority queue with ready processes."
            )
            return self._make_dispatch(inner.process, inner.run_time, running, reason, queue_id=index + 1)
        return None

    def on_dispatch_complete(self, dispatch: Dispatch, current_time: int) -> None:
        level = self.levels[dispatch.process.current_queue_index]
        level.on_dispatch_complete(dispatch, current_time)
        self.expired_process = level.expired_process

    def get_statistics(self) -> Dict[str, Any]:
        stats = super().get_statistics()
        stats['queue_size'] = sum(
            len(getattr(level, 'queue', level.ready)) for level in self.levels
        )
        stats['queue_sizes'] = [len(getattr(level, 'queue', level.ready)) for level in self.levels]
        return stats

    def reset(self):
        super().reset()
        for level in self.levels:
            level.reset()


# =============================================================================
# MLFQ - MULTILEVEL FEEDBACK QUEUE
# =============================================================================

class MLFQPolicy(SchedulingPolicy):
    """
    Multilevel Feedback Queue (MLFQ) Scheduler

    Rules:
    1. New processes start at the highest priority queue
    2. The head of the highest non-empty queue runs, one tick at a time
    3. Using up a queue's quantum demotes the process one level (to the tail)
    4. In the lowest queue an expired quantum rotates the process to its tail

    There is no promotion, so CPU hogs sink and stay down. Every level
    needs a positive quantum since it is also the demotion threshold.
    """

    def __init__(self, queues: Sequence[QueueConfig]):
        super().__init__()
        ConfigValidator.validate_queues(queues, require_quantum=True)
        self.queue_configs: Tuple[QueueConfig, ...] = tuple(queues)
        self.quanta: List[int] = [q.quantum for q in self.queue_configs]
        self.queues: List[Deque[Process]] = [deque() for _ in self.quanta]
        self.demotions = 0

    @property
    def algorithm_name(self) -> str:
        quanta = ", ".join(str(q) for q in self.quanta)
        return f"{SchedulingAlgorithm.MLFQ.value} [q={quanta}]"

    @property
    def is_preemptive(self) -> bool:
        return True

    def admit(self, process: Process, current_time: int) -> None:
        """Add new process at highest priority queue."""
        process.set_ready()
        process.current_queue_index = 0
        process.time_in_current_queue = 0
        self.queues[0].append(process)

    def has_ready(self) -> bool:
        return any(self.queues)

    def select(self, current_time: int, running: Optional[Process] = None) -> Optional[Dispatch]:
        """Select the head of the highest priority non-empty queue."""
        for index, queue in enumerate(self.queues):
            if queue:
                process = queue[0]
                reason = (
                    f"Selected P{process.pid} from Queue {index + 1} because it is the "
                    f"highest priority queue with ready processes."
                )
                return self._make_dispatch(process, 1, running, reason, queue_id=index + 1)
        return None

    def on_dispatch_complete(self, dispatch: Dispatch, current_time: int) -> None:
        process = dispatch.process
        level = process.current_queue_index
        queue = self.queues[level]

        if process.is_completed():
            queue.remove(process)
            return

        process.time_in_current_queue += dispatch.run_time
        if process.time_in_current_queue >= self.quanta[level]:
            queue.remove(process)
            self._demote_process(process, level)
            self.expired_process = process

    def _demote_process(self, process: Process, current_level: int):
        """Move process to the tail of the next lower queue (or its own if lowest)."""
        new_level = min(current_level + 1, len(self.queues) - 1)
        process.current_queue_index = new_level
        process.time_in_current_queue = 0
        self.queues[new_level].append(process)
        if new_level != current_level:
            self.demotions += 1
            logger.debug(f"MLFQ: Demoted P{process.pid} from Q{current_level + 1} to Q{new_level + 1}")

    def get_statistics(self) -> Dict[str, Any]:
        """Get MLFQ-specific statistics."""
        stats = super().get_statistics()
        stats['queue_size'] = sum(len(q) for q in self.queues)
        stats['queue_sizes'] = [len(q) for q in self.queues]
        stats['quanta'] = list(self.quanta)
        stats['demotions'] = self.demotions
        return stats

    def reset(self):
        super().reset()
        for queue in self.queues:
            queue.clear()
        self.demotions = 0


# =============================================================================
# SCHEDULER FACTORY
# =============================================================================

class SchedulerFactory:
    """Factory for creating scheduling policy instances."""

    @staticmethod
    def create_policy(algorithm: SchedulingAlgorithm,
                      config: SimulationConfig = None) -> SchedulingPolicy:
        """
        Create a fresh policy instance.

        Args:
            algorithm: The scheduling algorithm
            config: Simulation configuration (time quantum and queues)

        Returns:
            SchedulingPolicy instance

        Raises:
            ValueError: If the algorithm is unknown
            UnsupportedConfigurationError: If the queue configuration is unusable
        """
        config = config or DEFAULT_SIMULATION_CONFIG

        policies = {
            SchedulingAlgorithm.FCFS: FCFSPolicy,
            SchedulingAlgorithm.SJF: SJFPolicy,
            SchedulingAlgorithm.SRTF: SRTFPolicy,
            SchedulingAlgorithm.ROUND_ROBIN: lambda: RoundRobinPolicy(config.time_quantum),
            SchedulingAlgorithm.PRIORITY: lambda: PriorityPolicy(preemptive=False),
            SchedulingAlgorithm.PRIORITY_PREEMPTIVE: lambda: PriorityPolicy(preemptive=True),
            SchedulingAlgorithm.MULTILEVEL_QUEUE: lambda: MultilevelQueuePolicy(config.queues),
            SchedulingAlgorithm.MLFQ: lambda: MLFQPolicy(config.queues),
        }

        if algorithm not in policies:
            raise ValueError(f"Unknown scheduling algorithm: {algorithm}")

        return policies[algorithm]()

    @staticmethod
    def get_all_algorithms() -> List[SchedulingAlgorithm]:
        """Get all available scheduling algorithms."""
        return list(SchedulingAlgorithm)

    @staticmethod
    def get_algorithm_info() -> Dict[str, Dict[str, Any]]:
        """Get detailed info about all algorithms."""
        return {
            SchedulingAlgorithm.FCFS.value: {
                'tag': 'fcfs',
                'preemptive': False,
                'optimal_metric': None,
                'starvation_risk': 'None',
                'best_for': 'Batch systems, similar job sizes',
            },
            SchedulingAlgorithm.SJF.value: {
                'tag': 'sjf',
                'preemptive': False,
                'optimal_metric': 'Average waiting time',
                'starvation_risk': 'High (long jobs)',
                'best_for': 'Known job sizes',
            },
            SchedulingAlgorithm.SRTF.value: {
                'tag': 'srtf',
                'preemptive': True,
                'optimal_metric': 'Average waiting time',
                'starvation_risk': 'High (long jobs)',
                'best_for': 'Short interactive jobs',
            },
            SchedulingAlgorithm.ROUND_ROBIN.value: {
                'tag': 'rr',
                'preemptive': True,
                'optimal_metric': 'Response time',
                'starvation_risk': 'None',
                'best_for': 'Time-sharing systems',
            },
            SchedulingAlgorithm.PRIORITY.value: {
                'tag': 'priority-np',
                'preemptive': False,
                'optimal_metric': None,
                'starvation_risk': 'High (low priority)',
                'best_for': 'Systems with job importance',
            },
            SchedulingAlgorithm.PRIORITY_PREEMPTIVE.value: {
                'tag': 'priority-p',
                'preemptive': True,
                'optimal_metric': None,
                'starvation_risk': 'High (low priority)',
                'best_for': 'Urgent work that must not wait',
            },
            SchedulingAlgorithm.MULTILEVEL_QUEUE.value: {
                'tag': 'mq',
                'preemptive': True,
                'optimal_metric': None,
                'starvation_risk': 'High (lower queues)',
                'best_for': 'Foreground/background separation',
            },
            SchedulingAlgorithm.MLFQ.value: {
                'tag': 'mlfq',
                'preemptive': True,
                'optimal_metric': 'Balanced',
                'starvation_risk': 'Medium (no boost)',
                'best_for': 'Unknown job sizes',
            },
        }


__all__ = [
    'Dispatch',
    'SchedulingPolicy',
    'KeyedPolicy',
    'FCFSPolicy',
    'SJFPolicy',
    'SRTFPolicy',
    'PriorityPolicy',
    'RoundRobinPolicy',
    'MultilevelQueuePolicy',
    'MLFQPolicy',
    'create_queue_policy',
    'SchedulerFactory',
]
