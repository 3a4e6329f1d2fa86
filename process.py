"""
Process Module for CPU Scheduling Simulator

This module defines the Process class which represents a CPU-bound task
in the operating system. In real operating systems, a process is an instance
of a running program with its own memory space, registers, and state.

Key OS Concepts Demonstrated:
- Process Control Block (PCB): Data structure storing process information
- Process States: NEW, READY, RUNNING, COMPLETED
- Process Attributes: PID, burst time, arrival time, priority, queue

Author: Student
Date: December 2024
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Sequence
import copy
import random

from config import (
    ProcessState,
    SimulationConfig,
    DEFAULT_SIMULATION_CONFIG
)


@dataclass
class Process:
    """
    Represents a process in the scheduling simulation.

    This class models the Process Control Block (PCB), which in real operating
    systems contains all the information the OS needs to manage a process.

    In this simulation, we track:
    - Identification: PID (Process ID)
    - Timing: arrival_time, burst_time, remaining_time
    - Scheduling: priority, queue assignment
    - State: current process state
    - Metrics: first run, finish, turnaround, waiting and response times

    Attributes:
        pid (int): Unique process identifier (positive)
        arrival_time (int): Time when process arrives in the system
        burst_time (int): Total CPU time required to complete the process
        remaining_time (int): CPU time still needed (only decreases)
        priority (int): Priority number, lower is more urgent
        queue_id (Optional[int]): 1-based queue for Multilevel Queue scheduling
        state (ProcessState): Current state of the process
        first_run_time (Optional[int]): Time of the first dispatch
        finish_time (Optional[int]): Time the last unit of work completed
        turnaround_time (Optional[int]): finish_time - arrival_time
        waiting_time (Optional[int]): turnaround_time - burst_time
        response_time (Optional[int]): first_run_time - arrival_time
    """

    # Core Process Attributes (required for identification)
    pid: int

    # Timing Attributes
    arrival_time: int = 0
    burst_time: int = 1
    remaining_time: int = field(init=False)  # Calculated from burst_time

    # Scheduling Attributes
    priority: int = 0
    queue_id: Optional[int] = None
    state: ProcessState = ProcessState.NEW

    # Timing Metrics (set during execution)
    first_run_time: Optional[int] = None
    finish_time: Optional[int] = None
    turnaround_time: Optional[int] = None
    waiting_time: Optional[int] = None
    response_time: Optional[int] = None

    # Scheduler bookkeeping
    input_order: int = field(default=0, repr=False)
    current_queue_index: int = field(default=0, repr=False)
    time_in_current_queue: int = field(default=0, repr=False)

    def __post_init__(self):
        """
        Initialize calculated fields after dataclass initialization.

        remaining_time starts equal to burst_time and decreases as the
        process executes. This separation allows us to track progress
        while knowing the original burst time for metrics.
        """
        self.remaining_time = self.burst_time

    def __str__(self) -> str:
        return (
            f"Process[PID={self.pid}, State={self.state.name}, "
            f"Arrival={self.arrival_time}, Burst={self.burst_time}, "
            f"Remaining={self.remaining_time}, Priority={self.priority}]"
        )

    def __eq__(self, other: object) -> bool:
        """
        Check equality based on PID.

        Args:
            other: Object to compare with

        Returns:
            True if PIDs match
        """
        if not isinstance(other, Process):
            return False
        return self.pid == other.pid

    def __hash__(self) -> int:
        """Hash based on PID for use in sets and dicts."""
        return hash(self.pid)

    # =========================================================================
    # State Management Methods
    # =========================================================================

    def set_ready(self) -> None:
        """
        Transition process to READY state.

        In OS terms: Process has arrived and is waiting in the
        ready queue for CPU time.
        """
        if self.state == ProcessState.NEW:
            self.state = ProcessState.READY

    def set_running(self, current_time: int) -> None:
        """
        Transition process to RUNNING state.

        In OS terms: Process has been selected by the scheduler and
        is now executing on the CPU.

        Args:
            current_time: Current simulation time (for tracking first run)
        """
        if self.state == ProcessState.READY:
            self.state = ProcessState.RUNNING

            # Record first execution start time
            if self.first_run_time is None:
                self.first_run_time = current_time

    def execute(self, time_units: int) -> int:
        """
        Execute the process for a given number of time units.

        Args:
            time_units: Number of time units to execute

        Returns:
            Actual time units executed (may be less if process completes)
        """
        if self.state != ProcessState.RUNNING:
            return 0

        actual_execution = min(time_units, self.remaining_time)
        self.remaining_time -= actual_execution
        return actual_execution

    def preempt(self) -> None:
        """
        Move the running process back to the ready state.

        In OS terms: The scheduler has taken the CPU away (time quantum
        expired, or a more urgent process became ready).
        """
        if self.state == ProcessState.RUNNING:
            self.state = ProcessState.READY

    def set_completed(self, current_time: int) -> None:
        """
        Transition process to COMPLETED state.

        Args:
            current_time: Current simulation time (becomes finish_time)
        """
        if self.state == ProcessState.RUNNING:
            self.state = ProcessState.COMPLETED
            self.finish_time = current_time
            self.remaining_time = 0

    # =========================================================================
    # Query Methods
    # =========================================================================

    def is_completed(self) -> bool:
        """Check if process has finished execution."""
        return self.state == ProcessState.COMPLETED

    def is_ready(self) -> bool:
        return self.state == ProcessState.READY

    def get_progress(self) -> float:
        """
        Get execution progress as a fraction.

        Returns:
            Float between 0.0 and 1.0 representing completion percentage
        """
        if self.burst_time == 0:
            return 1.0
        return (self.burst_time - self.remaining_time) / self.burst_time

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert process to dictionary for serialization or logging.

        Returns:
            Dictionary with all process information
        """
        return {
            'pid': self.pid,
            'arrival_time': self.arrival_time,
            'burst_time': self.burst_time,
            'remaining_time': self.remaining_time,
            'priority': self.priority,
            'queue_id': self.queue_id,
            'state': self.state.name,
            'first_run_time': self.first_run_time,
            'finish_time': self.finish_time,
            'turnaround_time': self.turnaround_time,
            'waiting_time': self.waiting_time,
            'response_time': self.response_time,
        }


def clone_processes(processes: Sequence[Process]) -> List[Process]:
    """
    Make fresh working copies of processes for one simulation run.

    Each copy is reset to its initial state and stamped with its position
    in the input list, which scheduling policies use to break ties.

    Args:
        processes: Caller-owned processes (never mutated)

    Returns:
        Independent Process copies in input order
    """
    clones = []
    for index, original in enumerate(processes):
        clone = copy.deepcopy(original)
        clone.remaining_time = clone.burst_time
        clone.state = ProcessState.NEW
        clone.first_run_time = None
        clone.finish_time = None
        clone.turnaround_time = None
        clone.waiting_time = None
        clone.response_time = None
        clone.input_order = index
        clone.current_queue_index = 0
        clone.time_in_current_queue = 0
        clones.append(clone)
    return clones


# =============================================================================
# PROCESS GENERATOR
# =============================================================================

class ProcessGenerator:
    """
    Factory class for generating processes with random or specified attributes.

    In real systems, processes are created by:
    - User applications being launched
    - System services starting
    - Fork() system calls creating child processes

    This generator simulates workload creation for comparing schedulers.
    A seeded configuration always yields the same workload.
    """

    def __init__(self, config: SimulationConfig = None):
        """
        Initialize the process generator with configuration.

        Args:
            config: SimulationConfig instance (uses default if None)
        """
        self.config = config or DEFAULT_SIMULATION_CONFIG
        self._rng = random.Random(self.config.seed)
        self._next_pid = 1  # Auto-incrementing PID counter

    def reset(self) -> None:
        """Reset the PID counter and random stream for a new workload."""
        self._rng = random.Random(self.config.seed)
        self._next_pid = 1

    def generate_process(
        self,
        arrival_time: Optional[int] = None,
        burst_time: Optional[int] = None,
        priority: Optional[int] = None,
        queue_id: Optional[int] = None
    ) -> Process:
        """
        Generate a single process with random or specified attributes.

        Args:
            arrival_time: Specific arrival time (random if None)
            burst_time: Specific burst time (random if None)
            priority: Specific priority (random if None)
            queue_id: Specific queue (random if None)

        Returns:
            New Process instance
        """
        if arrival_time is None:
            arrival_time = self._rng.randint(
                self.config.min_arrival_time,
                self.config.max_arrival_time
            )

        if burst_time is None:
            burst_time = self._rng.randint(
                self.config.min_burst_time,
                self.config.max_burst_time
            )

        if priority is None:
            priority = self._rng.randint(self.config.min_priority, self.config.max_priority)

        if queue_id is None:
            queue_id = self._rng.randint(1, self.config.num_queues)

        process = Process(
            pid=self._next_pid,
            arrival_time=arrival_time,
            burst_time=burst_time,
            priority=priority,
            queue_id=queue_id
        )

        self._next_pid += 1
        return process

    def generate_processes(self, count: Optional[int] = None) -> List[Process]:
        """
        Generate multiple processes.

        Args:
            count: Number of processes to generate (uses config default if None)

        Returns:
            List of Process instances in pid order
        """
        if count is None:
            count = self.config.num_processes

        return [self.generate_process() for _ in range(count)]

    def generate_predefined_test_set(self) -> List[Process]:
        """
        Generate a predefined set of processes for consistent testing.

        Returns:
            List of processes with known, predictable attributes
        """
        # (arrival, burst, priority, queue)
        test_processes = [
            (0, 8, 2, 1),
            (1, 4, 1, 1),
            (2, 9, 3, 2),
            (3, 5, 2, 2),
            (4, 2, 1, 1),
            (5, 6, 2, 2),
            (6, 3, 3, 1),
            (7, 7, 2, 2),
            (10, 4, 1, 1),
            (12, 5, 2, 2),
        ]

        return [
            self.generate_process(
                arrival_time=arrival,
                burst_time=burst,
                priority=priority,
                queue_id=queue
            )
            for arrival, burst, priority, queue in test_processes
        ]


# =============================================================================
# MODULE TEST
# =============================================================================

if __name__ == "__main__":
    print("=" * 60)
    print("Process Module Test")
    print("=" * 60)

    print("\n1. Creating a process manually:")
    p1 = Process(pid=1, arrival_time=0, burst_time=10, priority=1)
    print(f"   {p1}")

    print("\n2. Testing state transitions:")
    print(f"   Initial state: {p1.state.name}")
    p1.set_ready()
    print(f"   After set_ready(): {p1.state.name}")
    p1.set_running(current_time=0)
    print(f"   After set_running(): {p1.state.name}")

    print("\n3. Testing execution:")
    executed = p1.execute(time_units=4)
    print(f"   Executed {executed} time units")
    print(f"   Remaining time: {p1.remaining_time}")
    print(f"   Progress: {p1.get_progress()*100:.1f}%")

    print("\n4. Testing preemption and completion:")
    p1.preempt()
    print(f"   After preempt(): {p1.state.name}")
    p1.set_running(current_time=5)
    p1.execute(time_units=6)
    p1.set_completed(current_time=11)
    print(f"   Final state: {p1.state.name}, finished at {p1.finish_time}")

    print("\n5. Testing ProcessGenerator:")
    generator = ProcessGenerator(SimulationConfig(seed=42))
    for p in generator.generate_processes(5):
        print(f"   {p}")

    print("\n" + "=" * 60)
    print("All tests completed successfully!")
    print("=" * 60)
