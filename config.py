"""
Configuration Module for CPU Scheduling Simulator

This module contains all configuration constants and parameters used throughout
the simulation. Centralizing configuration makes it easy to adjust system behavior
without modifying core logic.

In Operating Systems, scheduler configuration is crucial for:
- Choosing the scheduling policy for a workload
- Tuning time quanta for time-sharing policies
- Describing the queue hierarchy of multilevel schedulers

Author: Student
Date: December 2024
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple


# =============================================================================
# ENUMERATIONS - Define categorical constants
# =============================================================================

class ProcessState(Enum):
    """
    Process states in the scheduler lifecycle.

    In this simulation, processes transition through these states:
    - NEW: Process has not arrived yet
    - READY: Process has arrived and is waiting for the CPU
    - RUNNING: Process is currently dispatched on the CPU
    - COMPLETED: Process has finished execution
    """
    NEW = auto()
    READY = auto()
    RUNNING = auto()
    COMPLETED = auto()


class SchedulingAlgorithm(Enum):
    """
    Available CPU scheduling policies.

    - FCFS: First Come First Served - the OG scheduler
    - SJF: Shortest Job First - optimal waiting time (non-preemptive)
    - SRTF: Shortest Remaining Time First - preemptive SJF
    - ROUND_ROBIN: Fixed time slices in FIFO order
    - PRIORITY: Non-preemptive priority scheduling
    - PRIORITY_PREEMPTIVE: Preemptive priority scheduling
    - MULTILEVEL_QUEUE: Multiple fixed queues with different policies
    - MLFQ: Multilevel Feedback Queue - adaptive scheduling
    """
    FCFS = "FCFS (First Come First Served)"
    SJF = "SJF (Shortest Job First)"
    SRTF = "SRTF (Shortest Remaining Time First)"
    ROUND_ROBIN = "Round Robin"
    PRIORITY = "Priority Scheduling (Non-Preemptive)"
    PRIORITY_PREEMPTIVE = "Priority Scheduling (Preemptive)"
    MULTILEVEL_QUEUE = "Multilevel Queue"
    MLFQ = "MLFQ (Multilevel Feedback Queue)"

    @property
    def tag(self) -> str:
        """Short command-line tag for the algorithm."""
        return ALGORITHM_TAGS[self]

    @property
    def uses_queues(self) -> bool:
        """Whether the algorithm needs a queue configuration."""
        return self in (SchedulingAlgorithm.MULTILEVEL_QUEUE, SchedulingAlgorithm.MLFQ)

    @classmethod
    def from_tag(cls, tag: str) -> 'SchedulingAlgorithm':
        """
        Look up an algorithm by its short tag (e.g. "rr", "priority-p").

        Raises:
            ValueError: If the tag is unknown
        """
        normalized = tag.strip().lower()
        for algorithm, algorithm_tag in ALGORITHM_TAGS.items():
            if algorithm_tag == normalized:
                return algorithm
        raise ValueError(f"Unknown scheduling algorithm: {tag}")


class QueueAlgorithm(Enum):
    """
    Algorithms a single queue of a multilevel scheduler can run.

    The set is closed: anything else is rejected when the queue
    configuration is built, never matched at dispatch time.
    """
    FCFS = "fcfs"
    SJF = "sjf"
    SRTF = "srtf"
    RR = "rr"
    PRIORITY = "priority"
    PRIORITY_PREEMPTIVE = "priority-p"

    @property
    def requires_quantum(self) -> bool:
        return self is QueueAlgorithm.RR


ALGORITHM_TAGS = {
    SchedulingAlgorithm.FCFS: "fcfs",
    SchedulingAlgorithm.SJF: "sjf",
    SchedulingAlgorithm.SRTF: "srtf",
    SchedulingAlgorithm.ROUND_ROBIN: "rr",
    SchedulingAlgorithm.PRIORITY: "priority-np",
    SchedulingAlgorithm.PRIORITY_PREEMPTIVE: "priority-p",
    SchedulingAlgorithm.MULTILEVEL_QUEUE: "mq",
    SchedulingAlgorithm.MLFQ: "mlfq",
}


# =============================================================================
# QUEUE CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class QueueConfig:
    """
    Configuration of one queue in a multilevel scheduler.

    The position of a QueueConfig in its list is its rank: index 0 is the
    highest priority queue. Round Robin queues must carry a quantum.

    Attributes:
        algorithm: Algorithm used to pick a process inside this queue
        quantum: Time slice for Round Robin (and demotion threshold in MLFQ)
    """
    algorithm: QueueAlgorithm = QueueAlgorithm.FCFS
    quantum: Optional[int] = None

    def __post_init__(self):
        # Imported here because validators imports this module
        from validators import UnsupportedConfigurationError

        if not isinstance(self.algorithm, QueueAlgorithm):
            raise UnsupportedConfigurationError(
                f"Unsupported queue algorithm {self.algorithm!r}",
                value=self.algorithm
            )
        if self.quantum is not None:
            if isinstance(self.quantum, bool) or not isinstance(self.quantum, int) or self.quantum <= 0:
                raise UnsupportedConfigurationError(
                    "quantum must be a positive integer",
                    value=self.quantum
                )
        elif self.algorithm.requires_quantum:
            raise UnsupportedConfigurationError(
                f"{self.algorithm.name} queue requires a quantum"
            )

    @property
    def label(self) -> str:
        """Short human-readable label, e.g. "RR(q=2)"."""
        name = self.algorithm.name.replace("_", "-")
        if self.quantum is not None:
            return f"{name}(q={self.quantum})"
        return name

    def to_dict(self) -> Dict[str, Any]:
        return {'algorithm': self.algorithm.value, 'quantum': self.quantum}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QueueConfig':
        """
        Create a queue configuration from a dictionary.

        Raises:
            UnsupportedConfigurationError: If the algorithm tag is unknown
        """
        from validators import UnsupportedConfigurationError

        tag = data.get('algorithm', 'fcfs')
        try:
            algorithm = QueueAlgorithm(str(tag).strip().lower())
        except ValueError:
            raise UnsupportedConfigurationError(
                f"Unsupported queue algorithm '{tag}'",
                value=tag
            ) from None
        return cls(algorithm=algorithm, quantum=data.get('quantum'))


def default_queue_configs() -> Tuple[QueueConfig, ...]:
    """Two Round Robin queues with growing quanta."""
    return (
        QueueConfig(QueueAlgorithm.RR, quantum=2),
        QueueConfig(QueueAlgorithm.RR, quantum=4),
    )


# =============================================================================
# SIMULATION CONFIGURATION
# =============================================================================

@dataclass
class SimulationConfig:
    """
    Main configuration class for the simulation.

    Using a dataclass provides:
    - Clean syntax for configuration
    - Type hints for IDE support
    - Easy serialization if needed

    Attributes:
        algorithm: Scheduling policy used by default
        time_quantum: Time slice for Round Robin scheduling (in time units)
        queues: Queue hierarchy for Multilevel Queue and MLFQ
        num_processes: Number of processes to generate for random workloads
        seed: Seed for workload generation (None = nondeterministic)
    """
    # Scheduling Configuration
    algorithm: SchedulingAlgorithm = SchedulingAlgorithm.FCFS
    time_quantum: int = 2
    queues: Tuple[QueueConfig, ...] = field(default_factory=default_queue_configs)

    # Workload Generation Parameters
    num_processes: int = 5
    min_processes: int = 1
    max_processes: int = 100
    min_burst_time: int = 1
    max_burst_time: int = 10
    min_arrival_time: int = 0
    max_arrival_time: int = 10
    min_priority: int = 0
    max_priority: int = 5
    num_queues: int = 2
    seed: Optional[int] = None

    def validate(self) -> bool:
        """
        Validate configuration parameters.

        Returns:
            bool: True if configuration is valid

        Raises:
            ConfigurationError: If any parameter is invalid
        """
        from validators import ConfigurationError, ConfigValidator

        if not isinstance(self.algorithm, SchedulingAlgorithm):
            raise ConfigurationError("Unknown scheduling algorithm", "algorithm", self.algorithm)

        ConfigValidator.validate_time_quantum(self.time_quantum).raise_if_invalid(ConfigurationError)

        if self.algorithm.uses_queues or self.queues:
            # MLFQ quanta double as demotion thresholds
            ConfigValidator.validate_queues(
                self.queues,
                require_quantum=self.algorithm is SchedulingAlgorithm.MLFQ
            )

        if not (self.min_processes <= self.num_processes <= self.max_processes):
            raise ConfigurationError(
                f"num_processes must be between {self.min_processes} and {self.max_processes}",
                "num_processes", self.num_processes
            )

        if self.min_burst_time < 1 or self.min_burst_time > self.max_burst_time:
            raise ConfigurationError(
                "burst time range must be positive and ordered",
                "min_burst_time", self.min_burst_time
            )

        if self.min_arrival_time < 0 or self.min_arrival_time > self.max_arrival_time:
            raise ConfigurationError(
                "arrival time range must be non-negative and ordered",
                "min_arrival_time", self.min_arrival_time
            )

        if self.min_priority > self.max_priority:
            raise ConfigurationError(
                "min_priority cannot be greater than max_priority",
                "min_priority", self.min_priority
            )

        if self.num_queues < 1:
            raise ConfigurationError("num_queues must be at least 1", "num_queues", self.num_queues)

        return True

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary for serialization.

        Returns:
            Dict containing all configuration parameters
        """
        return {
            'algorithm': self.algorithm.value,
            'time_quantum': self.time_quantum,
            'queues': [q.to_dict() for q in self.queues],
            'num_processes': self.num_processes,
            'min_burst_time': self.min_burst_time,
            'max_burst_time': self.max_burst_time,
            'min_arrival_time': self.min_arrival_time,
            'max_arrival_time': self.max_arrival_time,
            'min_priority': self.min_priority,
            'max_priority': self.max_priority,
            'num_queues': self.num_queues,
            'seed': self.seed
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """
        Create configuration from dictionary.

        Args:
            data: Dictionary containing configuration parameters

        Returns:
            SimulationConfig instance

        Raises:
            UnsupportedConfigurationError: Naming the offending queue
        """
        config = cls()
        for key, value in data.items():
            if key == 'algorithm':
                value = SchedulingAlgorithm(value)
            elif key == 'queues':
                value = cls._queues_from_list(value)
            if hasattr(config, key):
                setattr(config, key, value)
        return config

    @staticmethod
    def _queues_from_list(items) -> Tuple[QueueConfig, ...]:
        from validators import UnsupportedConfigurationError

        queues = []
        for index, item in enumerate(items):
            try:
                queues.append(QueueConfig.from_dict(item))
            except UnsupportedConfigurationError as e:
                raise UnsupportedConfigurationError(
                    f"Queue {index + 1}: {e.message}",
                    value=e.value,
                    queue_index=index
                ) from e
        return tuple(queues)


# =============================================================================
# CHART CONFIGURATION
# =============================================================================

@dataclass
class ChartConfig:
    """
    Configuration for the Gantt chart renderer.

    Attributes:
        figure_width: Figure width in inches
        row_height: Height in inches of each Gantt row
        dpi: Resolution of saved images
        process_colors: Palette cycled over process ids
    """
    title: str = "CPU Schedule"
    figure_width: float = 10.0
    row_height: float = 1.2
    min_figure_height: float = 2.5
    dpi: int = 100
    bar_height: float = 0.8
    label_min_width: float = 1.0  # Narrower bars get no text label

    color_idle: str = "#9E9E9E"
    color_edge: str = "#FFFFFF"
    color_text: str = "#212121"

    process_colors: tuple = (
        "#6366f1",  # Indigo
        "#22c55e",  # Green
        "#f59e0b",  # Amber
        "#ec4899",  # Pink
        "#06b6d4",  # Cyan
        "#8b5cf6",  # Violet
        "#ef4444",  # Red
        "#14b8a6",  # Teal
        "#f97316",  # Orange
        "#84cc16",  # Lime
        "#a855f7",  # Purple
        "#0ea5e9",  # Sky
    )

    def get_process_color(self, pid: int) -> str:
        """
        Get a stable color for a process.

        Args:
            pid: The process ID

        Returns:
            Hex color string for the process
        """
        return self.process_colors[(pid - 1) % len(self.process_colors)]


# =============================================================================
# PLAYBACK CONFIGURATION
# =============================================================================

@dataclass
class PlaybackConfig:
    """
    Configuration for step-by-step timeline playback.

    Speed levels run from 1 (slowest) to 5 (fastest); level 3 is real time
    at one time unit per second.
    """
    default_speed: int = 3
    step_delays_ms: Dict[int, int] = field(default_factory=lambda: {
        1: 4000,  # 0.25x
        2: 2000,  # 0.5x
        3: 1000,  # 1x
        4: 667,   # 1.5x
        5: 500,   # 2x
    })
    speed_labels: Dict[int, str] = field(default_factory=lambda: {
        1: "0.25x",
        2: "0.5x",
        3: "1x",
        4: "1.5x",
        5: "2x",
    })

    def get_delay(self, speed: int) -> float:
        """Delay between playback steps in seconds."""
        return self.step_delays_ms.get(speed, self.step_delays_ms[self.default_speed]) / 1000.0


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

@dataclass
class LoggingConfig:
    """
    Configuration for the logging system.

    Logging is essential for:
    - Debugging scheduling decisions
    - Tracking preemptions and demotions
    - Analyzing simulation results
    """
    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "simulation.log"
    level: str = "INFO"

    # Log format
    log_format: str = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    # Detail level
    verbose: bool = False  # If True, logs every dispatch decision


# =============================================================================
# DEFAULT INSTANCES
# =============================================================================

# Create default configuration instances for easy import
DEFAULT_SIMULATION_CONFIG = SimulationConfig()
DEFAULT_CHART_CONFIG = ChartConfig()
DEFAULT_PLAYBACK_CONFIG = PlaybackConfig()
DEFAULT_LOGGING_CONFIG = LoggingConfig()


# =============================================================================
# CONSTANTS
# =============================================================================

# Version information
VERSION = "1.0.0"
APP_NAME = "CPU Scheduling Simulator"
AUTHOR = "Student"

IDLE_REASON = "CPU is idle (no ready processes)."

# Help text for algorithms
ALGORITHM_DESCRIPTIONS = {
    SchedulingAlgorithm.FCFS: """
First Come First Served:
- Runs processes in order of arrival, each to completion
- Simple and starvation free
- Suffers from the convoy effect behind long jobs
    """.strip(),

    SchedulingAlgorithm.SJF: """
Shortest Job First (Non-Preemptive):
- Picks the ready process with the smallest burst time
- Optimal average waiting time among non-preemptive policies
- Long jobs may starve
    """.strip(),

    SchedulingAlgorithm.SRTF: """
Shortest Remaining Time First:
- Preemptive SJF, re-evaluated every time unit
- A new arrival with less remaining work preempts the running process
    """.strip(),

    SchedulingAlgorithm.ROUND_ROBIN: """
Round Robin:
- Ready queue served in FIFO order for at most one quantum
- Unfinished processes go back to the tail of the queue
    """.strip(),

    SchedulingAlgorithm.PRIORITY: """
Priority Scheduling (Non-Preemptive):
- Picks the ready process with the smallest priority number
- Runs it to completion
    """.strip(),

    SchedulingAlgorithm.PRIORITY_PREEMPTIVE: """
Priority Scheduling (Preemptive):
- Re-evaluated every time unit
- A new arrival preempts only with a strictly better priority
    """.strip(),

    SchedulingAlgorithm.MULTILEVEL_QUEUE: """
Multilevel Queue:
- Processes are permanently assigned to ranked queues
- The highest non-empty queue runs its own algorithm
- Higher queues take over at the next scheduling decision
    """.strip(),

    SchedulingAlgorithm.MLFQ: """
Multilevel Feedback Queue:
- Every process starts in the top queue
- Using up a queue's quantum demotes the process one level
- The lowest queue rotates its processes round robin
    """.strip(),
}
