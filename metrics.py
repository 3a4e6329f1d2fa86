"""
Metrics Module for CPU Scheduling Simulator

This module computes per-process and system-wide performance metrics
and compares scheduling algorithms against each other.

Key Metrics:
- Turnaround Time: finish - arrival
- Waiting Time: turnaround - burst (time spent in the ready queue)
- Response Time: first run - arrival
- CPU Utilization: busy time / makespan
- Throughput: processes completed per time unit
- Jain's Fairness Index over the share of service each process received

Author: Student
Date: December 2024
"""

from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence
import logging

import numpy as np

from config import SchedulingAlgorithm
from process import Process
from validators import SimulationError


logger = logging.getLogger(__name__)


# =============================================================================
# PROCESS METRICS
# =============================================================================

@dataclass
class ProcessMetrics:
    """
    Performance metrics of one completed process.

    Attributes:
        pid: Process ID
        arrival_time: Arrival instant
        burst_time: CPU time required
        first_run_time: First dispatch instant
        finish_time: Completion instant
        priority: Priority number
        queue_id: Queue for Multilevel Queue scheduling
    """
    pid: int
    arrival_time: int
    burst_time: int
    first_run_time: int
    finish_time: int
    priority: int = 0
    queue_id: Optional[int] = None

    @property
    def turnaround_time(self) -> int:
        """Turnaround = Finish - Arrival"""
        return self.finish_time - self.arrival_time

    @property
    def waiting_time(self) -> int:
        """Waiting = Turnaround - Burst"""
        return self.turnaround_time - self.burst_time

    @property
    def response_time(self) -> int:
        """Response = First Run - Arrival"""
        return self.first_run_time - self.arrival_time

    @property
    def normalized_turnaround(self) -> float:
        """Turnaround divided by burst (1.0 means never waited)."""
        return self.turnaround_time / self.burst_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pid': self.pid,
            'arrival_time': self.arrival_time,
            'burst_time': self.burst_time,
            'priority': self.priority,
            'queue_id': self.queue_id,
            'first_run_time': self.first_run_time,
            'finish_time': self.finish_time,
            'turnaround_time': self.turnaround_time,
            'waiting_time': self.waiting_time,
            'response_time': self.response_time,
            'normalized_turnaround': round(self.normalized_turnaround, 4),
        }


# =============================================================================
# SYSTEM METRICS
# =============================================================================

@dataclass
class SystemMetrics:
    """
    Aggregate metrics of one simulation run.

    All averages are over completed processes. Utilization and throughput
    are measured over the makespan (time 0 to the last finish).
    """
    algorithm_name: str = ""
    total_processes: int = 0
    completed_processes: int = 0
    avg_turnaround_time: float = 0.0
    avg_waiting_time: float = 0.0
    avg_response_time: float = 0.0
    avg_normalized_turnaround: float = 0.0
    max_waiting_time: int = 0
    waiting_time_std: float = 0.0
    cpu_utilization: float = 0.0
    throughput: float = 0.0
    busy_time: int = 0
    idle_time: int = 0
    context_switches: int = 0
    jains_fairness_index: float = 1.0
    total_simulation_time: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'algorithm_name': self.algorithm_name,
            'total_processes': self.total_processes,
            'completed_processes': self.completed_processes,
            'avg_turnaround_time': round(self.avg_turnaround_time, 4),
            'avg_waiting_time': round(self.avg_waiting_time, 4),
            'avg_response_time': round(self.avg_response_time, 4),
            'avg_normalized_turnaround': round(self.avg_normalized_turnaround, 4),
            'max_waiting_time': self.max_waiting_time,
            'waiting_time_std': round(self.waiting_time_std, 4),
            'cpu_utilization': round(self.cpu_utilization, 4),
            'throughput': round(self.throughput, 4),
            'busy_time': self.busy_time,
            'idle_time': self.idle_time,
            'context_switches': self.context_switches,
            'jains_fairness_index': round(self.jains_fairness_index, 4),
            'total_simulation_time': self.total_simulation_time,
        }


# =============================================================================
# METRICS CALCULATOR
# =============================================================================

class MetricsCalculator:
    """
    Fills in derived process fields and aggregates run metrics.

    The simulation engine calls finalize_process once per process, at the
    instant its last unit of work completes.
    """

    def __init__(self, algorithm: Optional[SchedulingAlgorithm] = None):
        self.algorithm = algorithm

    @staticmethod
    def finalize_process(process: Process, finish_time: int) -> None:
        """
        Record completion and derived timings on a process.

        Args:
            process: Process that just ran its last unit of work
            finish_time: Completion instant

        Raises:
            SimulationError: If the process never ran
        """
        if process.first_run_time is None:
            raise SimulationError(f"P{process.pid} finished without ever being dispatched")

        process.set_completed(finish_time)
        process.turnaround_time = finish_time - process.arrival_time
        process.waiting_time = process.turnaround_time - process.burst_time
        process.response_time = process.first_run_time - process.arrival_time

        logger.debug(
            f"P{process.pid} completed at {finish_time} "
            f"(TAT={process.turnaround_time}, WT={process.waiting_time}, RT={process.response_time})"
        )

    @staticmethod
    def calculate_process_metrics(process: Process) -> ProcessMetrics:
        """
        Build ProcessMetrics for a completed process.

        Raises:
            SimulationError: If the process has not completed
        """
        if process.finish_time is None or process.first_run_time is None:
            raise SimulationError(f"P{process.pid} has not completed")
        return ProcessMetrics(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            first_run_time=process.first_run_time,
            finish_time=process.finish_time,
            priority=process.priority,
            queue_id=process.queue_id,
        )

    def calculate_system_metrics(
        self,
        processes: Sequence[Process],
        timeline,
        algorithm_name: Optional[str] = None
    ) -> SystemMetrics:
        """
        Aggregate metrics of a finished run.

        Args:
            processes: Processes of the run
            timeline: Timeline produced by the run
            algorithm_name: Display name (defaults to the calculator's algorithm)

        Returns:
            SystemMetrics
        """
        if algorithm_name is None:
            algorithm_name = self.algorithm.value if self.algorithm else ""

        metrics = SystemMetrics(algorithm_name=algorithm_name)
        metrics.total_processes = len(processes)

        completed = [self.calculate_process_metrics(p) for p in processes if p.is_completed()]
        metrics.completed_processes = len(completed)

        makespan = timeline.end_time
        metrics.total_simulation_time = makespan
        metrics.busy_time = timeline.busy_time()
        metrics.idle_time = timeline.idle_time()
        metrics.context_switches = timeline.count_context_switches()

        if not completed:
            return metrics

        turnaround = np.array([m.turnaround_time for m in completed], dtype=float)
        waiting = np.array([m.waiting_time for m in completed], dtype=float)
        response = np.array([m.response_time for m in completed], dtype=float)
        normalized = np.array([m.normalized_turnaround for m in completed], dtype=float)

        metrics.avg_turnaround_time = float(np.mean(turnaround))
        metrics.avg_waiting_time = float(np.mean(waiting))
        metrics.avg_response_time = float(np.mean(response))
        metrics.avg_normalized_turnaround = float(np.mean(normalized))
        metrics.max_waiting_time = int(np.max(waiting))
        metrics.waiting_time_std = float(np.std(waiting))

        if makespan > 0:
            metrics.cpu_utilization = metrics.busy_time / makespan
            metrics.throughput = metrics.completed_processes / makespan

        metrics.jains_fairness_index = self.jains_fairness(1.0 / normalized)
        return metrics

    @staticmethod
    def jains_fairness(values) -> float:
        """
        Jain's Fairness Index: (sum x)^2 / (n * sum x^2).

        1.0 means perfectly equal shares; 1/n means one process got everything.
        """
        values = np.asarray(values, dtype=float)
        if values.size == 0:
            return 1.0
        denominator = values.size * float(np.sum(values ** 2))
        if denominator == 0:
            return 1.0
        return float(np.sum(values)) ** 2 / denominator


# =============================================================================
# METRICS COMPARATOR
# =============================================================================

class MetricsComparator:
    """
    Compare system metrics of several algorithms on the same workload.
    """

    # Metric name -> True if higher is better
    METRICS = {
        'avg_turnaround_time': False,
        'avg_waiting_time': False,
        'avg_response_time': False,
        'cpu_utilization': True,
        'throughput': True,
        'context_switches': False,
        'jains_fairness_index': True,
    }

    def __init__(self):
        self.results: Dict[str, SystemMetrics] = {}

    def add_result(self, algorithm, metrics: SystemMetrics) -> None:
        """
        Register the metrics of one algorithm.

        Args:
            algorithm: SchedulingAlgorithm or display name
            metrics: SystemMetrics of its run
        """
        name = algorithm.value if isinstance(algorithm, SchedulingAlgorithm) else str(algorithm)
        self.results[name] = metrics

    def clear(self) -> None:
        self.results.clear()

    def compare(self, metrics_list: Optional[List[SystemMetrics]] = None) -> Dict[str, Dict[str, Any]]:
        """
        Find the best algorithm for each metric.

        Args:
            metrics_list: Metrics to compare (defaults to registered results)

        Returns:
            Dict mapping metric name to {'best': name, 'value': value, 'values': {...}}
        """
        if metrics_list is None:
            candidates = dict(self.results)
        else:
            candidates = {m.algorithm_name: m for m in metrics_list}

        comparison = {}
        if not candidates:
            return comparison

        for metric, higher_is_better in self.METRICS.items():
            values = {name: getattr(m, metric) for name, m in candidates.items()}
            chooser = max if higher_is_better else min
            best = chooser(values, key=lambda name: values[name])
            comparison[metric] = {'best': best, 'value': values[best], 'values': values}
        return comparison

    def get_best_algorithm(self, metric: str = 'avg_turnaround_time') -> Optional[str]:
        """Name of the best algorithm for a metric, or None without results."""
        if metric not in self.METRICS:
            raise ValueError(f"Unknown metric: {metric}")
        comparison = self.compare()
        if not comparison:
            return None
        return comparison[metric]['best']

    def generate_report(self) -> str:
        """
        Generate a fixed-width text comparison table.

        Returns:
            Report string with one row per algorithm
        """
        if not self.results:
            return "No results to compare."

        lines = [
            "=" * 96,
            "ALGORITHM COMPARISON",
            "=" * 96,
            f"{'Algorithm':<40}{'Avg TAT':>9}{'Avg WT':>9}{'Avg RT':>9}{'CPU %':>9}{'Thru':>8}{'Ctx':>6}{'Jain':>6}",
            "-" * 96,
        ]
        for name, m in self.results.items():
            lines.append(
                f"{name[:39]:<40}{m.avg_turnaround_time:>9.2f}{m.avg_waiting_time:>9.2f}"
                f"{m.avg_response_time:>9.2f}{m.cpu_utilization * 100:>9.1f}"
                f"{m.throughput:>8.3f}{m.context_switches:>6}{m.jains_fairness_index:>6.2f}"
            )
        lines.append("-" * 96)

        for metric, info in self.compare().items():
            lines.append(f"Best {metric}: {info['best']}")
        lines.append("=" * 96)
        return "\n".join(lines)
