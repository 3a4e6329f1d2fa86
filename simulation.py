"""
Simulation Engine Module for CPU Scheduling Simulator

This module provides the core simulation engine: a single virtual clock that
drives any scheduling policy over a set of processes and records the
resulting timeline and metrics.

The simulation follows a discrete event model:
1. Admit every process whose arrival time has been reached
2. If nothing is ready, jump the clock to the next arrival (CPU idle)
3. Otherwise ask the policy for a dispatch and run it
   - Execution: the process runs for the dispatch length
   - Timeline: a segment is appended (or merged with the previous one)
   - Completion: finish, turnaround, waiting and response times are recorded
4. Admit arrivals that happened during the dispatch, then let the policy
   requeue, demote or drop the process
5. Continue until every process has completed

OS Concepts:
- Discrete Event Simulation models OS behavior step by step
- Time slicing in CPU scheduling
- Process state transitions
- Context switches and idle time

Author: Student
Date: December 2024
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Sequence
import logging

from config import (
    SchedulingAlgorithm,
    SimulationConfig,
    DEFAULT_SIMULATION_CONFIG,
    IDLE_REASON
)
from process import Process, ProcessGenerator, clone_processes
from scheduling_algorithms import SchedulingPolicy, SchedulerFactory
from timeline import Timeline, IDLE, Running
from metrics import (
    MetricsCalculator,
    MetricsComparator,
    ProcessMetrics,
    SystemMetrics
)
from validators import (
    ProcessError,
    SimulationError,
    ProcessValidator,
    log_validation_result
)


logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """
    Complete results of a simulation run.

    Contains all data needed for analysis, rendering and comparison.
    Processes are independent copies sorted by pid.
    """
    algorithm_name: str
    processes: List[Process]
    timeline: Timeline
    process_metrics: List[ProcessMetrics]
    system_metrics: SystemMetrics
    total_time: int
    policy_statistics: Dict[str, Any] = field(default_factory=dict)

    def get_process(self, pid: int) -> Optional[Process]:
        for process in self.processes:
            if process.pid == pid:
                return process
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for export."""
        return {
            'algorithm': self.algorithm_name,
            'processes': [p.to_dict() for p in self.processes],
            'timeline': self.timeline.to_list(),
            'metrics': self.system_metrics.to_dict(),
        }


class SimulationEngine:
    """
    Core simulation engine for CPU scheduling.

    This class manages one simulation run at a time:
    - Working copies of the input processes (the caller's list is untouched)
    - The virtual clock and arrival admission
    - Dispatch execution and timeline construction
    - Metrics collection

    Usage:
        engine = SimulationEngine(config)
        result = engine.run(processes)
        # or with an explicit policy:
        result = engine.run(processes, RoundRobinPolicy(quantum=3))
    """

    def __init__(self, config: SimulationConfig = None):
        """
        Initialize the simulation engine.

        Args:
            config: Simulation configuration (algorithm, quantum, queues)
        """
        self.config = config or DEFAULT_SIMULATION_CONFIG
        self.config.validate()

    def run(self, processes: Sequence[Process], policy: SchedulingPolicy = None) -> SimulationResult:
        """
        Run a complete simulation.

        Args:
            processes: Processes to schedule (not mutated)
            policy: Scheduling policy (built from the configuration if None)

        Returns:
            SimulationResult containing timeline, processes and metrics

        Raises:
            ProcessError: If the process set is invalid
            SimulationError: If an internal invariant is violated
        """
        validation = ProcessValidator.validate_process_set(processes)
        log_validation_result(validation, "processes")
        if not validation.is_valid:
            raise ProcessError("; ".join(validation.errors), "processes")

        if policy is None:
            policy = SchedulerFactory.create_policy(self.config.algorithm, self.config)
        else:
            policy.reset()

        work = clone_processes(processes)
        pending = sorted(work, key=lambda p: (p.arrival_time, p.input_order))
        timeline = Timeline()
        calculator = MetricsCalculator()

        current_time = 0
        running: Optional[Process] = None
        unfinished = len(work)
        next_arrival = 0

        max_iterations = max(p.arrival_time for p in work) + sum(p.burst_time for p in work) + 1
        iterations = 0

        logger.info(f"Starting {policy.algorithm_name} with {len(work)} processes")

        while unfinished > 0:
            iterations += 1
            if iterations > max_iterations:
                raise SimulationError(f"No progress after {max_iterations} decisions")

            # Step 1: Admit arrivals
            next_arrival = self._admit_arrivals(policy, pending, next_arrival, current_time)

            # Step 2: Idle until the next arrival
            if not policy.has_ready():
                if next_arrival >= len(pending):
                    raise SimulationError(
                        f"{unfinished} processes unfinished at t={current_time} but none will arrive"
                    )
                idle_until = pending[next_arrival].arrival_time
                if idle_until <= current_time:
                    raise SimulationError(f"Arrival at t={idle_until} was not admitted")
                timeline.append(IDLE, current_time, idle_until, reason=IDLE_REASON)
                logger.debug(f"t={current_time}: CPU idle until {idle_until}")
                current_time = idle_until
                running = None
                continue

            # Step 3: Dispatch
            dispatch = policy.select(current_time, running)
            if dispatch is None:
                raise SimulationError(f"{policy.algorithm_name} returned no dispatch with ready processes")

            process = dispatch.process
            run_time = min(dispatch.run_time, process.remaining_time)
            if run_time < 1:
                raise SimulationError(f"Dispatch of P{process.pid} has run length {run_time}")
            dispatch.run_time = run_time

            process.set_running(current_time)
            executed = process.execute(run_time)
            if executed != run_time:
                raise SimulationError(f"P{process.pid} executed {executed} of {run_time} units")

            start_time = current_time
            current_time += run_time
            timeline.append(
                Running(process.pid), start_time, current_time,
                queue_id=dispatch.queue_id, reason=dispatch.reason
            )
            logger.debug(f"t={start_time}-{current_time}: P{process.pid} ({dispatch.reason})")

            # Step 4: Completion bookkeeping
            if process.remaining_time == 0:
                calculator.finalize_process(process, current_time)
                unfinished -= 1
                running = None
            else:
                process.preempt()
                running = process

            # Step 5: Arrivals during the dispatch, then requeue/demote
            next_arrival = self._admit_arrivals(policy, pending, next_arrival, current_time)
            policy.on_dispatch_complete(dispatch, current_time)

        ordered = sorted(work, key=lambda p: p.pid)
        algorithm_name = policy.algorithm_name
        result = SimulationResult(
            algorithm_name=algorithm_name,
            processes=ordered,
            timeline=timeline,
            process_metrics=[calculator.calculate_process_metrics(p) for p in ordered],
            system_metrics=calculator.calculate_system_metrics(ordered, timeline, algorithm_name),
            total_time=current_time,
            policy_statistics=policy.get_statistics(),
        )

        logger.info(
            f"{algorithm_name} finished at t={current_time}: "
            f"avg TAT={result.system_metrics.avg_turnaround_time:.2f}, "
            f"avg WT={result.system_metrics.avg_waiting_time:.2f}"
        )
        return result

    @staticmethod
    def _admit_arrivals(policy: SchedulingPolicy, pending: List[Process],
                        next_arrival: int, current_time: int) -> int:
        """
        Admit every pending process that has arrived by current_time.

        Args:
            pending: Processes sorted by (arrival_time, input_order)
            next_arrival: Index of the first process not yet admitted

        Returns:
            Index of the first process still not admitted
        """
        while next_arrival < len(pending) and pending[next_arrival].arrival_time <= current_time:
            policy.admit(pending[next_arrival], current_time)
            next_arrival += 1
        return next_arrival


class BatchSimulator:
    """
    Run multiple simulations for algorithm comparison.

    This class helps compare different scheduling algorithms by running
    the same workload with each algorithm. Every run gets its own engine,
    policy and process copies.
    """

    def __init__(self, config: SimulationConfig = None):
        """
        Initialize batch simulator.

        Args:
            config: Base configuration for simulations
        """
        self.config = config or DEFAULT_SIMULATION_CONFIG
        self.results: Dict[SchedulingAlgorithm, SimulationResult] = {}
        self.comparator = MetricsComparator()

    def run_comparison(self, processes: Sequence[Process] = None,
                       algorithms: List[SchedulingAlgorithm] = None) -> Dict[str, SimulationResult]:
        """
        Run simulation with multiple algorithms.

        Args:
            processes: Processes to use (generates from config if None)
            algorithms: List of algorithms to compare (defaults to all)

        Returns:
            Dictionary mapping algorithm names to results
        """
        if algorithms is None:
            algorithms = list(SchedulingAlgorithm)

        # Generate processes once for fair comparison
        if processes is None:
            generator = ProcessGenerator(config=self.config)
            processes = generator.generate_processes(self.config.num_processes)

        self.results.clear()
        self.comparator.clear()

        engine = SimulationEngine(self.config)
        for algorithm in algorithms:
            policy = SchedulerFactory.create_policy(algorithm, self.config)
            result = engine.run(processes, policy)

            self.results[algorithm] = result
            self.comparator.add_result(result.algorithm_name, result.system_metrics)

        return {result.algorithm_name: result for result in self.results.values()}

    def get_comparison_report(self) -> str:
        """Generate comparison report."""
        return self.comparator.generate_report()

    def get_best_algorithm(self, metric: str = 'avg_turnaround_time') -> Optional[str]:
        """Get best algorithm for a metric."""
        return self.comparator.get_best_algorithm(metric)


# =============================================================================
# MODULE TEST
# =============================================================================

if __name__ == "__main__":
    print("=" * 70)
    print("Simulation Engine Module Test")
    print("=" * 70)

    config = SimulationConfig(algorithm=SchedulingAlgorithm.ROUND_ROBIN, time_quantum=2, seed=7)
    processes = ProcessGenerator(config).generate_predefined_test_set()

    print("\n" + "-" * 70)
    print("1. Testing Single Simulation Run")
    print("-" * 70)

    result = SimulationEngine(config).run(processes)
    print(f"\nAlgorithm: {result.algorithm_name}")
    print(f"Total Time: {result.total_time}")
    print(f"Timeline: {result.timeline}")
    print(f"\nSystem Metrics:")
    print(f"  Avg Turnaround: {result.system_metrics.avg_turnaround_time:.2f}")
    print(f"  Avg Waiting: {result.system_metrics.avg_waiting_time:.2f}")
    print(f"  CPU Utilization: {result.system_metrics.cpu_utilization*100:.1f}%")
    print(f"  Jain's Fairness: {result.system_metrics.jains_fairness_index:.4f}")

    print("\n" + "-" * 70)
    print("2. Testing Batch Comparison")
    print("-" * 70)

    batch = BatchSimulator(config)
    batch.run_comparison(processes)
    print(batch.get_comparison_report())
    print(f"\nBest for turnaround: {batch.get_best_algorithm()}")
