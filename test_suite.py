"""
Comprehensive Test Suite for CPU Scheduling Simulator

This module provides unit tests, integration tests, and scenario tests for
all components of the CPU scheduling simulation system.

Test Categories:
1. Unit Tests: Configuration, processes, timeline, parser, metrics
2. Algorithm Tests: Known schedules for every scheduling policy
3. Property Tests: Invariants that hold for every policy and workload
4. Integration Tests: Playback, rendering, export and the command line
5. Edge Case Tests: Invalid input and configuration errors

Testing Framework: unittest (Python standard library)

Author: Student
Date: December 2024
"""

import unittest
import sys
import os
import io
import csv
import json
import logging
import tempfile
import threading
from contextlib import redirect_stdout, redirect_stderr
from typing import List, Tuple

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Import project modules
from config import (
    ProcessState,
    SchedulingAlgorithm,
    QueueAlgorithm,
    QueueConfig,
    SimulationConfig,
    PlaybackConfig,
    IDLE_REASON
)
from process import Process, ProcessGenerator, clone_processes
from timeline import Timeline, TimelineSegment, IDLE, Running
from scheduling_algorithms import (
    SchedulerFactory,
    RoundRobinPolicy,
    MultilevelQueuePolicy,
    MLFQPolicy
)
from simulation import SimulationEngine, SimulationResult, BatchSimulator
from metrics import (
    ProcessMetrics,
    SystemMetrics,
    MetricsCalculator,
    MetricsComparator
)
from validators import (
    ValidationError,
    ConfigurationError,
    UnsupportedConfigurationError,
    ProcessError,
    SimulationError,
    ValidationResult,
    ProcessValidator,
    TimelineValidator,
    InputParser
)
from playback import PlaybackSession, expand_timeline
from visualization import format_text_gantt, format_results_table, GanttChartRenderer
from utils import DataExporter
import main as cli

# Disable logging during tests unless debugging
logging.disable(logging.CRITICAL)


# =============================================================================
# HELPERS
# =============================================================================

def make_processes(*rows) -> List[Process]:
    """Build processes from (arrival, burst[, priority[, queue_id]]) tuples, pids 1..n."""
    processes = []
    for index, entry in enumerate(rows):
        arrival, burst = entry[0], entry[1]
        priority = entry[2] if len(entry) > 2 else 0
        queue_id = entry[3] if len(entry) > 3 else None
        processes.append(Process(
            pid=index + 1,
            arrival_time=arrival,
            burst_time=burst,
            priority=priority,
            queue_id=queue_id
        ))
    return processes


def simulate(algorithm: SchedulingAlgorithm, processes: List[Process], **config_kwargs) -> SimulationResult:
    config = SimulationConfig(algorithm=algorithm, **config_kwargs)
    return SimulationEngine(config).run(processes)


def schedule(result: SimulationResult) -> List[Tuple]:
    """Timeline as (pid or 'idle', start, end) tuples."""
    return [
        ('idle' if s.is_idle else s.pid, s.start_time, s.end_time)
        for s in result.timeline
    ]


def queued_schedule(result: SimulationResult) -> List[Tuple]:
    """Timeline as (pid, start, end, queue_id) tuples."""
    return [
        ('idle' if s.is_idle else s.pid, s.start_time, s.end_time, s.queue_id)
        for s in result.timeline
    ]


def rr_queues(*quanta) -> Tuple[QueueConfig, ...]:
    return tuple(QueueConfig(QueueAlgorithm.RR, quantum=q) for q in quanta)


# =============================================================================
# TEST CONFIGURATION
# =============================================================================

class TestConfig(unittest.TestCase):
    """Test configuration module and data classes."""

    def test_process_state_enum_values(self):
        """Test that all process states are defined."""
        states = [ProcessState.NEW, ProcessState.READY, ProcessState.RUNNING, ProcessState.COMPLETED]
        self.assertEqual(len(set(states)), 4)

    def test_algorithm_tags_round_trip(self):
        """Every algorithm can be looked up by its tag."""
        for algorithm in SchedulingAlgorithm:
            self.assertIs(SchedulingAlgorithm.from_tag(algorithm.tag), algorithm)
        self.assertIs(SchedulingAlgorithm.from_tag(" RR "), SchedulingAlgorithm.ROUND_ROBIN)

    def test_unknown_algorithm_tag(self):
        with self.assertRaises(ValueError):
            SchedulingAlgorithm.from_tag("lottery")

    def test_simulation_config_defaults(self):
        """Test default configuration values."""
        config = SimulationConfig()
        self.assertEqual(config.algorithm, SchedulingAlgorithm.FCFS)
        self.assertEqual(config.time_quantum, 2)
        self.assertEqual(config.queues, rr_queues(2, 4))
        self.assertTrue(config.validate())

    def test_simulation_config_rejects_bad_quantum(self):
        with self.assertRaises(ConfigurationError):
            SimulationConfig(time_quantum=0).validate()

    def test_simulation_config_requires_queues_for_mq(self):
        config = SimulationConfig(algorithm=SchedulingAlgorithm.MULTILEVEL_QUEUE, queues=())
        with self.assertRaises(ConfigurationError):
            config.validate()

    def test_simulation_config_dict_round_trip(self):
        """to_dict/from_dict preserve algorithm and queues."""
        config = SimulationConfig(
            algorithm=SchedulingAlgorithm.MLFQ,
            queues=(QueueConfig(QueueAlgorithm.RR, 3), QueueConfig(QueueAlgorithm.FCFS, 5)),
            seed=9
        )
        restored = SimulationConfig.from_dict(config.to_dict())
        self.assertEqual(restored.algorithm, SchedulingAlgorithm.MLFQ)
        self.assertEqual(restored.queues, config.queues)
        self.assertEqual(restored.seed, 9)

    def test_from_dict_names_offending_queue(self):
        """Queue errors from a dict carry the index of the bad queue."""
        cases = [
            [{'algorithm': 'rr', 'quantum': 2}, {'algorithm': 'bogus'}],
            [{'algorithm': 'fcfs'}, {'algorithm': 'rr'}],
        ]
        for queues in cases:
            with self.assertRaises(UnsupportedConfigurationError) as ctx:
                SimulationConfig.from_dict({'queues': queues})
            self.assertEqual(ctx.exception.queue_index, 1)
            self.assertEqual(ctx.exception.field, "queues[1]")

    def test_mlfq_config_requires_quantum_per_level(self):
        config = SimulationConfig(
            algorithm=SchedulingAlgorithm.MLFQ,
            queues=(QueueConfig(QueueAlgorithm.RR, 2), QueueConfig(QueueAlgorithm.FCFS))
        )
        with self.assertRaises(UnsupportedConfigurationError) as ctx:
            config.validate()
        self.assertEqual(ctx.exception.queue_index, 1)

    def test_mq_config_accepts_levels_without_quantum(self):
        config = SimulationConfig(
            algorithm=SchedulingAlgorithm.MULTILEVEL_QUEUE,
            queues=(QueueConfig(QueueAlgorithm.RR, 2), QueueConfig(QueueAlgorithm.FCFS))
        )
        self.assertTrue(config.validate())

    def test_playback_config_delays(self):
        config = PlaybackConfig()
        self.assertEqual(config.default_speed, 3)
        self.assertAlmostEqual(config.get_delay(1), 4.0)
        self.assertAlmostEqual(config.get_delay(3), 1.0)
        self.assertAlmostEqual(config.get_delay(5), 0.5)
        self.assertEqual(config.speed_labels[4], "1.5x")


class TestQueueConfig(unittest.TestCase):
    """Test queue configuration validation at construction."""

    def test_rr_requires_quantum(self):
        with self.assertRaises(UnsupportedConfigurationError):
            QueueConfig(QueueAlgorithm.RR)

    def test_quantum_must_be_positive(self):
        with self.assertRaises(UnsupportedConfigurationError):
            QueueConfig(QueueAlgorithm.RR, quantum=0)

    def test_algorithm_must_be_enum(self):
        with self.assertRaises(UnsupportedConfigurationError):
            QueueConfig("lottery")

    def test_fcfs_without_quantum(self):
        queue = QueueConfig(QueueAlgorithm.FCFS)
        self.assertIsNone(queue.quantum)
        self.assertEqual(queue.label, "FCFS")

    def test_from_dict_unknown_algorithm(self):
        with self.assertRaises(UnsupportedConfigurationError):
            QueueConfig.from_dict({'algorithm': 'lottery'})

    def test_is_immutable(self):
        queue = QueueConfig(QueueAlgorithm.RR, quantum=2)
        with self.assertRaises(Exception):
            queue.quantum = 5


# =============================================================================
# TEST PROCESS MODULE
# =============================================================================

class TestProcess(unittest.TestCase):
    """Test Process class and related functionality."""

    def test_process_creation(self):
        """Test basic process creation."""
        process = Process(pid=1, arrival_time=0, burst_time=10)
        self.assertEqual(process.pid, 1)
        self.assertEqual(process.remaining_time, 10)
        self.assertEqual(process.priority, 0)
        self.assertEqual(process.state, ProcessState.NEW)
        self.assertIsNone(process.finish_time)

    def test_state_transitions(self):
        """NEW -> READY -> RUNNING -> READY -> RUNNING -> COMPLETED."""
        process = Process(pid=1, arrival_time=0, burst_time=3)
        process.set_ready()
        self.assertTrue(process.is_ready())
        process.set_running(2)
        self.assertEqual(process.state, ProcessState.RUNNING)
        self.assertEqual(process.first_run_time, 2)
        self.assertEqual(process.execute(1), 1)
        process.preempt()
        self.assertEqual(process.state, ProcessState.READY)
        process.set_running(5)
        self.assertEqual(process.first_run_time, 2)
        self.assertEqual(process.execute(10), 2)
        process.set_completed(7)
        self.assertTrue(process.is_completed())
        self.assertEqual(process.finish_time, 7)
        self.assertEqual(process.remaining_time, 0)

    def test_execute_requires_running(self):
        process = Process(pid=1, burst_time=3)
        self.assertEqual(process.execute(2), 0)
        self.assertEqual(process.remaining_time, 3)

    def test_progress(self):
        process = Process(pid=1, burst_time=4)
        process.set_ready()
        process.set_running(0)
        process.execute(1)
        self.assertAlmostEqual(process.get_progress(), 0.25)

    def test_equality_by_pid(self):
        self.assertEqual(Process(pid=1, burst_time=2), Process(pid=1, burst_time=9))
        self.assertNotEqual(Process(pid=1), Process(pid=2))
        self.assertEqual(len({Process(pid=1), Process(pid=1)}), 1)

    def test_clone_processes_does_not_mutate(self):
        originals = make_processes((0, 3), (1, 2))
        clones = clone_processes(originals)
        clones[0].set_ready()
        clones[0].set_running(0)
        clones[0].execute(3)
        self.assertEqual(originals[0].remaining_time, 3)
        self.assertEqual(originals[0].state, ProcessState.NEW)
        self.assertEqual([c.input_order for c in clones], [0, 1])

    def test_to_dict(self):
        data = Process(pid=3, arrival_time=1, burst_time=2, priority=4, queue_id=2).to_dict()
        self.assertEqual(data['pid'], 3)
        self.assertEqual(data['priority'], 4)
        self.assertEqual(data['queue_id'], 2)
        self.assertEqual(data['state'], 'NEW')


class TestProcessGenerator(unittest.TestCase):
    """Test ProcessGenerator class."""

    def test_generate_within_ranges(self):
        config = SimulationConfig(num_processes=20, seed=1, max_burst_time=6, max_arrival_time=8)
        processes = ProcessGenerator(config).generate_processes()
        self.assertEqual(len(processes), 20)
        self.assertEqual([p.pid for p in processes], list(range(1, 21)))
        for p in processes:
            self.assertTrue(1 <= p.burst_time <= 6)
            self.assertTrue(0 <= p.arrival_time <= 8)
            self.assertTrue(1 <= p.queue_id <= config.num_queues)

    def test_seed_is_reproducible(self):
        config = SimulationConfig(seed=42)
        first = ProcessGenerator(config).generate_processes(10)
        second = ProcessGenerator(config).generate_processes(10)
        self.assertEqual(
            [(p.arrival_time, p.burst_time, p.priority) for p in first],
            [(p.arrival_time, p.burst_time, p.priority) for p in second]
        )

    def test_predefined_test_set(self):
        processes = ProcessGenerator().generate_predefined_test_set()
        self.assertEqual(len(processes), 10)
        self.assertEqual(processes[0].burst_time, 8)


# =============================================================================
# TEST TIMELINE MODULE
# =============================================================================

class TestTimeline(unittest.TestCase):
    """Test Timeline append-or-merge behaviour."""

    def test_append_merges_same_occupant(self):
        timeline = Timeline()
        timeline.append(Running(1), 0, 1, reason="first")
        timeline.append(Running(1), 1, 3, reason="second")
        self.assertEqual(len(timeline), 1)
        self.assertEqual(timeline[0].end_time, 3)
        self.assertEqual(timeline[0].reason, "first")

    def test_different_queue_does_not_merge(self):
        timeline = Timeline()
        timeline.append(Running(1), 0, 2, queue_id=1)
        timeline.append(Running(1), 2, 4, queue_id=2)
        self.assertEqual(len(timeline), 2)
        self.assertTrue(timeline.has_queues)
        self.assertEqual(timeline.queue_ids(), [1, 2])

    def test_idle_segments_merge(self):
        timeline = Timeline()
        timeline.append(IDLE, 0, 2)
        timeline.append(IDLE, 2, 5)
        self.assertEqual(len(timeline), 1)
        self.assertTrue(timeline[0].is_idle)
        self.assertIsNone(timeline[0].pid)

    def test_rejects_gap(self):
        timeline = Timeline()
        timeline.append(Running(1), 0, 2)
        with self.assertRaises(SimulationError):
            timeline.append(Running(2), 3, 4)

    def test_rejects_empty_segment(self):
        with self.assertRaises(SimulationError):
            Timeline().append(Running(1), 0, 0)

    def test_must_start_at_zero(self):
        with self.assertRaises(SimulationError):
            Timeline().append(Running(1), 1, 2)

    def test_busy_and_idle_time(self):
        timeline = Timeline()
        timeline.append(IDLE, 0, 2)
        timeline.append(Running(1), 2, 5)
        timeline.append(Running(2), 5, 6)
        timeline.append(Running(1), 6, 8)
        self.assertEqual(timeline.busy_time(), 6)
        self.assertEqual(timeline.idle_time(), 2)
        self.assertEqual(timeline.busy_time_for(1), 5)
        self.assertEqual(timeline.count_context_switches(), 2)
        self.assertEqual(timeline.occupant_at(5).pid, 2)
        self.assertIsNone(timeline.occupant_at(8))

    def test_segment_to_dict(self):
        segment = TimelineSegment(IDLE, 0, 2, reason=IDLE_REASON)
        self.assertEqual(segment.to_dict()['process_id'], 'idle')
        self.assertEqual(TimelineSegment(Running(4), 2, 3, 1).to_dict()['process_id'], 4)


# =============================================================================
# TEST VALIDATORS AND PARSER
# =============================================================================

class TestValidators(unittest.TestCase):
    """Test validation results and validators."""

    def test_validation_result_merge(self):
        result = ValidationResult.success()
        result.merge(ValidationResult.failure("bad"))
        self.assertFalse(result)
        self.assertEqual(result.errors, ["bad"])

    def test_error_message_format(self):
        error = ProcessError("must be positive", "burst_time", 0)
        self.assertIn("burst_time", str(error))
        self.assertIsInstance(error, ValidationError)

    def test_unsupported_configuration_carries_queue_index(self):
        error = UnsupportedConfigurationError("bad queue", queue_index=2)
        self.assertEqual(error.queue_index, 2)
        self.assertIsInstance(error, ConfigurationError)
        self.assertIn("queues[2]", str(error))

    def test_process_set_validation(self):
        self.assertTrue(ProcessValidator.validate_process_set(make_processes((0, 1), (2, 3))))
        self.assertFalse(ProcessValidator.validate_process_set([]))
        duplicate = [Process(pid=1, burst_time=1), Process(pid=1, burst_time=2)]
        self.assertFalse(ProcessValidator.validate_process_set(duplicate))
        self.assertFalse(ProcessValidator.validate_process_set([Process(pid=1, burst_time=0)]))
        self.assertFalse(ProcessValidator.validate_process_set([Process(pid=1, arrival_time=-1)]))

    def test_timeline_validator_detects_gap(self):
        processes = [Process(pid=1, burst_time=4)]
        segments = [TimelineSegment(Running(1), 0, 2), TimelineSegment(Running(1), 3, 5)]
        result = TimelineValidator.validate(segments, processes)
        self.assertFalse(result.is_valid)

    def test_timeline_validator_detects_burst_mismatch(self):
        processes = [Process(pid=1, burst_time=4)]
        segments = [TimelineSegment(Running(1), 0, 3)]
        self.assertFalse(TimelineValidator.validate(segments, processes))

    def test_timeline_validator_detects_unmerged(self):
        processes = [Process(pid=1, burst_time=4)]
        segments = [TimelineSegment(Running(1), 0, 2), TimelineSegment(Running(1), 2, 4)]
        self.assertFalse(TimelineValidator.validate(segments, processes))


class TestInputParser(unittest.TestCase):
    """Test text input parsing."""

    def test_parse_processes_with_defaults(self):
        processes = InputParser.parse_processes("0 1 2", "5 3 8")
        self.assertEqual([p.pid for p in processes], [1, 2, 3])
        self.assertEqual([p.burst_time for p in processes], [5, 3, 8])
        self.assertEqual([p.priority for p in processes], [0, 0, 0])
        self.assertEqual([p.queue_id for p in processes], [1, 1, 1])

    def test_parse_processes_with_all_fields(self):
        processes = InputParser.parse_processes("0, 1", "4, 2", "2 1", "2 1")
        self.assertEqual([p.priority for p in processes], [2, 1])
        self.assertEqual([p.queue_id for p in processes], [2, 1])

    def test_parse_processes_accepts_sequences(self):
        processes = InputParser.parse_processes([0, 3], [1, 1])
        self.assertEqual(processes[1].arrival_time, 3)

    def test_count_mismatch(self):
        with self.assertRaises(ProcessError):
            InputParser.parse_processes("0 1", "5")

    def test_non_numeric(self):
        with self.assertRaises(ProcessError):
            InputParser.parse_processes("0 a", "1 2")

    def test_negative_arrival(self):
        with self.assertRaises(ProcessError):
            InputParser.parse_processes("-1", "2")

    def test_non_positive_burst(self):
        with self.assertRaises(ProcessError):
            InputParser.parse_processes("0", "0")

    def test_priority_count_mismatch(self):
        with self.assertRaises(ProcessError):
            InputParser.parse_processes("0 1", "1 1", priorities="1")

    def test_empty_input(self):
        with self.assertRaises(ProcessError):
            InputParser.parse_processes("", "")

    def test_parse_queue_configs(self):
        queues = InputParser.parse_queue_configs("rr:2 fcfs priority-p")
        self.assertEqual(queues[0], QueueConfig(QueueAlgorithm.RR, 2))
        self.assertEqual(queues[1].algorithm, QueueAlgorithm.FCFS)
        self.assertEqual(queues[2].algorithm, QueueAlgorithm.PRIORITY_PREEMPTIVE)

    def test_parse_queue_configs_errors_name_the_queue(self):
        cases = {"rr:2 lottery": 1, "rr": 0, "fcfs rr:x": 1, "rr:0": 0}
        for text, index in cases.items():
            with self.assertRaises(UnsupportedConfigurationError) as ctx:
                InputParser.parse_queue_configs(text)
            self.assertEqual(ctx.exception.queue_index, index, text)

    def test_parse_queue_configs_empty(self):
        with self.assertRaises(ConfigurationError):
            InputParser.parse_queue_configs("  ")


# =============================================================================
# TEST SCHEDULING ALGORITHMS
# =============================================================================

class TestFCFS(unittest.TestCase):
    """Test First Come First Served."""

    def test_known_schedule(self):
        result = simulate(SchedulingAlgorithm.FCFS, make_processes((0, 5), (1, 3), (2, 8)))
        self.assertEqual(schedule(result), [(1, 0, 5), (2, 5, 8), (3, 8, 16)])
        self.assertEqual([p.finish_time for p in result.processes], [5, 8, 16])
        self.assertEqual([p.waiting_time for p in result.processes], [0, 4, 6])
        self.assertAlmostEqual(result.system_metrics.avg_turnaround_time, 26 / 3)
        self.assertAlmostEqual(result.system_metrics.avg_waiting_time, 10 / 3)

    def test_ties_broken_by_input_order(self):
        processes = [Process(pid=7, arrival_time=0, burst_time=2), Process(pid=3, arrival_time=0, burst_time=1)]
        result = simulate(SchedulingAlgorithm.FCFS, processes)
        self.assertEqual(schedule(result), [(7, 0, 2), (3, 2, 3)])
        self.assertEqual([p.pid for p in result.processes], [3, 7])


class TestSJF(unittest.TestCase):
    """Test Shortest Job First."""

    def test_known_schedule(self):
        result = simulate(SchedulingAlgorithm.SJF, make_processes((0, 8), (1, 4), (2, 9), (3, 5)))
        self.assertEqual(schedule(result), [(1, 0, 8), (2, 8, 12), (4, 12, 17), (3, 17, 26)])


class TestSRTF(unittest.TestCase):
    """Test Shortest Remaining Time First."""

    def test_known_schedule(self):
        result = simulate(SchedulingAlgorithm.SRTF, make_processes((0, 8), (1, 4), (2, 9), (3, 5)))
        self.assertEqual(
            schedule(result),
            [(1, 0, 1), (2, 1, 5), (4, 5, 10), (1, 10, 17), (3, 17, 26)]
        )
        self.assertAlmostEqual(result.system_metrics.avg_waiting_time, 6.5)

    def test_running_process_keeps_cpu_on_tie(self):
        # At t=1 both have 2 units left; P1 arrived first and keeps running
        result = simulate(SchedulingAlgorithm.SRTF, make_processes((0, 3), (1, 2)))
        self.assertEqual(schedule(result), [(1, 0, 3), (2, 3, 5)])


class TestRoundRobin(unittest.TestCase):
    """Test Round Robin."""

    def test_known_schedule(self):
        result = simulate(
            SchedulingAlgorithm.ROUND_ROBIN, make_processes((0, 5), (1, 3), (2, 1)), time_quantum=2
        )
        self.assertEqual(
            schedule(result),
            [(1, 0, 2), (2, 2, 4), (3, 4, 5), (1, 5, 7), (2, 7, 8), (1, 8, 9)]
        )

    def test_arrival_enters_before_requeued_process(self):
        result = simulate(SchedulingAlgorithm.ROUND_ROBIN, make_processes((0, 4), (2, 2)), time_quantum=2)
        self.assertEqual(schedule(result), [(1, 0, 2), (2, 2, 4), (1, 4, 6)])

    def test_finish_on_quantum_boundary_not_requeued(self):
        result = simulate(SchedulingAlgorithm.ROUND_ROBIN, make_processes((0, 2), (0, 3)), time_quantum=2)
        self.assertEqual(schedule(result), [(1, 0, 2), (2, 2, 5)])
        self.assertEqual(result.processes[0].finish_time, 2)

    def test_explicit_policy(self):
        result = SimulationEngine().run(make_processes((0, 5), (0, 5)), RoundRobinPolicy(quantum=3))
        self.assertEqual(schedule(result), [(1, 0, 3), (2, 3, 6), (1, 6, 8), (2, 8, 10)])

    def test_quantum_expiry_is_not_a_preemption(self):
        result = simulate(
            SchedulingAlgorithm.ROUND_ROBIN, make_processes((0, 5), (1, 3), (2, 1)), time_quantum=2
        )
        self.assertEqual(result.policy_statistics['preemptions'], 0)
        self.assertEqual(result.policy_statistics['quantum_expirations'], 3)
        self.assertIn("P1 used up its quantum.", result.timeline[1].reason)
        self.assertNotIn("Preempted", result.timeline[1].reason)

    def test_invalid_quantum(self):
        with self.assertRaises(ValidationError):
            RoundRobinPolicy(quantum=0)


class TestPriority(unittest.TestCase):
    """Test both Priority variants."""

    def test_non_preemptive(self):
        result = simulate(SchedulingAlgorithm.PRIORITY, make_processes((0, 4, 3), (1, 3, 1), (2, 2, 2)))
        self.assertEqual(schedule(result), [(1, 0, 4), (2, 4, 7), (3, 7, 9)])

    def test_preemptive_requires_strictly_better_priority(self):
        processes = make_processes((0, 4, 2), (1, 2, 2), (2, 2, 1))
        result = simulate(SchedulingAlgorithm.PRIORITY_PREEMPTIVE, processes)
        self.assertEqual(schedule(result), [(1, 0, 2), (3, 2, 4), (1, 4, 6), (2, 6, 8)])
        self.assertEqual(result.policy_statistics['preemptions'], 1)


class TestMultilevelQueue(unittest.TestCase):
    """Test Multilevel Queue scheduling."""

    def test_dispatch_not_interrupted_by_higher_queue(self):
        queues = (QueueConfig(QueueAlgorithm.RR, 2), QueueConfig(QueueAlgorithm.FCFS))
        processes = make_processes((0, 5, 0, 2), (1, 2, 0, 1))
        result = simulate(SchedulingAlgorithm.MULTILEVEL_QUEUE, processes, queues=queues)
        self.assertEqual(queued_schedule(result), [(1, 0, 5, 2), (2, 5, 7, 1)])

    def test_higher_queue_takes_over_at_next_decision(self):
        queues = (QueueConfig(QueueAlgorithm.FCFS), QueueConfig(QueueAlgorithm.SRTF))
        processes = make_processes((0, 4, 0, 2), (2, 1, 0, 1))
        result = simulate(SchedulingAlgorithm.MULTILEVEL_QUEUE, processes, queues=queues)
        self.assertEqual(queued_schedule(result), [(1, 0, 2, 2), (2, 2, 3, 1), (1, 3, 5, 2)])

    def test_queue_ids_are_clamped(self):
        queues = (QueueConfig(QueueAlgorithm.FCFS), QueueConfig(QueueAlgorithm.FCFS))
        processes = make_processes((0, 1, 0, 9), (1, 1, 0, 0))
        result = simulate(SchedulingAlgorithm.MULTILEVEL_QUEUE, processes, queues=queues)
        self.assertEqual(queued_schedule(result), [(1, 0, 1, 2), (2, 1, 2, 1)])

    def test_rr_queue_requeues_within_queue(self):
        queues = (QueueConfig(QueueAlgorithm.RR, 1),)
        result = simulate(
            SchedulingAlgorithm.MULTILEVEL_QUEUE, make_processes((0, 2), (0, 2)), queues=queues
        )
        self.assertEqual(queued_schedule(result), [(1, 0, 1, 1), (2, 1, 2, 1), (1, 2, 3, 1), (2, 3, 4, 1)])

    def test_rr_level_rotation_is_not_a_preemption(self):
        queues = (QueueConfig(QueueAlgorithm.RR, 1),)
        result = simulate(
            SchedulingAlgorithm.MULTILEVEL_QUEUE, make_processes((0, 2), (0, 2)), queues=queues
        )
        self.assertEqual(result.policy_statistics['preemptions'], 0)
        self.assertEqual(result.policy_statistics['quantum_expirations'], 2)

    def test_higher_queue_counts_as_preemption(self):
        queues = (QueueConfig(QueueAlgorithm.FCFS), QueueConfig(QueueAlgorithm.SRTF))
        processes = make_processes((0, 4, 0, 2), (2, 1, 0, 1))
        result = simulate(SchedulingAlgorithm.MULTILEVEL_QUEUE, processes, queues=queues)
        self.assertEqual(result.policy_statistics['preemptions'], 1)
        self.assertIn("Preempted P1.", result.timeline[1].reason)

    def test_reason_names_queue(self):
        result = simulate(SchedulingAlgorithm.MULTILEVEL_QUEUE, make_processes((0, 1)), queues=rr_queues(2))
        self.assertIn("Queue 1", result.timeline[0].reason)

    def test_empty_queue_list(self):
        with self.assertRaises(ConfigurationError):
            MultilevelQueuePolicy([])


class TestMLFQ(unittest.TestCase):
    """Test Multilevel Feedback Queue scheduling."""

    def test_demotion_without_promotion(self):
        result = simulate(SchedulingAlgorithm.MLFQ, make_processes((0, 10)), queues=rr_queues(2, 4))
        self.assertEqual(queued_schedule(result), [(1, 0, 2, 1), (1, 2, 10, 2)])
        self.assertEqual(result.policy_statistics['demotions'], 1)

    def test_new_arrivals_run_before_demoted_process(self):
        result = simulate(SchedulingAlgorithm.MLFQ, make_processes((0, 6), (1, 2)), queues=rr_queues(2, 4))
        self.assertEqual(queued_schedule(result), [(1, 0, 2, 1), (2, 2, 4, 1), (1, 4, 8, 2)])
        self.assertEqual([p.finish_time for p in result.processes], [8, 4])

    def test_lowest_queue_rotates(self):
        result = simulate(SchedulingAlgorithm.MLFQ, make_processes((0, 3), (0, 3)), queues=rr_queues(1, 1))
        self.assertEqual(
            queued_schedule(result),
            [(1, 0, 1, 1), (2, 1, 2, 1), (1, 2, 3, 2), (2, 3, 4, 2), (1, 4, 5, 2), (2, 5, 6, 2)]
        )

    def test_demotion_is_a_quantum_expiry(self):
        result = simulate(SchedulingAlgorithm.MLFQ, make_processes((0, 6), (1, 2)), queues=rr_queues(2, 4))
        self.assertEqual(result.policy_statistics['quantum_expirations'], 1)
        self.assertEqual(result.policy_statistics['preemptions'], 0)

    def test_arrival_in_higher_queue_preempts(self):
        result = simulate(SchedulingAlgorithm.MLFQ, make_processes((0, 6), (3, 1)), queues=rr_queues(2, 4))
        self.assertEqual(queued_schedule(result), [(1, 0, 2, 1), (1, 2, 3, 2), (2, 3, 4, 1), (1, 4, 7, 2)])
        self.assertEqual(result.policy_statistics['preemptions'], 1)
        self.assertEqual(result.policy_statistics['quantum_expirations'], 0)

    def test_every_level_needs_a_quantum(self):
        with self.assertRaises(UnsupportedConfigurationError) as ctx:
            MLFQPolicy([QueueConfig(QueueAlgorithm.RR, 2), QueueConfig(QueueAlgorithm.FCFS)])
        self.assertEqual(ctx.exception.queue_index, 1)

    def test_factory_surfaces_configuration_error(self):
        config = SimulationConfig(algorithm=SchedulingAlgorithm.MLFQ, queues=(QueueConfig(QueueAlgorithm.SJF),))
        with self.assertRaises(UnsupportedConfigurationError):
            SchedulerFactory.create_policy(SchedulingAlgorithm.MLFQ, config)


class TestSchedulerFactory(unittest.TestCase):
    """Test SchedulerFactory."""

    def test_creates_every_algorithm(self):
        for algorithm in SchedulerFactory.get_all_algorithms():
            policy = SchedulerFactory.create_policy(algorithm)
            self.assertTrue(policy.algorithm_name)

    def test_algorithm_info_covers_all(self):
        info = SchedulerFactory.get_algorithm_info()
        self.assertEqual(set(info), {a.value for a in SchedulingAlgorithm})

    def test_preemptive_flags(self):
        self.assertFalse(SchedulerFactory.create_policy(SchedulingAlgorithm.SJF).is_preemptive)
        self.assertTrue(SchedulerFactory.create_policy(SchedulingAlgorithm.SRTF).is_preemptive)


# =============================================================================
# TEST SIMULATION ENGINE
# =============================================================================

class TestSimulationEngine(unittest.TestCase):
    """Test the simulation clock and result."""

    def test_idle_placement(self):
        result = simulate(SchedulingAlgorithm.FCFS, make_processes((2, 3), (10, 1)))
        self.assertEqual(schedule(result), [('idle', 0, 2), (1, 2, 5), ('idle', 5, 10), (2, 10, 11)])
        self.assertEqual(result.timeline[0].reason, IDLE_REASON)
        self.assertAlmostEqual(result.system_metrics.cpu_utilization, 4 / 11)
        self.assertEqual(result.system_metrics.idle_time, 7)

    def test_input_not_mutated(self):
        processes = make_processes((0, 3), (1, 2))
        SimulationEngine().run(processes)
        self.assertEqual([p.remaining_time for p in processes], [3, 2])
        self.assertTrue(all(p.state == ProcessState.NEW for p in processes))
        self.assertTrue(all(p.finish_time is None for p in processes))

    def test_idempotent(self):
        processes = ProcessGenerator(SimulationConfig(seed=5)).generate_processes(8)
        for algorithm in SchedulingAlgorithm:
            config = SimulationConfig(algorithm=algorithm)
            engine = SimulationEngine(config)
            self.assertEqual(engine.run(processes).to_dict(), engine.run(processes).to_dict(), algorithm)

    def test_result_to_dict_shape(self):
        result = simulate(SchedulingAlgorithm.FCFS, make_processes((0, 1)))
        data = result.to_dict()
        self.assertEqual(set(data), {'algorithm', 'processes', 'timeline', 'metrics'})
        self.assertEqual(result.get_process(1).finish_time, 1)
        self.assertIsNone(result.get_process(99))

    def test_empty_process_list(self):
        with self.assertRaises(ProcessError):
            SimulationEngine().run([])

    def test_duplicate_pids(self):
        with self.assertRaises(ProcessError):
            SimulationEngine().run([Process(pid=1, burst_time=1), Process(pid=1, burst_time=1)])

    def test_zero_burst(self):
        with self.assertRaises(ProcessError):
            SimulationEngine().run([Process(pid=1, burst_time=0)])


class TestScheduleProperties(unittest.TestCase):
    """Invariants that hold for every algorithm on a mixed workload."""

    @classmethod
    def setUpClass(cls):
        config = SimulationConfig(num_processes=12, seed=123, max_arrival_time=20, max_burst_time=7)
        cls.processes = ProcessGenerator(config).generate_processes()
        cls.results = {
            algorithm: simulate(algorithm, cls.processes, queues=rr_queues(2, 4, 8))
            for algorithm in SchedulingAlgorithm
        }

    def test_timelines_are_valid(self):
        for algorithm, result in self.results.items():
            validation = TimelineValidator.validate(result.timeline, result.processes)
            self.assertTrue(validation.is_valid, f"{algorithm}: {validation.errors}")

    def test_burst_conservation(self):
        for algorithm, result in self.results.items():
            for p in result.processes:
                self.assertEqual(result.timeline.busy_time_for(p.pid), p.burst_time, algorithm)

    def test_metric_identities(self):
        for algorithm, result in self.results.items():
            for p in result.processes:
                self.assertEqual(p.turnaround_time, p.finish_time - p.arrival_time)
                self.assertEqual(p.waiting_time, p.turnaround_time - p.burst_time)
                self.assertEqual(p.response_time, p.first_run_time - p.arrival_time)
                self.assertGreaterEqual(p.waiting_time, 0)
                self.assertGreaterEqual(p.response_time, 0)
                self.assertLessEqual(p.response_time, p.waiting_time)
                self.assertEqual(p.remaining_time, 0)

    def test_timeline_ends_at_last_finish(self):
        for algorithm, result in self.results.items():
            self.assertEqual(result.timeline.end_time, max(p.finish_time for p in result.processes))
            self.assertEqual(result.total_time, result.timeline.end_time)

    def test_no_process_runs_before_arrival(self):
        for algorithm, result in self.results.items():
            for segment in result.timeline:
                if not segment.is_idle:
                    self.assertGreaterEqual(segment.start_time, result.get_process(segment.pid).arrival_time)

    def test_queue_ids_only_for_queue_policies(self):
        for algorithm, result in self.results.items():
            self.assertEqual(result.timeline.has_queues, algorithm.uses_queues, algorithm)


# =============================================================================
# TEST METRICS MODULE
# =============================================================================

class TestProcessMetrics(unittest.TestCase):
    """Test ProcessMetrics class."""

    def test_derived_times(self):
        metrics = ProcessMetrics(pid=1, arrival_time=5, burst_time=10, first_run_time=8, finish_time=25)
        self.assertEqual(metrics.turnaround_time, 20)
        self.assertEqual(metrics.waiting_time, 10)
        self.assertEqual(metrics.response_time, 3)
        self.assertEqual(metrics.normalized_turnaround, 2.0)

    def test_metrics_to_dict(self):
        data = ProcessMetrics(pid=1, arrival_time=0, burst_time=10, first_run_time=0, finish_time=10).to_dict()
        self.assertEqual(data['pid'], 1)
        self.assertEqual(data['waiting_time'], 0)


class TestMetricsCalculator(unittest.TestCase):
    """Test MetricsCalculator class."""

    def test_finalize_requires_dispatch(self):
        with self.assertRaises(SimulationError):
            MetricsCalculator.finalize_process(Process(pid=1, burst_time=1), 1)

    def test_calculate_process_metrics_requires_completion(self):
        with self.assertRaises(SimulationError):
            MetricsCalculator.calculate_process_metrics(Process(pid=1, burst_time=1))

    def test_system_metrics(self):
        result = simulate(SchedulingAlgorithm.FCFS, make_processes((0, 5), (1, 3), (2, 8)))
        metrics = result.system_metrics
        self.assertEqual(metrics.completed_processes, 3)
        self.assertAlmostEqual(metrics.cpu_utilization, 1.0)
        self.assertAlmostEqual(metrics.throughput, 3 / 16)
        self.assertEqual(metrics.context_switches, 2)
        self.assertEqual(metrics.max_waiting_time, 6)
        self.assertIn('avg_waiting_time', metrics.to_dict())

    def test_jains_fairness(self):
        self.assertAlmostEqual(MetricsCalculator.jains_fairness([1, 1, 1]), 1.0)
        self.assertAlmostEqual(MetricsCalculator.jains_fairness([1, 0]), 0.5)
        self.assertAlmostEqual(MetricsCalculator.jains_fairness([]), 1.0)


class TestMetricsComparator(unittest.TestCase):
    """Test MetricsComparator class."""

    def test_compare_algorithms(self):
        comparator = MetricsComparator()
        comparator.add_result("A", SystemMetrics(algorithm_name="A", avg_turnaround_time=20.0, cpu_utilization=0.8))
        comparator.add_result("B", SystemMetrics(algorithm_name="B", avg_turnaround_time=18.0, cpu_utilization=0.7))
        comparison = comparator.compare()
        self.assertEqual(comparison['avg_turnaround_time']['best'], "B")
        self.assertEqual(comparison['cpu_utilization']['best'], "A")
        self.assertEqual(comparator.get_best_algorithm(), "B")
        self.assertIn("A", comparator.generate_report())

    def test_unknown_metric(self):
        with self.assertRaises(ValueError):
            MetricsComparator().get_best_algorithm('bogus')

    def test_empty(self):
        comparator = MetricsComparator()
        self.assertIsNone(comparator.get_best_algorithm())
        self.assertEqual(comparator.generate_report(), "No results to compare.")


class TestBatchSimulator(unittest.TestCase):
    """Test running one workload under several algorithms."""

    def test_run_comparison(self):
        processes = make_processes((0, 8), (1, 4), (2, 9), (3, 5))
        batch = BatchSimulator()
        results = batch.run_comparison(processes)
        self.assertEqual(len(results), len(SchedulingAlgorithm))
        self.assertEqual(batch.get_best_algorithm('avg_waiting_time'), SchedulingAlgorithm.SRTF.value)
        self.assertIn("ALGORITHM COMPARISON", batch.get_comparison_report())

    def test_generates_workload_when_none_given(self):
        batch = BatchSimulator(SimulationConfig(num_processes=4, seed=2))
        results = batch.run_comparison(algorithms=[SchedulingAlgorithm.FCFS, SchedulingAlgorithm.SJF])
        self.assertEqual(len(results), 2)


# =============================================================================
# TEST PLAYBACK
# =============================================================================

class TestPlayback(unittest.TestCase):
    """Test step expansion and PlaybackSession."""

    def setUp(self):
        self.result = simulate(SchedulingAlgorithm.FCFS, make_processes((2, 3), (10, 1)))

    def test_expand_timeline(self):
        steps = expand_timeline(self.result.timeline)
        self.assertEqual(len(steps), 11)
        self.assertEqual(steps[0].label, "Idle")
        self.assertEqual(steps[2].who, Running(1))
        self.assertEqual([s.time for s in steps], list(range(11)))

    def test_process_states(self):
        session = PlaybackSession(self.result)
        states = session.process_states()
        self.assertEqual([s['status'] for s in states], ['waiting', 'waiting'])

        for _ in range(3):
            session.advance()
        states = session.process_states()
        self.assertEqual(states[0]['status'], 'running')
        self.assertEqual(states[0]['remaining_time'], 2)

        for _ in range(2):
            session.advance()
        states = session.process_states()
        self.assertEqual(states[0]['status'], 'completed')
        self.assertEqual(states[1]['status'], 'waiting')

    def test_advance_until_finished(self):
        session = PlaybackSession(self.result)
        while session.advance() is not None:
            pass
        self.assertTrue(session.is_finished)
        self.assertEqual(session.current_time, 11)
        self.assertTrue(all(s['status'] == 'completed' for s in session.process_states()))
        session.reset()
        self.assertEqual(session.cursor, 0)

    def test_speed_and_pause(self):
        session = PlaybackSession(self.result)
        self.assertAlmostEqual(session.delay_seconds, 1.0)
        session.set_speed(5)
        self.assertEqual(session.speed_label, "2x")
        self.assertAlmostEqual(session.delay_seconds, 0.5)
        with self.assertRaises(ConfigurationError):
            session.set_speed(9)
        self.assertTrue(session.toggle_pause())
        self.assertFalse(session.toggle_pause())

    def test_run_blocking(self):
        session = PlaybackSession(self.result)
        shown = []
        delays = []
        count = session.run(on_step=shown.append, sleep=delays.append)
        self.assertEqual(count, 11)
        self.assertEqual(len(shown), 11)
        self.assertEqual(delays, [1.0] * 10)
        self.assertFalse(session.running)

    def test_run_async(self):
        session = PlaybackSession(self.result)
        done = threading.Event()
        thread = session.run_async(on_complete=done.set, sleep=lambda seconds: None)
        self.assertTrue(done.wait(5))
        thread.join(5)
        self.assertTrue(session.is_finished)

    def test_sessions_are_independent(self):
        first = PlaybackSession(self.result)
        second = PlaybackSession(self.result)
        first.advance()
        self.assertEqual(second.cursor, 0)


# =============================================================================
# TEST VISUALIZATION AND EXPORT
# =============================================================================

class TestVisualization(unittest.TestCase):
    """Test text and image rendering."""

    def test_text_gantt(self):
        result = simulate(SchedulingAlgorithm.FCFS, make_processes((0, 5), (1, 3), (2, 8)))
        bar, ticks = format_text_gantt(result.timeline).split("\n")
        self.assertEqual(bar, "| P1 | P2 | P3 |")
        self.assertEqual(ticks.split(), ['0', '5', '8', '16'])

    def test_text_gantt_empty(self):
        self.assertEqual(format_text_gantt(Timeline()), "")

    def test_results_table(self):
        result = simulate(SchedulingAlgorithm.FCFS, make_processes((0, 5), (1, 3), (2, 8)))
        table = format_results_table(result)
        self.assertIn("Average Waiting Time", table)
        self.assertIn("100.00%", table)
        self.assertIn("P3", table)

    def test_render_png(self):
        with tempfile.TemporaryDirectory() as tmp:
            for algorithm in (SchedulingAlgorithm.FCFS, SchedulingAlgorithm.MLFQ):
                result = simulate(algorithm, make_processes((0, 4), (6, 2)))
                path = os.path.join(tmp, f"{algorithm.tag}.png")
                GanttChartRenderer().render(result.timeline, path)
                self.assertGreater(os.path.getsize(path), 0)

    def test_multi_row_figure(self):
        result = simulate(SchedulingAlgorithm.MLFQ, make_processes((0, 6), (1, 2)), queues=rr_queues(2, 4))
        fig = GanttChartRenderer().build_figure(result.timeline)
        labels = [t.get_text() for t in fig.axes[0].get_yticklabels()]
        self.assertEqual(labels, ["Queue 1", "Queue 2"])


class TestDataExporter(unittest.TestCase):
    """Test DataExporter class."""

    def setUp(self):
        self.result = simulate(SchedulingAlgorithm.FCFS, make_processes((2, 3), (10, 1)))
        self.exporter = DataExporter()

    def test_export_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self.exporter.export(self.result, os.path.join(tmp, "out.json"))
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        self.assertEqual(set(data), {'algorithm', 'processes', 'timeline', 'metrics'})
        self.assertEqual(data['timeline'][0]['process_id'], 'idle')
        self.assertEqual(data['processes'][1]['finish_time'], 11)

    def test_export_csv(self):
        with tempfile.TemporaryDirectory() as tmp:
            process_path, timeline_path = self.exporter.export_csv(self.result, os.path.join(tmp, "out.csv"))
            with open(process_path, newline="", encoding="utf-8") as f:
                rows = list(csv.DictReader(f))
            with open(timeline_path, newline="", encoding="utf-8") as f:
                segments = list(csv.DictReader(f))
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]['turnaround_time'], '3')
        self.assertEqual(len(segments), 4)

    def test_unsupported_format(self):
        with self.assertRaises(ConfigurationError):
            self.exporter.export(self.result, "out.xml")
        with self.assertRaises(ConfigurationError):
            DataExporter.resolve_format("results")
        self.assertEqual(DataExporter.resolve_format("out.txt", "JSON"), "json")


# =============================================================================
# TEST COMMAND LINE
# =============================================================================

class TestCommandLine(unittest.TestCase):
    """Test the argparse front end."""

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(list(argv))
        logging.disable(logging.CRITICAL)
        return code, out.getvalue(), err.getvalue()

    def test_round_robin_run(self):
        code, out, _ = self.run_cli("-a", "rr", "--quantum", "2", "--arrivals", "0 1 2", "--bursts", "5 3 1")
        self.assertEqual(code, 0)
        self.assertIn("| P1 | P2 | P3 | P1 | P2 | P1 |", out)

    def test_invalid_input_exit_code(self):
        code, _, err = self.run_cli("--arrivals", "0 1", "--bursts", "5")
        self.assertEqual(code, 2)
        self.assertIn("Error", err)

    def test_bad_queue_config_exit_code(self):
        code, _, _ = self.run_cli("-a", "mlfq", "--queues", "rr:2 lottery")
        self.assertEqual(code, 2)

    def test_bad_export_format_exit_code(self):
        """An unknown export extension is rejected before the run."""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out.txt")
            code, out, err = self.run_cli("--arrivals", "0", "--bursts", "1", "--export", path)
            self.assertFalse(os.path.exists(path))
        self.assertEqual(code, 2)
        self.assertIn("export", err)
        self.assertNotIn("Gantt Chart", out)

    def test_compare(self):
        code, out, _ = self.run_cli("--compare", "--random", "5", "--seed", "3")
        self.assertEqual(code, 0)
        self.assertIn("ALGORITHM COMPARISON", out)

    def test_export_and_chart(self):
        with tempfile.TemporaryDirectory() as tmp:
            export_path = os.path.join(tmp, "result.json")
            chart_path = os.path.join(tmp, "chart.png")
            code, _, _ = self.run_cli("-a", "mq", "--export", export_path, "--chart", chart_path)
            self.assertEqual(code, 0)
            self.assertTrue(os.path.exists(export_path))
            self.assertTrue(os.path.exists(chart_path))


# =============================================================================
# TEST RUNNER
# =============================================================================

def run_all_tests(verbosity=2):
    """Run all tests with specified verbosity."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    # Add all test classes
    test_classes = [
        TestConfig,
        TestQueueConfig,
        TestProcess,
        TestProcessGenerator,
        TestTimeline,
        TestValidators,
        TestInputParser,
        TestFCFS,
        TestSJF,
        TestSRTF,
        TestRoundRobin,
        TestPriority,
        TestMultilevelQueue,
        TestMLFQ,
        TestSchedulerFactory,
        TestSimulationEngine,
        TestScheduleProperties,
        TestProcessMetrics,
        TestMetricsCalculator,
        TestMetricsComparator,
        TestBatchSimulator,
        TestPlayback,
        TestVisualization,
        TestDataExporter,
        TestCommandLine,
    ]

    for test_class in test_classes:
        tests = loader.loadTestsFromTestCase(test_class)
        suite.addTests(tests)

    runner = unittest.TextTestRunner(verbosity=verbosity)
    result = runner.run(suite)

    return result


def run_quick_tests():
    """Run a quick subset of critical tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    # Only critical tests
    critical_tests = [
        TestConfig,
        TestProcess,
        TestTimeline,
        TestSimulationEngine,
        TestScheduleProperties,
    ]

    for test_class in critical_tests:
        tests = loader.loadTestsFromTestCase(test_class)
        suite.addTests(tests)

    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(suite)


if __name__ == '__main__':
    print("=" * 70)
    print("CPU SCHEDULING SIMULATOR - COMPREHENSIVE TEST SUITE")
    print("=" * 70)
    print()

    # Run all tests
    result = run_all_tests(verbosity=2)

    # Summary
    print()
    print("=" * 70)
    print("TEST SUMMARY")
    print("=" * 70)
    print(f"Tests Run: {result.testsRun}")
    print(f"Failures: {len(result.failures)}")
    print(f"Errors: {len(result.errors)}")
    print(f"Skipped: {len(result.skipped)}")
    print()

    if result.wasSuccessful():
        print(" ALL TESTS PASSED!")
    else:
        print(" SOME TESTS FAILED")

        if result.failures:
            print("\nFailures:")
            for test, trace in result.failures:
                print(f"  - {test}")

        if result.errors:
            print("\nErrors:")
            for test, trace in result.errors:
                print(f"  - {test}")

    print("=" * 70)

    # Exit with appropriate code
    sys.exit(0 if result.wasSuccessful() else 1)
