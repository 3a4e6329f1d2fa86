#!/usr/bin/env python3
"""
CPU Scheduling Simulator - Main Entry Point

This is the main entry point for the CPU Scheduling Simulator. It parses the
command line, builds the workload and configuration, runs the simulation and
prints (or saves) the results.

The simulation demonstrates key Operating System concepts:
- CPU Scheduling Policies (FCFS, SJF, SRTF, RR, Priority, MQ, MLFQ)
- Preemption and Time Quanta
- Multilevel Queues and Feedback
- Performance Metrics and Analysis

Usage:
    python main.py                                   # Predefined workload, FCFS
    python main.py -a rr --quantum 3 --arrivals "0 1 2" --bursts "5 3 8"
    python main.py -a mlfq --queues "rr:2 rr:4 rr:8" --random 8 --seed 1
    python main.py --compare --random 10 --seed 42   # Compare all algorithms
    python main.py --test                            # Run the test suite

Author: Student
Date: December 2024
"""

import sys
import os
import argparse
import logging
from typing import List, Optional

# Add project root to path for imports
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Import project modules
from config import (
    SimulationConfig,
    LoggingConfig,
    PlaybackConfig,
    SchedulingAlgorithm,
    ALGORITHM_TAGS,
    ALGORITHM_DESCRIPTIONS,
    VERSION,
    APP_NAME
)
from process import Process, ProcessGenerator
from validators import InputParser, ValidationError
from utils import setup_logging, DataExporter


logger = logging.getLogger(__name__)


def print_banner():
    """Print application banner."""
    banner = f"""
╔══════════════════════════════════════════════════════════════════════╗
║                                                                      ║
║                     CPU SCHEDULING SIMULATOR                         ║
║                              v{VERSION}                                  ║
║                                                                      ║
║   An educational simulation comparing classic scheduling policies    ║
║                                                                      ║
╚══════════════════════════════════════════════════════════════════════╝
"""
    print(banner)


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description=f"{APP_NAME} v{VERSION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Algorithms:
  fcfs, sjf, srtf, rr, priority-np, priority-p, mq, mlfq

Examples:
  python main.py -a rr --quantum 2 --arrivals "0 1 2" --bursts "5 3 1"
  python main.py -a priority-p --arrivals "0 1" --bursts "4 2" --priorities "2 1"
  python main.py -a mq --queues "rr:2 fcfs" --arrivals "0 1" --bursts "5 2" --queue-ids "2 1"
  python main.py --compare --random 10 --seed 42
  python main.py -a srtf --random 6 --chart schedule.png --export results.json
        """
    )

    parser.add_argument(
        '--version', '-v',
        action='version',
        version=f'{APP_NAME} v{VERSION}'
    )

    parser.add_argument(
        '--test',
        action='store_true',
        help='Run the test suite'
    )

    parser.add_argument(
        '--algorithm', '-a',
        choices=list(ALGORITHM_TAGS.values()),
        default='fcfs',
        help='Scheduling algorithm (default: fcfs)'
    )

    workload = parser.add_argument_group('workload')
    workload.add_argument('--arrivals', help='Arrival times, e.g. "0 1 2"')
    workload.add_argument('--bursts', help='Burst times, e.g. "5 3 8"')
    workload.add_argument('--priorities', help='Priorities (lower = more urgent), default 0')
    workload.add_argument('--queue-ids', help='1-based queue per process for mq, default 1')
    workload.add_argument(
        '--random', '-n',
        type=int,
        metavar='N',
        help='Generate N random processes instead of reading them'
    )
    workload.add_argument('--seed', type=int, help='Seed for --random')

    scheduling = parser.add_argument_group('scheduling')
    scheduling.add_argument(
        '--quantum', '-q',
        type=int,
        default=2,
        help='Round Robin time quantum (default: 2)'
    )
    scheduling.add_argument(
        '--queues',
        default='rr:2 rr:4',
        help='Queues for mq/mlfq as "algorithm[:quantum]" tokens (default: "rr:2 rr:4")'
    )

    output = parser.add_argument_group('output')
    output.add_argument('--compare', action='store_true', help='Run every algorithm and compare')
    output.add_argument('--chart', metavar='PATH', help='Save a Gantt chart image')
    output.add_argument('--export', metavar='PATH', help='Export results (.json or .csv)')
    output.add_argument('--playback', action='store_true', help='Replay the timeline step by step')
    output.add_argument(
        '--speed',
        type=int,
        choices=[1, 2, 3, 4, 5],
        default=3,
        help='Playback speed, 1 (0.25x) to 5 (2x) (default: 3)'
    )
    output.add_argument('--explain', action='store_true', help='Describe the chosen algorithm')
    output.add_argument('--verbose', action='store_true', help='Log every scheduling decision')
    output.add_argument('--log-file', metavar='PATH', help='Also write logs to a file')

    return parser


def load_processes(args, config: SimulationConfig) -> List[Process]:
    """
    Build the workload from the command line.

    Priority: explicit --arrivals/--bursts, then --random, then the
    predefined test set.
    """
    if args.arrivals or args.bursts:
        return InputParser.parse_processes(
            args.arrivals or "",
            args.bursts or "",
            args.priorities,
            args.queue_ids
        )

    generator = ProcessGenerator(config)
    if args.random is not None:
        return generator.generate_processes(args.random)
    return generator.generate_predefined_test_set()


def run_playback(result, speed: int):
    """Replay a result in the terminal at the chosen speed."""
    from playback import PlaybackSession

    session = PlaybackSession(result, PlaybackConfig(default_speed=speed))
    print(f"\n[Playback at {session.speed_label}]")

    def show(step):
        queue = f" Q{step.queue_id}" if step.queue_id is not None else ""
        print(f"  t={step.time:>3}: {step.label:<5}{queue}  {step.reason}")

    session.run(on_step=show)


def run_simulation(args) -> int:
    """
    Run the simulation described by parsed arguments.

    Returns:
        Process exit code
    """
    from simulation import SimulationEngine, BatchSimulator
    from visualization import format_text_gantt, format_results_table, GanttChartRenderer

    algorithm = SchedulingAlgorithm.from_tag(args.algorithm)
    config = SimulationConfig(
        algorithm=algorithm,
        time_quantum=args.quantum,
        queues=tuple(InputParser.parse_queue_configs(args.queues)),
        seed=args.seed
    )
    if args.random is not None:
        config.num_processes = args.random
    config.validate()
    if args.export:
        DataExporter.resolve_format(args.export)

    processes = load_processes(args, config)

    if args.explain:
        print(ALGORITHM_DESCRIPTIONS[algorithm])
        print()

    if args.compare:
        batch = BatchSimulator(config)
        batch.run_comparison(processes)
        print(batch.get_comparison_report())
        return 0

    result = SimulationEngine(config).run(processes)

    print(format_results_table(result))
    print("\nGantt Chart:")
    print(format_text_gantt(result.timeline))

    if args.chart:
        GanttChartRenderer().render(result.timeline, args.chart, title=result.algorithm_name)
        print(f"\nChart saved to {args.chart}")

    if args.export:
        DataExporter().export(result, args.export)
        print(f"Results exported to {args.export}")

    if args.playback:
        run_playback(result, args.speed)

    return 0


def run_tests() -> int:
    """Run the unittest suite."""
    from test_suite import run_all_tests

    result = run_all_tests(verbosity=2)
    return 0 if result.wasSuccessful() else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the application.

    Parses command-line arguments and runs the appropriate mode.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(LoggingConfig(
        level="WARNING",
        verbose=args.verbose,
        log_to_file=bool(args.log_file),
        log_file_path=args.log_file or LoggingConfig.log_file_path
    ))

    if args.test:
        return run_tests()

    try:
        return run_simulation(args)
    except ValidationError as e:
        logger.debug("Invalid input", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    print_banner()
    sys.exit(main())
