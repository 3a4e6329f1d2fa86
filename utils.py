"""
Utilities Module for CPU Scheduling Simulator

Logging setup and result export helpers shared by the command line front
end and the tests.

Export formats:
- dict: Plain Python structures (same shape as SimulationResult.to_dict())
- JSON: One document with algorithm, processes, timeline and metrics
- CSV: One file for processes and one for the timeline

Author: Student
Date: December 2024
"""

import csv
import json
import logging
import os
from typing import Dict, Any, Optional, Tuple

from config import LoggingConfig, DEFAULT_LOGGING_CONFIG, APP_NAME
from validators import ConfigurationError


# =============================================================================
# LOGGING
# =============================================================================

def setup_logging(config: LoggingConfig = None) -> logging.Logger:
    """
    Configure the root logger from a LoggingConfig.

    Existing handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        config: Logging configuration (uses default if None)

    Returns:
        The application logger
    """
    config = config or DEFAULT_LOGGING_CONFIG
    level = logging.DEBUG if config.verbose else getattr(logging, config.level.upper(), logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    formatter = logging.Formatter(config.log_format, datefmt=config.date_format)

    if config.log_to_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    if config.log_to_file:
        file_handler = logging.FileHandler(config.log_file_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    return logging.getLogger(APP_NAME)


# =============================================================================
# DATA EXPORT
# =============================================================================

class DataExporter:
    """
    Export simulation results for analysis outside the simulator.
    """

    PROCESS_FIELDS = [
        'pid', 'arrival_time', 'burst_time', 'priority', 'queue_id',
        'first_run_time', 'finish_time', 'turnaround_time', 'waiting_time', 'response_time',
    ]
    TIMELINE_FIELDS = ['process_id', 'start_time', 'end_time', 'queue_id', 'reason']
    FORMATS = ('json', 'csv')

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def to_dict(self, result) -> Dict[str, Any]:
        """Convert a SimulationResult into plain structures."""
        return result.to_dict()

    def export_json(self, result, path: str, indent: int = 2) -> str:
        """
        Write a result as one JSON document.

        Args:
            result: SimulationResult
            path: Output file
            indent: JSON indentation

        Returns:
            The output path
        """
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(result), f, indent=indent)
        self.logger.info(f"Exported JSON results to {path}")
        return path

    def export_csv(self, result, path: str) -> Tuple[str, str]:
        """
        Write processes and timeline as two CSV files.

        "results.csv" produces "results.csv" (processes) and
        "results_timeline.csv" (segments).

        Args:
            result: SimulationResult
            path: Output file for the process table

        Returns:
            (process_csv_path, timeline_csv_path)
        """
        root, ext = os.path.splitext(path)
        timeline_path = f"{root}_timeline{ext or '.csv'}"

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=self.PROCESS_FIELDS, extrasaction='ignore')
            writer.writeheader()
            for process in result.processes:
                writer.writerow(process.to_dict())

        with open(timeline_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=self.TIMELINE_FIELDS)
            writer.writeheader()
            for row in result.timeline.to_list():
                writer.writerow(row)

        self.logger.info(f"Exported CSV results to {path} and {timeline_path}")
        return path, timeline_path

    @classmethod
    def resolve_format(cls, path: str, fmt: Optional[str] = None) -> str:
        """
        Export format from an explicit name or the file extension.

        Raises:
            ConfigurationError: If the format is not supported
        """
        fmt = (fmt or os.path.splitext(path)[1].lstrip(".")).lower()
        if fmt not in cls.FORMATS:
            raise ConfigurationError(
                f"Unsupported export format, expected one of {', '.join(cls.FORMATS)}",
                "export", fmt or path
            )
        return fmt

    def export(self, result, path: str, fmt: Optional[str] = None):
        """
        Export by format name or file extension ('json' or 'csv').

        Raises:
            ConfigurationError: If the format is not supported
        """
        fmt = self.resolve_format(path, fmt)
        if fmt == "json":
            return self.export_json(result, path)
        return self.export_csv(result, path)
