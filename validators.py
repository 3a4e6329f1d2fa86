"""
Validators Module for CPU Scheduling Simulator

This module provides input validation, error handling and consistency
checking for process sets, queue configurations and produced timelines.

Validation Categories:
1. Configuration Validation: queue hierarchies and scheduler parameters
2. Process Validation: process attributes and process sets
3. Timeline Validation: ordering, contiguity and burst conservation
4. Input Parsing: whitespace separated text fields from the command line

Design Philosophy:
- Fail fast with clear error messages
- Reject bad input before the simulation starts
- Log validation failures for debugging

Author: Student
Date: December 2024
"""

import logging
import re
from typing import Optional, Any, List, Dict, Sequence, Union
from dataclasses import dataclass, field

from config import QueueAlgorithm, QueueConfig


# Configure logger
logger = logging.getLogger(__name__)


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================

class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, field: str = None, value: Any = None):
        self.field = field
        self.value = value
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.field and self.value is not None:
            return f"Validation error for '{self.field}' (value={self.value}): {self.message}"
        elif self.field:
            return f"Validation error for '{self.field}': {self.message}"
        return f"Validation error: {self.message}"


class ConfigurationError(ValidationError):
    """Exception for configuration-related validation errors."""
    pass


class UnsupportedConfigurationError(ConfigurationError):
    """
    Exception for queue configurations a scheduler cannot run.

    Raised when a queue names an unknown algorithm, a Round Robin queue
    has no quantum, or an MLFQ level lacks a positive quantum.
    """

    def __init__(self, message: str, value: Any = None, queue_index: Optional[int] = None):
        self.queue_index = queue_index
        field_name = f"queues[{queue_index}]" if queue_index is not None else "queues"
        super().__init__(message, field=field_name, value=value)


class ProcessError(ValidationError):
    """Exception for process-related validation errors."""
    pass


class SimulationError(ValidationError):
    """Exception for internal simulation invariant violations."""
    pass


# =============================================================================
# VALIDATION RESULT
# =============================================================================

@dataclass
class ValidationResult:
    """
    Result of a validation operation.

    Provides detailed information about validation success/failure.
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    field: Optional[str] = None

    def __bool__(self) -> bool:
        """Allow using ValidationResult in boolean context."""
        return self.is_valid

    @staticmethod
    def success() -> 'ValidationResult':
        """Create a successful validation result."""
        return ValidationResult(is_valid=True, errors=[], warnings=[])

    @staticmethod
    def failure(error: str, field: str = None) -> 'ValidationResult':
        """Create a failed validation result."""
        return ValidationResult(
            is_valid=False,
            errors=[error],
            warnings=[],
            field=field
        )

    def add_error(self, error: str):
        """Add an error to the result."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning to the result."""
        self.warnings.append(warning)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Merge another validation result into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.is_valid = self.is_valid and other.is_valid
        return self

    def raise_if_invalid(self, error_class=ValidationError):
        """Raise the first error as an exception if validation failed."""
        if not self.is_valid:
            raise error_class("; ".join(self.errors), self.field)


# =============================================================================
# CONFIGURATION VALIDATORS
# =============================================================================

class ConfigValidator:
    """Validator for scheduler configuration parameters."""

    MIN_TIME_QUANTUM = 1
    MAX_TIME_QUANTUM = 1000

    @classmethod
    def validate_time_quantum(cls, value: int) -> ValidationResult:
        """Validate time quantum."""
        if isinstance(value, bool) or not isinstance(value, int):
            return ValidationResult.failure(
                f"time_quantum must be an integer, got {type(value).__name__}",
                "time_quantum"
            )
        if value < cls.MIN_TIME_QUANTUM:
            return ValidationResult.failure(
                f"time_quantum must be at least {cls.MIN_TIME_QUANTUM}",
                "time_quantum"
            )
        if value > cls.MAX_TIME_QUANTUM:
            return ValidationResult.failure(
                f"time_quantum must be at most {cls.MAX_TIME_QUANTUM}",
                "time_quantum"
            )
        return ValidationResult.success()

    @classmethod
    def validate_queues(cls, queues: Sequence[QueueConfig], require_quantum: bool = False) -> None:
        """
        Validate a queue hierarchy.

        Args:
            queues: Queue configurations in rank order
            require_quantum: True when every level needs a quantum (MLFQ)

        Raises:
            ConfigurationError: If there are no queues
            UnsupportedConfigurationError: Naming the first offending queue
        """
        if not queues:
            raise ConfigurationError("At least one queue is required", "queues")

        for index, queue in enumerate(queues):
            if not isinstance(queue, QueueConfig):
                raise UnsupportedConfigurationError(
                    f"Queue {index + 1}: expected QueueConfig, got {type(queue).__name__}",
                    value=queue,
                    queue_index=index
                )
            if require_quantum and queue.quantum is None:
                raise UnsupportedConfigurationError(
                    f"Queue {index + 1}: a positive quantum is required",
                    value=queue.label,
                    queue_index=index
                )


# =============================================================================
# PROCESS VALIDATORS
# =============================================================================

class ProcessValidator:
    """Validator for process attributes and process sets."""

    @classmethod
    def validate_process_attributes(
        cls,
        pid: int,
        arrival_time: int,
        burst_time: int
    ) -> ValidationResult:
        """Validate process creation attributes."""
        result = ValidationResult.success()

        if isinstance(pid, bool) or not isinstance(pid, int) or pid <= 0:
            result.add_error(f"pid must be a positive integer, got {pid}")

        if isinstance(arrival_time, bool) or not isinstance(arrival_time, int) or arrival_time < 0:
            result.add_error(f"arrival_time must be a non-negative integer, got {arrival_time}")

        if isinstance(burst_time, bool) or not isinstance(burst_time, int) or burst_time <= 0:
            result.add_error(f"burst_time must be a positive integer, got {burst_time}")

        return result

    @classmethod
    def validate_process_set(cls, processes: Sequence) -> ValidationResult:
        """
        Validate a full set of processes before simulation.

        Args:
            processes: Processes to schedule

        Returns:
            ValidationResult listing every invalid attribute and duplicate pid
        """
        result = ValidationResult.success()

        if not processes:
            result.add_error("At least one process is required")
            return result

        seen = set()
        for process in processes:
            result.merge(cls.validate_process_attributes(
                process.pid,
                process.arrival_time,
                process.burst_time
            ))
            if process.pid in seen:
                result.add_error(f"Duplicate pid {process.pid}")
            seen.add(process.pid)

        return result


# =============================================================================
# TIMELINE VALIDATORS
# =============================================================================

class TimelineValidator:
    """Validator for timelines produced by the simulation engine."""

    @classmethod
    def validate(cls, timeline, processes: Sequence) -> ValidationResult:
        """
        Check that a timeline is a consistent schedule of the processes.

        The timeline must start at 0, be contiguous and ordered, contain no
        two adjacent mergeable segments, and give each process exactly its
        burst time of CPU.

        Args:
            timeline: Iterable of TimelineSegment
            processes: Processes the timeline was produced for

        Returns:
            ValidationResult
        """
        result = ValidationResult.success()
        segments = list(timeline)

        if not segments:
            result.add_error("Timeline is empty")
            return result

        if segments[0].start_time != 0:
            result.add_error(f"Timeline starts at {segments[0].start_time}, expected 0")

        previous = None
        busy: Dict[int, int] = {}
        for index, segment in enumerate(segments):
            if segment.end_time <= segment.start_time:
                result.add_error(f"Segment {index} has non-positive duration")
            if previous is not None:
                if segment.start_time != previous.end_time:
                    result.add_error(
                        f"Gap or overlap between segment {index - 1} and {index} "
                        f"({previous.end_time} -> {segment.start_time})"
                    )
                if segment.who == previous.who and segment.queue_id == previous.queue_id:
                    result.add_error(f"Segments {index - 1} and {index} should have been merged")
            if not segment.is_idle:
                busy[segment.pid] = busy.get(segment.pid, 0) + segment.duration
            previous = segment

        for process in processes:
            used = busy.pop(process.pid, 0)
            if used != process.burst_time:
                result.add_error(
                    f"P{process.pid} received {used} time units, burst is {process.burst_time}"
                )
        for pid in busy:
            result.add_error(f"Timeline contains unknown process P{pid}")

        finish_times = [p.finish_time for p in processes if p.finish_time is not None]
        if finish_times and segments[-1].end_time != max(finish_times):
            result.add_warning(
                f"Timeline ends at {segments[-1].end_time}, last finish is {max(finish_times)}"
            )

        return result


# =============================================================================
# INPUT PARSER
# =============================================================================

class InputParser:
    """
    Parse whitespace separated text fields into processes and queues.

    Mirrors the form fields of an interactive simulator: one field for
    arrival times, one for burst times, optional fields for priorities and
    queue ids. Process ids are assigned 1..n in input order.
    """

    DEFAULT_PRIORITY = 0
    DEFAULT_QUEUE_ID = 1

    _SEPARATORS = re.compile(r"[\s,]+")

    @classmethod
    def _tokenize(cls, value: Union[str, Sequence, None]) -> List[str]:
        """Split a text field (or pass through a sequence) into tokens."""
        if value is None:
            return []
        if isinstance(value, str):
            return [token for token in cls._SEPARATORS.split(value.strip()) if token]
        return [str(token).strip() for token in value]

    @classmethod
    def _parse_ints(cls, value, field_name: str) -> List[int]:
        numbers = []
        for token in cls._tokenize(value):
            try:
                numbers.append(int(token))
            except ValueError:
                raise ProcessError(f"'{token}' is not an integer", field_name, token) from None
        return numbers

    @classmethod
    def parse_processes(
        cls,
        arrivals: Union[str, Sequence],
        bursts: Union[str, Sequence],
        priorities: Union[str, Sequence, None] = None,
        queue_ids: Union[str, Sequence, None] = None
    ) -> List:
        """
        Build Process objects from text fields.

        Args:
            arrivals: Arrival times, e.g. "0 1 2"
            bursts: Burst times, e.g. "5 3 8"
            priorities: Optional priorities (lower = more urgent), default 0
            queue_ids: Optional 1-based queue ids, default 1

        Returns:
            List of Process objects with pids 1..n

        Raises:
            ProcessError: On empty input, count mismatch or invalid values
        """
        from process import Process

        arrival_times = cls._parse_ints(arrivals, "arrivals")
        burst_times = cls._parse_ints(bursts, "bursts")

        if not arrival_times or not burst_times:
            raise ProcessError("Arrival and burst times are required", "arrivals")

        if len(arrival_times) != len(burst_times):
            raise ProcessError(
                f"Got {len(arrival_times)} arrival times but {len(burst_times)} burst times",
                "bursts"
            )

        count = len(arrival_times)
        priority_values = cls._parse_ints(priorities, "priorities")
        if not priority_values:
            priority_values = [cls.DEFAULT_PRIORITY] * count
        elif len(priority_values) != count:
            raise ProcessError(
                f"Got {len(priority_values)} priorities for {count} processes",
                "priorities"
            )

        queue_values = cls._parse_ints(queue_ids, "queue_ids")
        if not queue_values:
            queue_values = [cls.DEFAULT_QUEUE_ID] * count
        elif len(queue_values) != count:
            raise ProcessError(
                f"Got {len(queue_values)} queue ids for {count} processes",
                "queue_ids"
            )

        for index, (arrival, burst) in enumerate(zip(arrival_times, burst_times)):
            if arrival < 0:
                raise ProcessError(f"P{index + 1} has a negative arrival time", "arrivals", arrival)
            if burst <= 0:
                raise ProcessError(f"P{index + 1} must have a positive burst time", "bursts", burst)

        processes = [
            Process(
                pid=index + 1,
                arrival_time=arrival_times[index],
                burst_time=burst_times[index],
                priority=priority_values[index],
                queue_id=queue_values[index],
            )
            for index in range(count)
        ]
        logger.debug(f"Parsed {count} processes from input fields")
        return processes

    @classmethod
    def parse_queue_configs(cls, text: Union[str, Sequence]) -> List[QueueConfig]:
        """
        Build queue configurations from "algorithm[:quantum]" tokens.

        Example: "rr:2 rr:4 fcfs" is two Round Robin queues over a FCFS queue.

        Raises:
            UnsupportedConfigurationError: Naming the offending queue
        """
        queues = []
        for index, token in enumerate(cls._tokenize(text)):
            tag, _, quantum_text = token.partition(":")
            try:
                algorithm = QueueAlgorithm(tag.strip().lower())
            except ValueError:
                raise UnsupportedConfigurationError(
                    f"Queue {index + 1}: unsupported algorithm '{tag}'",
                    value=tag,
                    queue_index=index
                ) from None

            quantum = None
            if quantum_text:
                try:
                    quantum = int(quantum_text)
                except ValueError:
                    raise UnsupportedConfigurationError(
                        f"Queue {index + 1}: quantum '{quantum_text}' is not an integer",
                        value=quantum_text,
                        queue_index=index
                    ) from None

            try:
                queues.append(QueueConfig(algorithm, quantum))
            except UnsupportedConfigurationError as e:
                raise UnsupportedConfigurationError(
                    f"Queue {index + 1}: {e.message}",
                    value=e.value,
                    queue_index=index
                ) from e

        if not queues:
            raise ConfigurationError("At least one queue is required", "queues")
        return queues


# =============================================================================
# GUARD FUNCTIONS
# =============================================================================

def require_positive(value: int, name: str) -> int:
    """Guard that requires a positive integer."""
    if not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer", name, value)
    return value


# =============================================================================
# LOGGING UTILITIES
# =============================================================================

def log_validation_result(result: ValidationResult, context: str = ""):
    """Log validation result with appropriate level."""
    prefix = f"[{context}] " if context else ""

    if result.is_valid:
        if result.warnings:
            for warning in result.warnings:
                logger.warning(f"{prefix}{warning}")
        logger.debug(f"{prefix}Validation passed")
    else:
        for error in result.errors:
            logger.error(f"{prefix}Validation error: {error}")
        for warning in result.warnings:
            logger.warning(f"{prefix}Validation warning: {warning}")
