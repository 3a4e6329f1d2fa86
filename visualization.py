"""
Visualization Module for CPU Scheduling Simulator

Renders simulation results as text (Gantt bar and results table, for the
terminal) and as matplotlib Gantt chart images.

The chart has a single row when the timeline carries no queue ids and one
row per queue for Multilevel Queue and MLFQ runs, so the reader can see
which queue served each slice.

Author: Student
Date: December 2024
"""

from typing import List, Optional
import logging

import matplotlib
matplotlib.use("Agg")  # Headless rendering to files
from matplotlib.figure import Figure
from matplotlib.patches import FancyBboxPatch, Patch

from config import ChartConfig, DEFAULT_CHART_CONFIG
from timeline import Timeline


logger = logging.getLogger(__name__)


# =============================================================================
# TEXT RENDERING
# =============================================================================

def format_text_gantt(timeline: Timeline) -> str:
    """
    Render a timeline as a two-line text Gantt chart.

    Example:
        | P1 | P2 | Idle | P3 |
        0    5    8      10   16

    Args:
        timeline: Timeline to render

    Returns:
        Multi-line string (empty string for an empty timeline)
    """
    if len(timeline) == 0:
        return ""

    bar = "|"
    ticks = ""
    for segment in timeline:
        label = segment.label
        if segment.queue_id is not None:
            label = f"{label}(Q{segment.queue_id})"
        cell = f" {label} |"
        start_mark = str(segment.start_time)
        ticks += start_mark.ljust(len(cell))
        bar += cell
    ticks += str(timeline.end_time)
    return f"{bar}\n{ticks}"


def format_results_table(result) -> str:
    """
    Render per-process results with averages and CPU utilization.

    Args:
        result: SimulationResult

    Returns:
        Fixed-width table as a string
    """
    show_queue = any(p.queue_id is not None for p in result.processes) and result.timeline.has_queues
    headers = ["PID", "Arrival", "Burst", "Priority"]
    if show_queue:
        headers.append("Queue")
    headers += ["First Run", "Finish", "Turnaround", "Waiting", "Response"]

    rows = []
    for p in result.processes:
        row = [f"P{p.pid}", p.arrival_time, p.burst_time, p.priority]
        if show_queue:
            row.append(p.queue_id)
        row += [p.first_run_time, p.finish_time, p.turnaround_time, p.waiting_time, p.response_time]
        rows.append([str(value) for value in row])

    widths = [max(len(h), *(len(r[i]) for r in rows)) + 2 for i, h in enumerate(headers)]
    line = "-" * sum(widths)

    def fmt(cells: List[str]) -> str:
        return "".join(cell.rjust(width) for cell, width in zip(cells, widths))

    metrics = result.system_metrics
    lines = [
        result.algorithm_name,
        line,
        fmt(headers),
        line,
        *(fmt(row) for row in rows),
        line,
        f"Average Turnaround Time: {metrics.avg_turnaround_time:.2f}",
        f"Average Waiting Time:    {metrics.avg_waiting_time:.2f}",
        f"Average Response Time:   {metrics.avg_response_time:.2f}",
        f"CPU Utilization:         {metrics.cpu_utilization * 100:.2f}%",
        f"Throughput:              {metrics.throughput:.3f} processes/unit",
        f"Context Switches:        {metrics.context_switches}",
    ]
    return "\n".join(lines)


# =============================================================================
# MATPLOTLIB GANTT CHART
# =============================================================================

class GanttChartRenderer:
    """
    Draws timelines as Gantt chart images with matplotlib.

    Usage:
        renderer = GanttChartRenderer()
        renderer.render(result.timeline, "schedule.png", title="Round Robin")
    """

    def __init__(self, config: ChartConfig = None):
        self.config = config or DEFAULT_CHART_CONFIG

    def build_figure(self, timeline: Timeline, title: Optional[str] = None) -> Figure:
        """
        Build the chart figure without saving it.

        Args:
            timeline: Timeline to draw
            title: Chart title (defaults to the configured title)

        Returns:
            matplotlib Figure
        """
        cfg = self.config
        queue_ids = timeline.queue_ids() if timeline.has_queues else []
        rows = len(queue_ids) if queue_ids else 1
        height = max(cfg.min_figure_height, rows * cfg.row_height + 1.2)

        fig = Figure(figsize=(cfg.figure_width, height), dpi=cfg.dpi)
        ax = fig.add_subplot(111)

        if queue_ids:
            row_of = {qid: index for index, qid in enumerate(queue_ids)}
            labels = [f"Queue {qid}" for qid in queue_ids]
        else:
            row_of = {}
            labels = ["CPU"]

        seen_pids = []
        for segment in timeline:
            if segment.is_idle:
                # Idle time spans every row
                targets = range(rows)
                color = cfg.color_idle
            else:
                targets = [row_of.get(segment.queue_id, 0)]
                color = cfg.get_process_color(segment.pid)
                if segment.pid not in seen_pids:
                    seen_pids.append(segment.pid)

            for row in targets:
                y = row - cfg.bar_height / 2
                rect = FancyBboxPatch(
                    (segment.start_time, y),
                    segment.duration, cfg.bar_height,
                    boxstyle="round,pad=0,rounding_size=0.05",
                    facecolor=color,
                    edgecolor=cfg.color_edge,
                    linewidth=1,
                    alpha=0.6 if segment.is_idle else 0.95
                )
                ax.add_patch(rect)

                if segment.duration >= cfg.label_min_width:
                    ax.text(
                        segment.start_time + segment.duration / 2, row,
                        segment.label,
                        ha='center', va='center',
                        fontsize=9, fontweight='bold',
                        color=cfg.color_text
                    )

        end = max(timeline.end_time, 1)
        ax.set_xlim(0, end)
        ax.set_ylim(-0.6, rows - 0.4)
        ax.set_yticks(list(range(rows)))
        ax.set_yticklabels(labels)
        ax.invert_yaxis()

        # Segment boundaries as x ticks
        boundaries = sorted({0, *(s.end_time for s in timeline)})
        if len(boundaries) <= 40:
            ax.set_xticks(boundaries)
        ax.set_xlabel("Time Units", fontsize=10, fontweight='bold')
        ax.set_title(title or cfg.title, fontsize=12, fontweight='bold')
        ax.spines['top'].set_visible(False)
        ax.spines['right'].set_visible(False)
        ax.grid(axis='x', linestyle=':', alpha=0.4)

        handles = [Patch(facecolor=cfg.get_process_color(pid), label=f"P{pid}") for pid in sorted(seen_pids)]
        if timeline.idle_time() > 0:
            handles.append(Patch(facecolor=cfg.color_idle, label="Idle"))
        if handles:
            ax.legend(handles=handles, loc='upper left', bbox_to_anchor=(1.01, 1.0),
                      fontsize=8, frameon=False)

        fig.subplots_adjust(left=0.1, right=0.85, top=0.85, bottom=0.2)
        return fig

    def render(self, timeline: Timeline, path: str, title: Optional[str] = None) -> str:
        """
        Draw the timeline and save it as an image.

        Args:
            timeline: Timeline to draw
            path: Output file (format from the extension, e.g. .png or .svg)
            title: Chart title

        Returns:
            The output path
        """
        fig = self.build_figure(timeline, title)
        fig.savefig(path, dpi=self.config.dpi)
        logger.info(f"Gantt chart saved to {path}")
        return path
