"""Rendering of scheduled jobs as a detail listing or per-destination totals."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from amqscheduler.domain.scheduler import DetailMode, DisplayMode, ScheduledJob, TotalsMode
from amqscheduler.utils.hexdump import hex_dump

Sink = Callable[[str], None]


def count_per_destination(jobs: Iterable[ScheduledJob]) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for job in jobs:
        totals[job.destination] = totals.get(job.destination, 0) + 1
    return dict(sorted(totals.items()))


def format_totals(totals: Dict[str, int]) -> List[str]:
    if not totals:
        return []
    width = max(len(name) for name in totals)
    return [f"{name:<{width}} {count:>10d}" for name, count in sorted(totals.items())]


def format_job(job: ScheduledJob, mode: DetailMode) -> List[str]:
    lines = [f"{job.job_id}\t{job.destination}"]
    if mode.show_properties:
        lines.append("-- Properties")
        lines.extend(f"{name} = {value}" for name, value in job.properties.items())
    if mode.show_content:
        lines.append("-- Content")
        lines.append(hex_dump(job.payload))
    if mode.show_properties or mode.show_content:
        lines.append("--")
        lines.append("")
    return lines


def render_jobs(jobs: Iterable[ScheduledJob], mode: DisplayMode, sink: Sink) -> int:
    """Write ``jobs`` to ``sink`` according to ``mode`` and return how many were seen.

    Detail output is streamed in arrival order. Totals are only written once the
    whole stream has been consumed, so a failure mid-stream leaves no partial table.
    """

    if isinstance(mode, TotalsMode):
        totals = count_per_destination(jobs)
        for line in format_totals(totals):
            sink(line)
        return sum(totals.values())

    seen = 0
    for job in jobs:
        seen += 1
        for line in format_job(job, mode):
            sink(line)
    return seen


__all__ = ["Sink", "count_per_destination", "format_job", "format_totals", "render_jobs"]
