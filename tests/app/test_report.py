from __future__ import annotations

from amqscheduler.app.scheduler.report import format_totals, render_jobs
from amqscheduler.domain.scheduler import DetailMode, ScheduledJob, TotalsMode


def _jobs(destinations: list[str]) -> list[ScheduledJob]:
    return [ScheduledJob(job_id=f"job-{index}", destination=name) for index, name in enumerate(destinations)]


def test_totals_are_sorted_and_aligned_to_longest_destination() -> None:
    jobs = _jobs(["A", "B", "<unknown>", "B", "A", "B", "B", "A", "B"])
    lines: list[str] = []

    seen = render_jobs(jobs, TotalsMode(), lines.append)

    assert seen == 9
    assert lines == [
        "<unknown>          1",
        "A                  3",
        "B                  5",
    ]
    assert all(len(line) == len("<unknown>") + 1 + 10 for line in lines)


def test_empty_stream_writes_nothing_in_either_mode() -> None:
    totals: list[str] = []
    detail: list[str] = []

    render_jobs([], TotalsMode(), totals.append)
    render_jobs([], DetailMode(show_content=True, show_properties=True), detail.append)

    assert totals == []
    assert detail == []
    assert format_totals({}) == []


def test_detail_keeps_arrival_order() -> None:
    lines: list[str] = []

    render_jobs(_jobs(["B", "A", "B"]), DetailMode(), lines.append)

    assert lines == ["job-0\tB", "job-1\tA", "job-2\tB"]


def test_detail_with_properties_and_content() -> None:
    job = ScheduledJob(
        job_id="job-1",
        destination="/queue/orders",
        properties={"scheduledJobId": "job-1", "AMQ_SCHEDULED_DELAY": "60000"},
        payload=b"hi",
    )
    lines: list[str] = []

    render_jobs([job], DetailMode(show_content=True, show_properties=True), lines.append)

    assert lines[0] == "job-1\t/queue/orders"
    assert lines[1] == "-- Properties"
    assert set(lines[2:4]) == {"scheduledJobId = job-1", "AMQ_SCHEDULED_DELAY = 60000"}
    assert lines[4] == "-- Content"
    assert lines[5].startswith("0000: 68 69")
    assert lines[5].endswith("hi")
    assert lines[6:] == ["--", ""]


def test_totals_mode_never_renders_content() -> None:
    job = ScheduledJob(job_id="job-1", destination="/queue/a", properties={"k": "v"}, payload=b"secret")
    lines: list[str] = []

    render_jobs([job], TotalsMode(), lines.append)

    assert lines == ["/queue/a          1"]
