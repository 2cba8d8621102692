from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from amqscheduler.app.scheduler.report import render_jobs
from amqscheduler.domain.scheduler import DetailMode, ScheduledJob, TotalsMode, build_remove_one, decode_job
from amqscheduler.domain.scheduler.commands import SCHEDULED_ID, SCHEDULER_ACTION
from amqscheduler.domain.scheduler.jobs import ReplyFrame

_job_ids = st.text(min_size=1, max_size=40)
_destinations = st.text(
    alphabet=st.characters(min_codepoint=33, max_codepoint=126),
    min_size=1,
    max_size=12,
)


@given(job_id=_job_ids)
def test_remove_one_headers_are_exact(job_id: str) -> None:
    message = build_remove_one(job_id)

    assert message.headers == {SCHEDULER_ACTION: "REMOVE", SCHEDULED_ID: job_id}


@given(job_id=_job_ids, destination=_destinations, body=st.binary(max_size=64))
def test_decode_is_deterministic(job_id: str, destination: str, body: bytes) -> None:
    frame = ReplyFrame(headers={SCHEDULED_ID: job_id, "original-destination": destination}, body=body)

    assert decode_job(frame) == decode_job(frame)


@settings(max_examples=50)
@given(destinations=st.lists(_destinations, max_size=30))
def test_totals_one_sorted_line_per_destination(destinations: list[str]) -> None:
    jobs = [ScheduledJob(job_id=str(index), destination=name) for index, name in enumerate(destinations)]
    lines: list[str] = []

    render_jobs(jobs, TotalsMode(), lines.append)

    expected = sorted(set(destinations))
    assert [line.rsplit(None, 1)[0] for line in lines] == expected
    assert sum(int(line.rsplit(None, 1)[1]) for line in lines) == len(destinations)
    if destinations:
        width = max(len(name) for name in destinations)
        assert {len(line) for line in lines} == {width + 11}


@settings(max_examples=50)
@given(destinations=st.lists(_destinations, max_size=30))
def test_detail_preserves_arrival_order(destinations: list[str]) -> None:
    jobs = [ScheduledJob(job_id=str(index), destination=name) for index, name in enumerate(destinations)]
    lines: list[str] = []

    render_jobs(jobs, DetailMode(), lines.append)

    assert [line.split("\t", 1)[1] for line in lines] == destinations
