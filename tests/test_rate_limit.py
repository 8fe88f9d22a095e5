import sys
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("database_url", "sqlite:///:memory:")
os.environ.setdefault("secret_key", "testsecret")

import pytest
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from portal.core.errors import RateLimitedError
from portal.models.change_request import ChangeRequest
from portal.models.project import Project
from portal.services.rate_limit import (
    can_submit,
    check_submission_allowed,
    create_change_request,
    timeline_impact,
    week_start,
)

MONDAY = datetime(2024, 1, 1, tzinfo=timezone.utc)  # a Monday


def submitted(at):
    return SimpleNamespace(created_at=at)


@pytest.mark.parametrize(
    "now",
    [
        MONDAY,
        MONDAY + timedelta(days=2, hours=13),
        MONDAY + timedelta(days=6, hours=23, minutes=59, seconds=59),
    ],
)
def test_week_start_is_previous_monday_midnight(now):
    assert week_start(now) == MONDAY


def test_sunday_belongs_to_the_week_that_started_monday():
    sunday = datetime(2024, 1, 7, 10, 30, tzinfo=timezone.utc)
    assert sunday.weekday() == 6
    assert week_start(sunday) == MONDAY


def test_week_start_keeps_timezone():
    now = datetime(2024, 1, 3, 8, 0, tzinfo=timezone.utc)
    assert week_start(now) == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_submission_on_monday_blocks_until_next_monday():
    history = [submitted(MONDAY)]

    late_sunday = can_submit(history, MONDAY + timedelta(days=6, hours=23, minutes=59, seconds=59))
    assert late_sunday.allowed is False
    assert late_sunday.next_available_at == MONDAY + timedelta(days=7)

    next_monday = can_submit(history, MONDAY + timedelta(days=7))
    assert next_monday.allowed is True
    assert next_monday.next_available_at is None


def test_previous_week_submissions_do_not_count():
    history = [submitted(MONDAY - timedelta(seconds=1)), submitted(MONDAY - timedelta(days=3))]
    assert can_submit(history, MONDAY + timedelta(days=1)).allowed is True
    assert can_submit([], MONDAY).allowed is True


def create_engine_and_tables():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        session.add(Project(id=1, name="Proj"))
        session.add(Project(id=2, name="Other"))
        session.commit()
    return engine


def test_create_change_request_enforces_weekly_window():
    engine = create_engine_and_tables()
    data = {"title": "More reports", "description": "Add export"}
    with Session(engine) as session:
        first = create_change_request(session, 1, 7, data, MONDAY + timedelta(days=1))
        assert first.id is not None

        with pytest.raises(RateLimitedError) as excinfo:
            create_change_request(session, 1, 7, data, MONDAY + timedelta(days=4))
        assert excinfo.value.next_available_at == MONDAY + timedelta(days=7)

        # another project, another author and the next week are all open
        create_change_request(session, 2, 7, data, MONDAY + timedelta(days=4))
        create_change_request(session, 1, 8, data, MONDAY + timedelta(days=4))
        create_change_request(session, 1, 7, data, MONDAY + timedelta(days=7))


def test_unlimited_submissions_skip_the_window():
    engine = create_engine_and_tables()
    data = {"title": "Tweak", "description": "Copy change"}
    with Session(engine) as session:
        create_change_request(session, 1, 7, data, MONDAY, rate_limited=False)
        create_change_request(session, 1, 7, data, MONDAY, rate_limited=False)


def test_check_submission_allowed_reads_live_rows():
    engine = create_engine_and_tables()
    with Session(engine) as session:
        session.add(ChangeRequest(project_id=1, author_id=7, title="t", description="d", created_at=MONDAY))
        session.commit()

        per_project = check_submission_allowed(session, 1, MONDAY + timedelta(days=3))
        assert per_project.allowed is False
        assert per_project.week_start == MONDAY

        assert check_submission_allowed(session, 1, MONDAY + timedelta(days=3), author_id=8).allowed is True
        assert check_submission_allowed(session, 2, MONDAY + timedelta(days=3)).allowed is True


def test_timeline_impact():
    impact = timeline_impact(12, 40, datetime(2024, 6, 1, tzinfo=timezone.utc))
    assert impact.delay_days == 3  # 12h at 40/7 h per day
    assert impact.new_due_date == datetime(2024, 6, 4, tzinfo=timezone.utc)

    no_due_date = timeline_impact(1, None, None)
    assert no_due_date.delay_days == 1
    assert no_due_date.new_due_date is None
