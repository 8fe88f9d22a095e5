"""One change request per calendar week.

Weeks start on Monday 00:00:00. The check always runs against stored
submissions at request time; nothing is counted down or restored.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlmodel import Session, select

from portal.core.errors import RateLimitedError
from portal.models.change_request import ChangeRequest
from portal.models.project import Project
from portal.schemas.change_request import SubmissionWindow, TimelineImpact

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)


def week_start(now: datetime) -> datetime:
    """Monday 00:00:00 of the week containing ``now`` (Sunday closes the week)."""
    monday = now - timedelta(days=now.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def can_submit(submissions: Iterable, now: datetime) -> SubmissionWindow:
    """``submissions`` is any iterable of objects carrying ``created_at``."""
    start = week_start(now)
    used = any(s.created_at >= start for s in submissions)
    if used:
        return SubmissionWindow(allowed=False, week_start=start, next_available_at=start + WEEK)
    return SubmissionWindow(allowed=True, week_start=start)


def check_submission_allowed(
    session: Session,
    project_id: int,
    now: datetime,
    author_id: Optional[int] = None,
) -> SubmissionWindow:
    q = select(ChangeRequest).where(
        ChangeRequest.project_id == project_id,
        ChangeRequest.created_at >= week_start(now),
    )
    if author_id is not None:
        q = q.where(ChangeRequest.author_id == author_id)
    return can_submit(session.exec(q).all(), now)


def create_change_request(
    session: Session,
    project_id: int,
    author_id: int,
    data: dict,
    now: datetime,
    rate_limited: bool = True,
) -> ChangeRequest:
    """Stores a change request; raises RateLimitedError when the week is used."""
    if rate_limited:
        window = check_submission_allowed(session, project_id, now, author_id=author_id)
        if not window.allowed:
            logger.info(
                "Change request by user %s on project %s refused until %s",
                author_id,
                project_id,
                window.next_available_at,
            )
            raise RateLimitedError(window.next_available_at)

    change_request = ChangeRequest(
        **data,
        project_id=project_id,
        author_id=author_id,
        created_at=now,
        updated_at=now,
    )
    session.add(change_request)
    session.commit()
    session.refresh(change_request)
    return change_request


def timeline_impact(
    estimate_hours: float,
    weekly_capacity_hours: Optional[int],
    due_date: Optional[datetime],
) -> TimelineImpact:
    """Days of delay the extra hours cause at the project's weekly capacity."""
    daily_capacity = (weekly_capacity_hours or 40) / 7
    delay_days = math.ceil(estimate_hours / daily_capacity)
    new_due_date = due_date + timedelta(days=delay_days) if due_date else None
    return TimelineImpact(delay_days=delay_days, new_due_date=new_due_date)


def review_change_request(
    session: Session,
    change_request: ChangeRequest,
    project: Project,
    data: dict,
    now: datetime,
) -> ChangeRequest:
    if data.get("status") is None:
        data = {k: v for k, v in data.items() if k != "status"}
    for key, value in data.items():
        setattr(change_request, key, value)
    if data.get("estimate_hours") is not None:
        impact = timeline_impact(data["estimate_hours"], project.weekly_capacity_hours, project.due_date)
        change_request.estimated_timeline_delay_days = impact.delay_days
        change_request.new_project_due_date = impact.new_due_date
    change_request.updated_at = now
    session.add(change_request)
    session.commit()
    session.refresh(change_request)
    return change_request
