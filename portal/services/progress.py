"""Completion and elapsed-time ratios for work items and sprints.

Everything here is derived on read. Milestone and project figures are always
recounted from the raw work items so rounding never compounds.
"""

import math
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from sqlmodel import Session, select

from portal.core.errors import NotFoundError
from portal.models.enums import WorkItemStatus
from portal.models.milestone import Milestone
from portal.models.sprint import Sprint
from portal.models.work_item import WorkItem
from portal.schemas.progress import ProgressScope, ProgressSummary, ScopedProgress, SprintProgress


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def progress(items: Iterable[WorkItem]) -> ProgressSummary:
    total = 0
    completed = 0
    for item in items:
        total += 1
        if item.status == WorkItemStatus.DONE:
            completed += 1
    if total == 0:
        return ProgressSummary(completed=0, total=0, percent=None)
    return ProgressSummary(
        completed=completed,
        total=total,
        percent=round_half_up(100 * completed / total),
    )


def sprint_time_progress(sprint: Sprint, now: datetime) -> int:
    """Share of the sprint window elapsed at ``now``, clamped to [0, 100]."""
    if now <= sprint.start_date:
        return 0
    if now >= sprint.end_date:
        return 100
    duration = (sprint.end_date - sprint.start_date).total_seconds()
    elapsed = (now - sprint.start_date).total_seconds()
    return max(0, min(100, round_half_up(100 * elapsed / duration)))


def sprint_items_progress(sprint: Sprint, items: Iterable[WorkItem]) -> ProgressSummary:
    return progress(i for i in items if i.sprint_id == sprint.id)


def days_remaining(sprint: Sprint, now: datetime) -> int:
    seconds = (sprint.end_date - now).total_seconds()
    return max(0, math.ceil(seconds / timedelta(days=1).total_seconds()))


def active_sprint(sprints: Sequence[Sprint], now: datetime) -> Optional[Sprint]:
    """The sprint whose window contains ``now``; latest start wins on overlap."""
    current = [s for s in sprints if s.start_date <= now <= s.end_date]
    if not current:
        return None
    return max(current, key=lambda s: (s.start_date, s.id or 0))


def sprint_summary(sprint: Sprint, items: Iterable[WorkItem], now: datetime) -> SprintProgress:
    return SprintProgress(
        sprint_id=sprint.id,
        name=sprint.name,
        start_date=sprint.start_date,
        end_date=sprint.end_date,
        time_progress=sprint_time_progress(sprint, now),
        items=sprint_items_progress(sprint, items),
        days_remaining=days_remaining(sprint, now),
    )


def compute_progress(
    session: Session,
    project_id: int,
    scope: ProgressScope,
    ref_id: Optional[int] = None,
) -> ScopedProgress:
    items = session.exec(select(WorkItem).where(WorkItem.project_id == project_id)).all()

    if scope == ProgressScope.sprint:
        sprint = session.get(Sprint, ref_id) if ref_id is not None else None
        if not sprint or sprint.project_id != project_id:
            raise NotFoundError("Sprint", ref_id)
        items = [i for i in items if i.sprint_id == sprint.id]
    elif scope == ProgressScope.milestone:
        milestone = session.get(Milestone, ref_id) if ref_id is not None else None
        if not milestone or milestone.project_id != project_id:
            raise NotFoundError("Milestone", ref_id)
        items = [i for i in items if i.milestone_id == milestone.id]

    if scope == ProgressScope.project:
        ref_id = None
    summary = progress(items)
    return ScopedProgress(scope=scope, ref_id=ref_id, **summary.dict())
