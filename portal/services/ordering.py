"""Column placement for work items on the board.

Any status may follow any other. A move only fails when the item is unknown
or the requested position lies outside the destination column. Shifts are
always recomputed from the stored order, never from a client-supplied one.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from portal.core.clock import utcnow
from portal.core.errors import InvalidTransitionError
from portal.models.enums import WorkItemStatus
from portal.models.work_item import WorkItem
from portal.services.project_updates import record_status_change
from portal.services.work_item_store import get_work_item, list_group, lock_project, reorder_group

logger = logging.getLogger(__name__)


def plan_move(group_ids: List[int], item_id: int, target_index: int) -> List[int]:
    """Returns the destination column order with ``item_id`` at ``target_index``.

    ``group_ids`` may or may not already contain the item.
    """
    others = [i for i in group_ids if i != item_id]
    if target_index < 0 or target_index > len(others):
        raise InvalidTransitionError(
            f"Target index {target_index} out of bounds for a column of {len(others)} other items"
        )
    others.insert(target_index, item_id)
    return others


def move_work_item(
    session: Session,
    project_id: int,
    item_id: int,
    target_status: WorkItemStatus,
    target_index: int,
    actor_id: Optional[int] = None,
) -> Tuple[WorkItem, List[WorkItem]]:
    """Moves an item to ``target_index`` of the ``target_status`` column.

    Status and position are committed together. Replaying the same move is a
    no-op. Returns the item and the destination column as stored.
    """
    lock_project(session, project_id)
    item = get_work_item(session, project_id, item_id, lock=True)
    source_status = item.status
    destination = list_group(session, project_id, target_status, exclude_id=item.id, lock=True)
    source: List[WorkItem] = []
    if source_status != target_status:
        source = list_group(session, project_id, source_status, exclude_id=item.id, lock=True)

    order = plan_move([i.id for i in destination], item.id, target_index)
    by_id = {i.id: i for i in destination}
    by_id[item.id] = item
    column = [by_id[i] for i in order]

    try:
        if item.status != target_status:
            item.status = target_status
            session.add(item)
        changed = reorder_group(session, column) + reorder_group(session, source)
        if changed or source_status != target_status:
            item.updated_at = utcnow()
            session.add(item)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Moving work item %s in project %s failed", item_id, project_id)
        raise

    session.refresh(item)
    logger.info(
        "Work item %s moved in project %s: %s -> %s at index %s",
        item.id,
        project_id,
        source_status.value,
        target_status.value,
        target_index,
    )
    record_status_change(session, project_id, item.title, source_status, target_status, actor_id)
    return item, list_group(session, project_id, target_status)
