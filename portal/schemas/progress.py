from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProgressScope(str, Enum):
    project = "project"
    sprint = "sprint"
    milestone = "milestone"


class ProgressSummary(BaseModel):
    completed: int
    total: int
    percent: Optional[int] = None  # None means there is nothing to measure

    @property
    def has_data(self) -> bool:
        return self.total > 0


class ScopedProgress(ProgressSummary):
    scope: ProgressScope
    ref_id: Optional[int] = None


class SprintProgress(BaseModel):
    sprint_id: int
    name: str
    start_date: datetime
    end_date: datetime
    time_progress: int
    items: ProgressSummary
    days_remaining: int
