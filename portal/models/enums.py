from enum import Enum


class WorkItemStatus(str, Enum):
    BACKLOG = "BACKLOG"
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    QA = "QA"
    BLOCKED = "BLOCKED"
    DONE = "DONE"


class WorkItemPriority(str, Enum):
    LOW = "LOW"
    MED = "MED"
    HIGH = "HIGH"
    URGENT = "URGENT"


class UserType(str, Enum):
    INTERNAL = "INTERNAL"
    CLIENT = "CLIENT"


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"


class ChangeRequestType(str, Enum):
    FEATURE = "FEATURE"
    CHANGE = "CHANGE"
    BUG = "BUG"
    OTHER = "OTHER"


class ChangeRequestStatus(str, Enum):
    NEW = "NEW"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class UpdateType(str, Enum):
    GENERAL = "GENERAL"
    LAUNCH = "LAUNCH"


STATUS_LABELS = {
    WorkItemStatus.BACKLOG: "Backlog",
    WorkItemStatus.PLANNED: "Planned",
    WorkItemStatus.IN_PROGRESS: "In Progress",
    WorkItemStatus.QA: "QA",
    WorkItemStatus.BLOCKED: "Blocked",
    WorkItemStatus.DONE: "Done",
}


class EpicStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
