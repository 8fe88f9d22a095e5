from datetime import datetime


class EngineError(Exception):
    """Base class for errors raised by the work-item engine."""


class NotFoundError(EngineError):
    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class InvalidTransitionError(EngineError):
    pass


class ValidationError(EngineError):
    pass


class RateLimitedError(EngineError):
    """A change request was already submitted in the current calendar week."""

    def __init__(self, next_available_at: datetime):
        self.next_available_at = next_available_at
        super().__init__(
            "A change request has already been submitted this week. "
            f"You can submit another one starting {next_available_at:%A, %B %d, %Y}."
        )
