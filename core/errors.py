"""Exception types raised by the StudyDesk core library."""

from __future__ import annotations


class StudyDeskError(Exception):
    """Base class for StudyDesk errors."""


class ValidationError(StudyDeskError):
    """Payload failed validation. ``errors`` holds one message per problem."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class NotFoundError(StudyDeskError):
    """No entity with the requested id."""

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
