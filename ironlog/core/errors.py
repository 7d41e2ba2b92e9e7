"""Error taxonomy shared by services and the HTTP layer.

Services raise these; ``ironlog.main`` renders them as
``{"error": kind, "message": message}`` with the matching status code.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationIssue:
    """One field-level violation: where it is and what is wrong."""

    loc: tuple[str | int, ...]
    msg: str

    def as_dict(self) -> dict:
        return {"loc": list(self.loc), "msg": self.msg}


class TrackerError(Exception):
    """Base for all client-visible failures."""

    kind = "internal_error"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"error": self.kind, "message": self.message}


class Unauthenticated(TrackerError):
    kind = "unauthenticated"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(TrackerError):
    kind = "forbidden"
    status_code = 403
    default_message = "You do not have access to this resource"


class NotFound(TrackerError):
    kind = "not_found"
    status_code = 404
    default_message = "Resource not found"


class ValidationFailed(TrackerError):
    """Collected list of violations; never raised with an empty list."""

    kind = "validation_failed"
    status_code = 400
    default_message = "Workout payload is invalid"

    def __init__(self, issues: list[ValidationIssue], message: str | None = None) -> None:
        super().__init__(message)
        self.issues = list(issues)

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["errors"] = [issue.as_dict() for issue in self.issues]
        return payload


class CatalogUnavailable(TrackerError):
    kind = "catalog_unavailable"
    status_code = 500
    default_message = "Exercise catalog is unavailable"


class PersistenceFailure(TrackerError):
    """Storage-layer failure. ``workout_id`` is the header that was attempted, if any."""

    kind = "persistence_failure"
    status_code = 500
    default_message = "Could not save workout"

    def __init__(self, message: str | None = None, workout_id: uuid.UUID | None = None) -> None:
        super().__init__(message)
        self.workout_id = workout_id


class CompensationFailed(PersistenceFailure):
    """The compensating delete failed; the workout header may still exist."""

    # Rendered to clients as a plain persistence_failure; the alert channel carries the difference

    def __init__(
        self,
        workout_id: uuid.UUID,
        cause: BaseException,
        compensation_error: BaseException,
    ) -> None:
        super().__init__(workout_id=workout_id)
        self.cause = cause
        self.compensation_error = compensation_error
