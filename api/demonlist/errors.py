"""Domain exceptions for the demonlist API.

Every error the record lifecycle engine or the paginator can raise derives
from ``DemonlistError``. Each carries:

- ``status_code``: the HTTP status the API answers with
- ``error_code``: a stable five-digit code (status followed by a sub-code)
- ``message``: a human-readable description
- ``data``: structured context safe to show to the caller
- ``retryable``: whether resubmitting the same request may succeed

Nothing here is retried internally. Only ``StorageFailure`` is retryable.
"""

from __future__ import annotations

from typing import Any


class DemonlistError(Exception):
    """Base class for errors rendered as structured API responses."""

    status_code: int = 500
    error_code: int = 50000
    retryable: bool = False

    def __init__(self, message: str, data: dict[str, Any] | None = None) -> None:
        self.message = message
        self.data: dict[str, Any] = data or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.error_code, "data": self.data}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# ---------------------------------------------------------------------------
# 404
# ---------------------------------------------------------------------------


class NotFound(DemonlistError):
    status_code = 404
    error_code = 40401

    def __init__(self, entity: str, **lookup: Any) -> None:
        described = ", ".join(f"{key} {value!r}" for key, value in lookup.items())
        super().__init__(f"No {entity} with {described} found", {"entity": entity, **lookup})


# ---------------------------------------------------------------------------
# Validation and duplicates
# ---------------------------------------------------------------------------


class InvalidProgress(DemonlistError):
    status_code = 422
    error_code = 42215

    def __init__(self, requirement: int) -> None:
        self.requirement = requirement
        super().__init__(
            f"Record progress must lie between {requirement} and 100%!",
            {"requirement": requirement},
        )


class DuplicateSubmission(DemonlistError):
    """A record for the same player, demon and video (or a blocking one) exists.

    ``existing_id`` is ``None`` when the caller may not see the existing record.
    """

    status_code = 422
    error_code = 42217

    def __init__(self, existing_status: str, existing_id: int | None = None) -> None:
        self.existing_id = existing_id
        self.existing_status = existing_status
        message = f"This record is already {existing_status}"
        if existing_id is not None:
            message += f" (existing record: {existing_id})"
        super().__init__(message, {"existing": existing_id, "status": existing_status})


class MalformedInput(DemonlistError):
    status_code = 422
    error_code = 42200


class InvalidPaginationLimit(MalformedInput):
    error_code = 42207

    def __init__(self, maximum: int) -> None:
        super().__init__(f"Invalid value for 'limit': must lie between 1 and {maximum}", {"maximum": maximum})


class InvalidCursorWindow(MalformedInput):
    error_code = 42227

    def __init__(self, before: int, after: int) -> None:
        super().__init__(
            "'after' must be smaller than 'before' when both are given",
            {"before": before, "after": after},
        )


class InvalidVideo(MalformedInput):
    error_code = 42225

    def __init__(self, reason: str, expected: str | None = None) -> None:
        data = {"expected": expected} if expected else {}
        super().__init__(reason, data)


class ValueOutOfRange(MalformedInput):
    def __init__(self, field: str, minimum: int, maximum: int) -> None:
        super().__init__(
            f"Invalid value for '{field}': must lie between {minimum} and {maximum}",
            {"field": field, "minimum": minimum, "maximum": maximum},
        )


class MutuallyExclusive(MalformedInput):
    error_code = 42229

    def __init__(self, *fields: str) -> None:
        super().__init__(
            f"Fields {', '.join(fields)} are mutually exclusive",
            {"fields": list(fields)},
        )


# ---------------------------------------------------------------------------
# Policy violations
# ---------------------------------------------------------------------------


class PolicyViolation(DemonlistError):
    status_code = 422
    error_code = 42200


class PlayerBanned(PolicyViolation):
    error_code = 42218

    def __init__(self) -> None:
        super().__init__("The given player is banned and thus cannot have non-rejected records on the list!")


class SubmitLegacy(PolicyViolation):
    error_code = 42219

    def __init__(self) -> None:
        super().__init__("You cannot submit records for legacy demons")


class Non100Extended(PolicyViolation):
    error_code = 42220

    def __init__(self) -> None:
        super().__init__("Only 100% records can be submitted for the extended section of the list")


class MissingPermissions(PolicyViolation):
    status_code = 403
    error_code = 40301

    def __init__(self, required: str) -> None:
        super().__init__(
            f"You do not have the permissions required to perform this request (requires {required})",
            {"required": required},
        )


class VideoRequired(PolicyViolation):
    status_code = 403
    error_code = 40302

    def __init__(self) -> None:
        super().__init__("Submissions without a video can only be added by members of the list team")


class BannedFromSubmissions(PolicyViolation):
    status_code = 403
    error_code = 40304

    def __init__(self) -> None:
        super().__init__("You are banned from submitting records to the demonlist!")


class TransitionNotAllowed(PolicyViolation):
    status_code = 403
    error_code = 40305

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            f"You may not move a {current} record to {target}",
            {"current": current, "target": target},
        )


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


class PreconditionFailed(DemonlistError):
    status_code = 412
    error_code = 41200

    def __init__(self) -> None:
        super().__init__("The resource was modified since you last retrieved it (If-Match mismatch)")


class PreconditionRequired(DemonlistError):
    status_code = 428
    error_code = 42800

    def __init__(self) -> None:
        super().__init__("This request requires an If-Match header")


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class StorageFailure(DemonlistError):
    status_code = 500
    error_code = 50003
    retryable = True

    def __init__(self, message: str = "The database could not complete the request, please retry") -> None:
        super().__init__(message)


class InternalError(DemonlistError):
    status_code = 500
    error_code = 50000
