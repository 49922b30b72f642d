"""Typed failures raised by the budget and analytics engine."""

from __future__ import annotations


class EngineError(ValueError):
    """Base class for rejected engine inputs.

    ``code`` is a stable identifier for the violated rule so callers can map
    it to a user-facing message without parsing ``str(exc)``.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class InvalidDeclaration(EngineError):
    """Budget math would be nonsensical for the supplied declaration."""


class InvalidRange(EngineError):
    """A requested date range is reversed or longer than allowed."""


class InvalidRating(EngineError):
    """A rating falls outside the configured scale."""


class NotFound(LookupError):
    """A referenced row does not exist for the user."""


class PlanNotFound(NotFound):
    """No savings plan with the given id exists for the user."""


class ServicePostNotFound(NotFound):
    """No service post with the given id exists for the user."""


class DuplicatePlan(ValueError):
    """A savings plan already exists for the requested month."""


__all__ = [
    "DuplicatePlan",
    "EngineError",
    "InvalidDeclaration",
    "InvalidRange",
    "InvalidRating",
    "NotFound",
    "PlanNotFound",
    "ServicePostNotFound",
]
