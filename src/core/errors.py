"""
Error taxonomy for the prep engine.

- InputError: malformed caller input, rejected before any store is touched
- PersistenceUnavailable: a store adapter failed; propagated untouched
- InvariantViolation: a content record breaks a data invariant
- ModuleGraphError: course structure with unknown or cyclic prerequisites

An empty session is not an error; see SessionResult.is_empty.
"""

from __future__ import annotations


class PrepEngineError(Exception):
    """Base class for engine errors."""


class InputError(PrepEngineError, ValueError):
    """Raised when a filter or progress update is malformed."""


class PersistenceUnavailable(PrepEngineError):
    """Raised by store adapters when the backing store cannot be reached."""


class InvariantViolation(PrepEngineError):
    """Raised when an authored record violates a content invariant."""

    def __init__(self, record_id: str, reason: str):
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"{record_id}: {reason}")


class ModuleGraphError(InputError):
    """Raised when module prerequisites reference unknown modules or form a cycle."""


def require_id(value: object, name: str) -> None:
    """Raise InputError unless `value` is a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise InputError(f"{name} must be a non-empty string")
