"""
Domain errors for route computation and route/order lifecycle.

Every error carries a stable ``code`` and a ``context`` dict with the
identifiers and states needed to render an actionable message. Nothing
from the underlying exception (driver errors, tracebacks) is exposed.
"""
from typing import Any, Optional


class DispatchError(Exception):
    """Base class for all dispatch domain errors."""

    code = "dispatch_error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def add_context(self, **context: Any) -> "DispatchError":
        """Attach caller context without overwriting keys already set."""
        for key, value in context.items():
            if value is not None:
                self.context.setdefault(key, value)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-safe error body."""
        return {
            "error": self.code,
            "message": self.message,
            "context": self.context,
        }


class InvalidCoordinateFormat(DispatchError):
    """Raised when a coordinate string is missing, malformed or out of range."""

    code = "invalid_coordinate_format"

    def __init__(
        self,
        value: Optional[str],
        reason: str,
        order_id: Optional[int] = None,
        **context: Any,
    ):
        if order_id is not None:
            subject = f"order {order_id}"
        elif context.get("route_id") is not None:
            subject = f"route {context['route_id']} location"
        else:
            subject = "coordinate"
        super().__init__(
            f"Invalid coordinates for {subject}: {reason}",
            value=value,
            reason=reason,
            order_id=order_id,
            **context,
        )
        self.value = value
        self.reason = reason
        self.order_id = order_id


class NoValidStops(DispatchError):
    """Raised when no delivery point survives validation."""

    code = "no_valid_stops"

    def __init__(self, order_ids: list[int], rejected: Optional[dict[int, str]] = None):
        super().__init__(
            "None of the requested orders has usable delivery coordinates",
            order_ids=list(order_ids),
            rejected={str(k): v for k, v in (rejected or {}).items()},
        )
        self.order_ids = list(order_ids)
        self.rejected = dict(rejected or {})


class InvalidTransition(DispatchError):
    """Raised when a lifecycle action is requested from an incompatible state."""

    code = "invalid_transition"

    def __init__(
        self,
        entity: str,
        entity_id: int,
        action: str,
        current: str,
        allowed: list[str],
        terminal: bool = False,
    ):
        if terminal:
            message = f"Cannot {action} {entity} {entity_id}: status {current!r} is final"
        else:
            message = (
                f"Cannot {action} {entity} {entity_id}: status is {current!r}, "
                f"expected one of {allowed}"
            )
        super().__init__(
            message,
            entity=entity,
            entity_id=entity_id,
            action=action,
            current=current,
            allowed=allowed,
            terminal=terminal,
        )
        self.entity = entity
        self.entity_id = entity_id
        self.action = action
        self.current = current
        self.allowed = allowed
        self.terminal = terminal


class NotFound(DispatchError):
    """Raised when a route or order id does not exist."""

    code = "not_found"

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            f"{entity.capitalize()} {entity_id} not found",
            entity=entity,
            entity_id=entity_id,
        )
        self.entity = entity
        self.entity_id = entity_id


class PersistenceFailure(DispatchError):
    """Raised when the storage collaborator fails while reading or writing."""

    code = "persistence_failure"

    def __init__(
        self,
        operation: str,
        entity: str,
        entity_id: Optional[int] = None,
        detail: Optional[str] = None,
        **context: Any,
    ):
        target = f"{entity} {entity_id}" if entity_id is not None else entity
        super().__init__(
            f"Storage failure during {operation} on {target}",
            operation=operation,
            entity=entity,
            entity_id=entity_id,
            detail=detail,
            **context,
        )
        self.operation = operation
        self.entity = entity
        self.entity_id = entity_id


class ConcurrentModification(PersistenceFailure):
    """Raised when an optimistic version check loses to a concurrent writer."""

    code = "concurrent_modification"

    def __init__(self, entity: str, entity_id: int, expected_version: int):
        super().__init__(
            "update",
            entity,
            entity_id,
            detail="record was modified concurrently",
            expected_version=expected_version,
        )
        self.expected_version = expected_version
