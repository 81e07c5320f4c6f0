"""
Error types for state of mind logging.

Every error carries the offending value so callers can report exactly which
field failed and why. Nothing here is retried or recovered internally.
"""

import math
from enum import Enum
from typing import Any


class StateOfMindError(Exception):
    """Base class for all errors raised while logging a sample."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        value = self.value
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, float) and not math.isfinite(value):
            value = str(value)
        elif not isinstance(value, (str, int, float, bool, list, type(None))):
            value = str(value)
        return {"error": type(self).__name__, "message": self.message, "value": value}


# MARK: - Validation


class ValidationError(StateOfMindError):
    """The request could not be turned into a sample."""


class ValenceOutOfRange(ValidationError):
    def __init__(self, value: float) -> None:
        super().__init__(f"Valence {value} is outside the range -1 to 1", value)


class UnsupportedKind(ValidationError):
    def __init__(self, value: Any) -> None:
        super().__init__(f"Unsupported kind: {value!r}", value)


class UnsupportedLabel(ValidationError):
    def __init__(self, values: list[Any]) -> None:
        super().__init__(f"Unsupported labels: {values!r}", values)


class UnsupportedAssociation(ValidationError):
    def __init__(self, values: list[Any]) -> None:
        super().__init__(f"Unsupported associations: {values!r}", values)


class TimeNormalizationFailed(ValidationError):
    def __init__(self, value: Any, reason: str) -> None:
        super().__init__(f"Could not move daily mood time: {reason}", value)


# MARK: - Conversion


class ConversionError(StateOfMindError):
    """A store record could not be converted back into a sample."""


class UnrecognizedExternalField(ConversionError):
    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"Unrecognized value in store record field {field!r}: {value!r}", value)
        self.field = field


# MARK: - Availability


class AvailabilityError(StateOfMindError):
    """The store cannot accept writes right now."""


class StoreUnavailable(AvailabilityError):
    def __init__(self) -> None:
        super().__init__("Health data is not available on this device")


class Unauthorized(AvailabilityError):
    def __init__(self, status: Any) -> None:
        super().__init__(f"Not authorized to save state of mind samples ({status})", status)
        self.status = status


# MARK: - Store


class StoreError(StateOfMindError):
    """The store rejected or failed the write."""

    def __init__(self, cause: BaseException) -> None:
        message = str(cause) or type(cause).__name__
        super().__init__(f"Failed to save sample: {message}", message)
