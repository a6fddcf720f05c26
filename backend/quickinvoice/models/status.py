"""Order status base classes with display metadata.

This module provides a declarative way to define statuses that carry a
display label, a severity tone and a lifecycle rank alongside their stored
string value.

Usage:
    class MyStatus(LifecycleStatusEnum):
        OPEN = Status("open", rank=0, label="OPEN", tone=Tone.WARNING)
        DONE = Status("done", rank=1, label="DONE", tone=Tone.SUCCESS)
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Tone(StrEnum):
    """Severity tag for a status badge.

    Renderers map tones to colours; the tag itself carries no colour.
    """

    NEUTRAL = "neutral"
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Status:
    """Status definition with value, lifecycle rank, label and tone."""

    value: str
    rank: int = 0
    label: str = ""
    tone: Tone = Tone.NEUTRAL

    def __post_init__(self) -> None:
        if self.rank < 0:
            raise ValueError("rank may not be negative")

    @property
    def display(self) -> str:
        return self.label or self.value.upper()


# Registry to store Status metadata for each enum class
_status_registries: dict[type, dict[str, Status]] = {}


class LifecycleStatusEnum(StrEnum):
    """Base class for status enums with metadata support.

    Subclasses define members using Status objects:
        PAID = Status("paid", rank=1, label="PAID", tone=Tone.SUCCESS)

    The enum value is the string (for DB), metadata accessible via .meta
    """

    def __new__(cls, status: Status | str) -> "LifecycleStatusEnum":
        if isinstance(status, Status):
            value = status.value
            if cls not in _status_registries:
                _status_registries[cls] = {}
            _status_registries[cls][value] = status
        else:
            value = status

        obj = str.__new__(cls, value)
        obj._value_ = value
        return obj

    @property
    def meta(self) -> Status:
        """Get metadata for this status."""
        registry = _status_registries.get(type(self), {})
        return registry.get(self._value_, Status(self._value_))

    @property
    def rank(self) -> int:
        return self.meta.rank

    @classmethod
    def initial(cls) -> Any:
        """Lowest-ranked member; new records start here."""
        return min(cls, key=lambda s: s.meta.rank)

    @classmethod
    def ordered(cls) -> "tuple[Any, ...]":
        """Members sorted by lifecycle rank."""
        return tuple(sorted(cls, key=lambda s: s.meta.rank))
