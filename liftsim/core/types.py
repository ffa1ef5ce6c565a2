"""Value types shared by the lift core and its observers"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class Direction(str, Enum):
    """Travel direction of the car or of a hall call"""
    UP = "UP"
    DOWN = "DOWN"
    IDLE = "IDLE"

    @classmethod
    def parse(cls, value) -> "Direction":
        """
        Convert user input ('up', 'DOWN', Direction.UP, ...) to a Direction.

        Raises:
            ValueError: If value names no direction
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise ValueError(f"Unknown direction: {value!r}")


class DoorState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class HallCall:
    """A request for service made from outside the car"""
    floor: int
    direction: Direction

    def __str__(self):
        return f"{self.floor}({self.direction.value})"

    def to_dict(self) -> dict:
        return {'floor': self.floor, 'direction': self.direction.value}


@dataclass(frozen=True)
class LiftStatus:
    """Read-only snapshot of the lift, safe to hand to renderers"""
    name: str
    timestamp: float
    min_floor: int
    max_floor: int
    current_floor: int
    door_state: DoorState
    direction: Direction
    internal_requests: Tuple[int, ...] = field(default_factory=tuple)
    external_calls: Tuple[HallCall, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary"""
        return {
            'name': self.name,
            'timestamp': self.timestamp,
            'min_floor': self.min_floor,
            'max_floor': self.max_floor,
            'current_floor': self.current_floor,
            'door_state': self.door_state.value,
            'direction': self.direction.value,
            'internal_requests': list(self.internal_requests),
            'external_calls': [call.to_dict() for call in self.external_calls],
        }
