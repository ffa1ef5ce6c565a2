"""
Errors reported to the operator by lift operations.

None of these are fatal: each one means the operation was rejected
before any state changed.
"""


class LiftError(Exception):
    """Base exception for all rejected lift operations."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class OutOfRangeFloor(LiftError, ValueError):
    """Floor argument outside the lift's served range."""
    def __init__(self, floor: int, min_floor: int, max_floor: int):
        self.floor = floor
        self.min_floor = min_floor
        self.max_floor = max_floor
        super().__init__(f"Floor {floor} out of range ({min_floor}-{max_floor})")


class AlreadyAtFloor(LiftError):
    """Target equals the current floor. Informational."""
    def __init__(self, floor: int):
        self.floor = floor
        super().__init__(f"Already at floor {floor}")


class InvalidDirection(LiftError, ValueError):
    """Hall call without a travel direction."""
    def __init__(self, direction):
        self.direction = direction
        super().__init__(f"Cannot call with {getattr(direction, 'value', direction)} direction")
