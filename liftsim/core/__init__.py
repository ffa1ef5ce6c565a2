"""Core simulation entities"""

from .entity import Entity
from .door import Door
from .lift import Lift
from .requests import RequestBook
from .types import Direction, DoorState, HallCall, LiftStatus
from .exceptions import LiftError, OutOfRangeFloor, AlreadyAtFloor, InvalidDirection

__all__ = [
    'Entity',
    'Door',
    'Lift',
    'RequestBook',
    'Direction',
    'DoorState',
    'HallCall',
    'LiftStatus',
    'LiftError',
    'OutOfRangeFloor',
    'AlreadyAtFloor',
    'InvalidDirection',
]
