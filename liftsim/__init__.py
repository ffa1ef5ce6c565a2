"""
liftsim - single-car lift simulator

This package provides the lift state machine and the SimPy
infrastructure (message broker, real-time clock) it runs on.
"""

__version__ = "0.1.0"

from .core.lift import Lift
from .core.door import Door
from .core.entity import Entity
from .core.requests import RequestBook
from .core.types import Direction, DoorState, HallCall, LiftStatus
from .core.exceptions import LiftError, OutOfRangeFloor, AlreadyAtFloor, InvalidDirection

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeEnvironment

__all__ = [
    'Lift',
    'Door',
    'Entity',
    'RequestBook',
    'Direction',
    'DoorState',
    'HallCall',
    'LiftStatus',
    'LiftError',
    'OutOfRangeFloor',
    'AlreadyAtFloor',
    'InvalidDirection',
    'MessageBroker',
    'RealtimeEnvironment',
]
