from typing import FrozenSet, List, Set, Tuple

from .types import Direction, HallCall


class RequestBook:
    """
    Pending in-car requests and hall calls of one lift.

    In-car requests are a set of floors. Hall calls keep insertion order
    and hold each (floor, direction) pair at most once. Range and
    direction checks belong to the lift; the book only stores and
    resolves.
    """

    def __init__(self):
        self._car_calls: Set[int] = set()
        self._hall_calls: List[HallCall] = []

    def add_car_call(self, floor: int) -> bool:
        """Register an in-car request. Returns False if already pending."""
        if floor in self._car_calls:
            return False
        self._car_calls.add(floor)
        return True

    def add_hall_call(self, floor: int, direction: Direction) -> bool:
        """Register a hall call. Returns False if the same call is pending."""
        call = HallCall(floor, direction)
        if call in self._hall_calls:
            return False
        self._hall_calls.append(call)
        return True

    def fulfill(self, floor: int, car_direction: Direction) -> Tuple[bool, List[HallCall]]:
        """
        Resolve requests for a car standing at floor with open doors.

        The in-car request for the floor is always served. A hall call at
        the floor is served when the car is IDLE or travelling in the
        call's direction; other calls stay queued in their original order.

        Returns:
            (whether an in-car request was served, hall calls served)
        """
        car_served = floor in self._car_calls
        self._car_calls.discard(floor)

        served: List[HallCall] = []
        remaining: List[HallCall] = []
        for call in self._hall_calls:
            if call.floor == floor and car_direction in (Direction.IDLE, call.direction):
                served.append(call)
            else:
                remaining.append(call)
        self._hall_calls = remaining
        return car_served, served

    @property
    def car_calls(self) -> FrozenSet[int]:
        return frozenset(self._car_calls)

    @property
    def hall_calls(self) -> Tuple[HallCall, ...]:
        return tuple(self._hall_calls)

    def has_pending(self) -> bool:
        return bool(self._car_calls or self._hall_calls)

    def __len__(self):
        return len(self._car_calls) + len(self._hall_calls)
