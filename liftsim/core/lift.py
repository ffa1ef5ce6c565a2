import simpy

from .door import Door
from .entity import Entity
from .exceptions import AlreadyAtFloor, InvalidDirection, OutOfRangeFloor
from .requests import RequestBook
from .types import Direction, DoorState, LiftStatus


class Lift(Entity):
    """
    A single elevator car serving the floors min_floor..max_floor.

    Riders register intents with press_button() (inside the car) and
    call_lift() (hall call with direction). The operator drives the car
    with open_doors(), close_doors() and move_to_floor(); each of these
    returns a SimPy process that completes when the sequence is done.

    Suspending sequences are serialized by a capacity-1 resource: a
    second sequence requested while one is running waits for it to
    finish. Request intake and status reads never wait.

    Requests are resolved only when the doors finish opening: the in-car
    request for the floor is always served, a hall call when the car is
    IDLE or travelling in the call's direction.

    Motion is single-destination: the car does not stop at intermediate
    floors, even when requests are pending there.
    """
    topic_root = "lift"

    def __init__(self, env: simpy.Environment, min_floor: int = 0, max_floor: int = 10, start_floor: int = 0,
                 name: str = "Lift", broker=None, door_open_time: float = 1.0, door_close_time: float = 1.0,
                 floor_travel_time: float = 3.0):
        if min_floor > max_floor:
            raise ValueError(f"min_floor ({min_floor}) cannot exceed max_floor ({max_floor})")
        if not (min_floor <= start_floor <= max_floor):
            raise ValueError(f"start_floor must be between {min_floor} and {max_floor}")
        if floor_travel_time <= max(door_open_time, door_close_time):
            raise ValueError("floor_travel_time must be longer than the door open/close times")

        super().__init__(env, name, broker)
        self.min_floor = min_floor
        self.max_floor = max_floor
        self.current_floor = start_floor
        self.direction = Direction.IDLE
        self.floor_travel_time = floor_travel_time

        self.door = Door(env, self.name, open_time=door_open_time, close_time=door_close_time,
                         broker=self.broker, floor_getter=self.get_current_floor)
        self.requests = RequestBook()
        self._controls = simpy.Resource(env, capacity=1)

        self.floors_travelled = 0
        self.trips = 0
        self.state = "IDLE"

    # --- Read-only accessors ---

    def get_current_floor(self) -> int:
        return self.current_floor

    def get_door_state(self) -> DoorState:
        return self.door.door_state

    def get_direction(self) -> Direction:
        return self.direction

    @property
    def door_state(self) -> DoorState:
        return self.door.door_state

    @property
    def internal_requests(self):
        return self.requests.car_calls

    @property
    def external_calls(self):
        return self.requests.hall_calls

    def is_busy(self) -> bool:
        """True while a door or motion sequence is running or queued"""
        return self._controls.count > 0 or len(self._controls.queue) > 0

    def get_status(self) -> LiftStatus:
        """Snapshot of the lift. No side effects."""
        return LiftStatus(
            name=self.name,
            timestamp=self.env.now,
            min_floor=self.min_floor,
            max_floor=self.max_floor,
            current_floor=self.current_floor,
            door_state=self.door.door_state,
            direction=self.direction,
            internal_requests=tuple(sorted(self.requests.car_calls)),
            external_calls=self.requests.hall_calls,
        )

    def show_status(self) -> LiftStatus:
        """Publish the current snapshot on the status topic for renderers"""
        status = self.get_status()
        self._publish("status", status=status.to_dict())
        return status

    # --- Request intake ---

    def press_button(self, floor: int) -> bool:
        """
        Press a floor button inside the car.

        Returns:
            True if a new request was registered, False if it was already pending

        Raises:
            OutOfRangeFloor: floor is not served by this lift
            AlreadyAtFloor: the car is at floor already
        """
        self._check_floor(floor)
        if floor == self.current_floor:
            raise AlreadyAtFloor(floor)
        if not self.requests.add_car_call(floor):
            return False
        self._publish("car_call_registered", floor=floor)
        return True

    def call_lift(self, floor: int, direction) -> bool:
        """
        Call the lift from a floor.

        Args:
            floor: Floor the call is made from
            direction: Direction.UP / Direction.DOWN (or 'up' / 'down')

        Returns:
            True if a new call was registered, False if the same call was pending

        Raises:
            OutOfRangeFloor: floor is not served by this lift
            InvalidDirection: direction is IDLE or not a direction at all
        """
        self._check_floor(floor)
        try:
            direction = Direction.parse(direction)
        except ValueError:
            raise InvalidDirection(direction) from None
        if direction is Direction.IDLE:
            raise InvalidDirection(direction)
        if not self.requests.add_hall_call(floor, direction):
            return False
        self._publish("hall_call_registered", floor=floor, direction=direction.value)
        return True

    # --- Suspending operations ---

    def open_doors(self) -> simpy.Process:
        """Open the doors and resolve requests at the current floor"""
        return self.env.process(self._open_doors_process())

    def close_doors(self) -> simpy.Process:
        """Close the doors"""
        return self.env.process(self._close_doors_process())

    def move_to_floor(self, target_floor: int) -> simpy.Process:
        """
        Travel to target_floor: close the doors if open, move floor by
        floor without stopping, then open the doors at the target.

        Raises:
            OutOfRangeFloor: target_floor is not served by this lift
            AlreadyAtFloor: the car is at target_floor already
        """
        self._check_floor(target_floor)
        if target_floor == self.current_floor:
            raise AlreadyAtFloor(target_floor)
        return self.env.process(self._move_process(target_floor))

    def _open_doors_process(self):
        with self._controls.request() as req:
            yield req
            yield from self._open_sequence()
            self.set_state("IDLE")

    def _close_doors_process(self):
        with self._controls.request() as req:
            yield req
            self.set_state("DOOR_CLOSING")
            yield from self.door.closing()
            self.set_state("IDLE")

    def _move_process(self, target_floor):
        with self._controls.request() as req:
            yield req

            # An earlier queued sequence may have brought the car here
            if target_floor == self.current_floor:
                self._publish("already_at_floor", floor=target_floor)
                return

            if self.door.is_open():
                self.set_state("DOOR_CLOSING")
                yield from self.door.closing()

            direction = Direction.UP if target_floor > self.current_floor else Direction.DOWN
            step = 1 if direction is Direction.UP else -1
            self._update_direction(direction)
            self.set_state("MOVING")
            self._publish("moving", direction=direction.value, from_floor=self.current_floor, to_floor=target_floor)

            while self.current_floor != target_floor:
                yield self.env.timeout(self.floor_travel_time)
                self.current_floor += step
                self.floors_travelled += 1
                if self.current_floor != target_floor:
                    self._publish("passing_floor", floor=self.current_floor, direction=direction.value)

            self._publish("arrived", floor=self.current_floor)
            self.trips += 1
            self._update_direction(Direction.IDLE)
            yield from self._open_sequence()
            self.set_state("IDLE")

    def _open_sequence(self):
        self.set_state("DOOR_OPENING")
        opened = yield from self.door.opening()
        if opened:
            self._check_fulfilled()

    # --- Internal helpers ---

    def _check_floor(self, floor: int):
        if floor < self.min_floor or floor > self.max_floor:
            raise OutOfRangeFloor(floor, self.min_floor, self.max_floor)

    def _update_direction(self, new_direction: Direction):
        if self.direction != new_direction:
            old_direction = self.direction
            self.direction = new_direction
            self._publish("direction_changed", old_direction=old_direction.value, new_direction=new_direction.value)

    def _check_fulfilled(self):
        car_served, hall_served = self.requests.fulfill(self.current_floor, self.direction)
        if car_served:
            self._publish("car_call_fulfilled", floor=self.current_floor)
        for call in hall_served:
            self._publish("hall_call_fulfilled", floor=call.floor, direction=call.direction.value)
