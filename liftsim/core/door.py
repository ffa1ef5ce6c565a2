import simpy

from .entity import Entity
from .types import DoorState


class Door(Entity):
    """
    Car door operated by the lift.

    The door has no process of its own: the lift drives it by yielding
    from opening()/closing() inside its own sequences, so door motion
    can never overlap car motion.
    """
    topic_root = "lift"

    def __init__(self, env: simpy.Environment, name: str, open_time=1.0, close_time=1.0, broker=None, floor_getter=None):
        """
        Args:
            env: SimPy environment
            name: Name of the owning lift (door notifications share its topics)
            open_time: Time for the doors to open
            close_time: Time for the doors to close
            broker: Message broker for notifications
            floor_getter: Callable returning the car's current floor, for notifications
        """
        super().__init__(env, name, broker)
        if open_time <= 0:
            raise ValueError("open_time must be positive")
        if close_time <= 0:
            raise ValueError("close_time must be positive")
        self.open_time = open_time
        self.close_time = close_time
        self._floor_getter = floor_getter or (lambda: None)
        self.state = DoorState.CLOSED.value
        self.cycles = 0  # completed open/close pairs

    @property
    def door_state(self) -> DoorState:
        return DoorState(self.state)

    def is_open(self) -> bool:
        return self.state == DoorState.OPEN.value

    def _on_state_changed(self, old_state: str, new_state: str):
        # Door transitions are reported by opening()/closing() themselves
        pass

    def opening(self):
        """
        Open the doors (generator for yield from).

        Returns:
            True if the doors moved, False if they were already open
        """
        floor = self._floor_getter()
        if self.is_open():
            self._publish("doors_already_open", floor=floor)
            return False
        self._publish("doors_opening", floor=floor)
        yield self.env.timeout(self.open_time)
        self.set_state(DoorState.OPEN.value)
        self._publish("doors_open", floor=self._floor_getter())
        return True

    def closing(self):
        """
        Close the doors (generator for yield from).

        Returns:
            True if the doors moved, False if they were already closed
        """
        floor = self._floor_getter()
        if not self.is_open():
            self._publish("doors_already_closed", floor=floor)
            return False
        self._publish("doors_closing", floor=floor)
        yield self.env.timeout(self.close_time)
        self.set_state(DoorState.CLOSED.value)
        self.cycles += 1
        self._publish("doors_closed", floor=self._floor_getter())
        return True
