import itertools
from typing import Optional

import simpy

from ..infrastructure.message_broker import MessageBroker


class Entity:
    """
    Base class for components living in a SimPy simulation.

    Provides a name, a unique ID, a string state with transition
    notifications, and a helper to publish notifications on the
    entity's own topic namespace. Entities never print: everything an
    operator might want to see is published through the broker.
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    topic_root = "entity"

    def __init__(self, env: simpy.Environment, name: Optional[str] = None, broker: Optional[MessageBroker] = None):
        """
        Initialize the entity.

        Args:
            env: The SimPy simulation environment this entity belongs to.
            name: Entity name. If not specified, generated from class name and ID.
            broker: Message broker for notifications. A private one is created if omitted.
        """
        self.env = env
        self.entity_id: int = next(self._entity_id_counter)
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"
        self.broker = broker if broker is not None else MessageBroker(env)
        self.state: str = "initial_state"

    def topic(self, event: str) -> str:
        """Topic for one of this entity's notifications"""
        return f"{self.topic_root}/{self.name}/{event}"

    def set_state(self, new_state: str):
        """
        Transition the entity's state.

        Args:
            new_state: String representing the target state for transition.
        """
        if self.state != new_state:
            old_state = self.state
            self.state = new_state
            self._on_state_changed(old_state, new_state)

    def get_state(self) -> str:
        return self.state

    def _on_state_changed(self, old_state: str, new_state: str):
        """Hook called after every state transition"""
        self._publish("state_changed", old_state=old_state, new_state=new_state)

    def _publish(self, event: str, **fields):
        """
        Publish a notification on this entity's topic.

        Every message carries the simulation timestamp, the entity name
        and the event type, followed by event-specific fields.
        """
        message = {"timestamp": self.env.now, self.topic_root: self.name, "event": event}
        message.update(fields)
        self.broker.put(self.topic(event), message)
        return message
