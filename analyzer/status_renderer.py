"""
Console rendering of lift notifications and status snapshots.

The lift publishes structured notifications; this module turns them
into the operator-facing lines shown by the command shell.
"""

from typing import Callable, Optional, Union

from liftsim.core.types import LiftStatus


EVENT_TEMPLATES = {
    "car_call_registered": "Button pressed for floor {floor}",
    "hall_call_registered": "Lift called to floor {floor}, going {direction}",
    "doors_already_open": "Doors already open",
    "doors_opening": "Doors opening...",
    "doors_open": "Doors OPEN at floor {floor}",
    "doors_already_closed": "Doors already closed",
    "doors_closing": "Doors closing...",
    "doors_closed": "Doors CLOSED",
    "moving": "Moving {direction} from floor {from_floor} to {to_floor}...",
    "passing_floor": "Passing floor {floor}...",
    "arrived": "Arrived at floor {floor}",
    "already_at_floor": "Already at floor {floor}",
    "car_call_fulfilled": "✓ Fulfilled internal request for floor {floor}",
    "hall_call_fulfilled": "✓ Fulfilled external call at floor {floor}, direction {direction}",
}


def format_status(status: Union[LiftStatus, dict]) -> str:
    """
    Render a status snapshot as the STATUS block.

    Accepts a LiftStatus or its to_dict() form (as carried in status
    notifications).
    """
    if isinstance(status, LiftStatus):
        status = status.to_dict()

    internal = ", ".join(str(floor) for floor in status['internal_requests']) or "None"
    external = ", ".join(
        f"{call['floor']}({call['direction']})" for call in status['external_calls']
    ) or "None"

    lines = [
        "",
        "--- STATUS ---",
        f"Floor: {status['current_floor']}",
        f"Doors: {status['door_state']}",
        f"Internal: {internal}",
        f"External: {external}",
        "--------------",
        "",
    ]
    return "\n".join(lines)


def format_event(message: dict) -> Optional[str]:
    """
    Render one lift notification as a line of text.

    Returns None for notifications that are not meant for the operator
    (state and direction bookkeeping).
    """
    event = message.get('event')
    if event == "status":
        return format_status(message['status'])
    template = EVENT_TEMPLATES.get(event)
    if template is None:
        return None
    return template.format(**message)


class StatusRenderer:
    """
    Broker subscriber that prints lift notifications as they happen.

    Usage:
        renderer = StatusRenderer()
        broker.subscribe(renderer, topic_prefix="lift/")
    """
    def __init__(self, output_func: Callable[[str], None] = print, show_timestamps: bool = False):
        self.output_func = output_func
        self.show_timestamps = show_timestamps

    def __call__(self, topic: str, message: dict):
        text = format_event(message)
        if text is None:
            return
        if self.show_timestamps and message.get('event') != "status":
            text = f"{message['timestamp']:.2f} [{message.get('lift', topic)}] {text}"
        self.output_func(text)
