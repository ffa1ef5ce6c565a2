import json
import re
from datetime import datetime

import matplotlib.pyplot as plt
import numpy as np


class Statistics:
    """
    Receives all lift notifications from the broadcast pipe and records
    them as an independent "recorder".

    Collects:
    - every notification, in JSON Lines form for offline playback
    - the car trajectory as (time, floor) points
    - registration and fulfillment times of car calls and hall calls
    """
    TOPIC_PATTERN = re.compile(r'lift/(.*?)/(\w+)$')

    def __init__(self, env, broadcast_pipe):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.trajectories = {}  # {lift_name: [(time, floor), ...]}
        self.car_call_history = []  # [(registered_time, fulfilled_time, floor)]
        self.hall_call_history = []  # [(registered_time, fulfilled_time, floor, direction)]
        self.door_cycles = {}  # {lift_name: completed closes}
        self.moves = {}  # {lift_name: trips started}

        self._car_call_times = {}  # {(lift_name, floor): registered_time}
        self._hall_call_times = {}  # {(lift_name, floor, direction): registered_time}

        # JSON Lines event log for offline playback
        self.event_log = []
        self.simulation_metadata = {}

    def _add_event_log(self, event_type, event_data):
        """
        Add an event to the JSON Lines log.

        Args:
            event_type (str): Type of event (e.g., 'doors_open', 'passing_floor')
            event_data (dict): Event-specific data
        """
        event = {
            "time": self.env.now,
            "type": event_type,
            "data": event_data
        }
        self.event_log.append(event)

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Simulation configuration (floor range, timings, etc.)
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def start_listening(self):
        """
        Main process to start intercepting global broadcasts.
        """
        while True:
            data = yield self.broadcast_pipe.get()
            self.record(data.get('topic', ''), data.get('message', {}))

    def record(self, topic, message):
        """Record a single notification"""
        match = self.TOPIC_PATTERN.search(topic)
        if not match or not isinstance(message, dict):
            return
        lift_name, event = match.group(1), match.group(2)
        timestamp = message.get('timestamp', self.env.now)

        self._add_event_log(event, message)

        if event == "moving":
            self.moves[lift_name] = self.moves.get(lift_name, 0) + 1
            self._add_trajectory_point(lift_name, timestamp, message['from_floor'])
        elif event in ("passing_floor", "arrived"):
            self._add_trajectory_point(lift_name, timestamp, message['floor'])
        elif event == "doors_closed":
            self.door_cycles[lift_name] = self.door_cycles.get(lift_name, 0) + 1
        elif event == "car_call_registered":
            self._car_call_times[(lift_name, message['floor'])] = timestamp
        elif event == "car_call_fulfilled":
            registered = self._car_call_times.pop((lift_name, message['floor']), None)
            self.car_call_history.append((registered, timestamp, message['floor']))
        elif event == "hall_call_registered":
            self._hall_call_times[(lift_name, message['floor'], message['direction'])] = timestamp
        elif event == "hall_call_fulfilled":
            key = (lift_name, message['floor'], message['direction'])
            registered = self._hall_call_times.pop(key, None)
            self.hall_call_history.append((registered, timestamp, message['floor'], message['direction']))
        elif event == "status":
            status = message.get('status', {})
            if lift_name not in self.trajectories and 'current_floor' in status:
                self._add_trajectory_point(lift_name, timestamp, status['current_floor'])

    def _add_trajectory_point(self, lift_name, timestamp, floor):
        points = self.trajectories.setdefault(lift_name, [])
        # Record if not exactly the same as the last data point
        if not points or points[-1] != (timestamp, floor):
            points.append((timestamp, floor))

    def get_hall_call_service_times(self):
        """Times from hall call registration to fulfillment"""
        return [done - registered for registered, done, _, _ in self.hall_call_history if registered is not None]

    def get_car_call_service_times(self):
        """Times from button press to fulfillment"""
        return [done - registered for registered, done, _ in self.car_call_history if registered is not None]

    def floors_travelled(self, lift_name):
        points = self.trajectories.get(lift_name, [])
        return int(sum(abs(b[1] - a[1]) for a, b in zip(points, points[1:])))

    def summary(self):
        """
        Aggregate metrics over everything recorded so far.

        Returns:
            dict with per-lift movement counters and request service times
        """
        hall_times = np.array(self.get_hall_call_service_times(), dtype=float)
        car_times = np.array(self.get_car_call_service_times(), dtype=float)
        lift_names = sorted(set(self.trajectories) | set(self.moves) | set(self.door_cycles))

        return {
            "lifts": {
                name: {
                    "moves": self.moves.get(name, 0),
                    "floors_travelled": self.floors_travelled(name),
                    "door_cycles": self.door_cycles.get(name, 0),
                }
                for name in lift_names
            },
            "car_calls_fulfilled": len(self.car_call_history),
            "hall_calls_fulfilled": len(self.hall_call_history),
            "car_call_service_time_mean": float(car_times.mean()) if car_times.size else None,
            "car_call_service_time_max": float(car_times.max()) if car_times.size else None,
            "hall_call_service_time_mean": float(hall_times.mean()) if hall_times.size else None,
            "hall_call_service_time_max": float(hall_times.max()) if hall_times.size else None,
        }

    def print_summary(self, output_func=print):
        """Print the summary as a small report"""
        summary = self.summary()
        output_func("\n" + "=" * 60)
        output_func("   LIFT SUMMARY")
        output_func("=" * 60)
        for name, counters in summary["lifts"].items():
            output_func(f"{name}: {counters['moves']} moves, "
                        f"{counters['floors_travelled']} floors travelled, "
                        f"{counters['door_cycles']} door cycles")
        output_func(f"Car calls fulfilled:  {summary['car_calls_fulfilled']:>6}")
        output_func(f"Hall calls fulfilled: {summary['hall_calls_fulfilled']:>6}")
        if summary["hall_call_service_time_mean"] is not None:
            output_func(f"Hall call service time: average {summary['hall_call_service_time_mean']:.2f} s, "
                        f"max {summary['hall_call_service_time_max']:.2f} s")
        output_func("=" * 60)

    def plot_trajectory_diagram(self, filename=None, show=False):
        """
        Plot floor over time for every recorded lift, marking fulfilled
        requests.

        Args:
            filename: Save the figure here if given
            show: Open an interactive window

        Returns:
            The matplotlib Figure
        """
        fig, ax = plt.subplots(figsize=(12, 6))

        for name, points in self.trajectories.items():
            if not points:
                continue
            times = [t for t, _ in points]
            floors = [f for _, f in points]
            ax.plot(times, floors, marker='.', label=name)

        car_done = [(done, floor) for _, done, floor in self.car_call_history]
        if car_done:
            ax.scatter(*zip(*car_done), marker='o', s=80, facecolors='none', edgecolors='green',
                       label='car call fulfilled', zorder=3)
        for direction, marker, color in (("UP", '^', 'red'), ("DOWN", 'v', 'blue')):
            hall_done = [(done, floor) for _, done, floor, d in self.hall_call_history if d == direction]
            if hall_done:
                ax.scatter(*zip(*hall_done), marker=marker, s=80, color=color,
                           label=f'hall call {direction} fulfilled', zorder=3)

        ax.set_xlabel('Time (s)')
        ax.set_ylabel('Floor')
        ax.set_title('Lift Trajectory')
        ax.grid(True, alpha=0.3)
        if ax.get_legend_handles_labels()[0]:
            ax.legend(loc='best')

        if filename:
            fig.savefig(filename, bbox_inches='tight')
        if show:
            plt.show()
        return fig

    def save_event_log(self, filename='lift_log.jsonl'):
        """
        Save the event log in JSON Lines format.

        The first line holds the simulation metadata; every following
        line is one recorded event.
        """
        with open(filename, 'w', encoding='utf-8') as f:
            if self.simulation_metadata:
                f.write(json.dumps({"type": "metadata", "data": self.simulation_metadata}) + '\n')
            for event in self.event_log:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')
        return len(self.event_log)
