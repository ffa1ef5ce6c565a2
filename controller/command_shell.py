"""
Interactive command shell for the lift.

Reads an operator choice, invokes the matching lift operation, runs
the simulation until that operation completes, and renders every
notification the lift publishes along the way.
"""

import argparse
import sys
from typing import Callable, Optional

from analyzer.statistics import Statistics
from analyzer.status_renderer import StatusRenderer
from config import SimulationConfig, load_simulation_config
from liftsim.core.exceptions import LiftError
from liftsim.core.lift import Lift
from liftsim.core.types import Direction
from liftsim.infrastructure.message_broker import MessageBroker
from liftsim.infrastructure.realtime_env import RealtimeEnvironment
from visualizer.http_server import create_app, start_server_thread


MENU = (
    "1. Move to floor",
    "2. Press button inside",
    "3. Call from floor",
    "4. Open doors",
    "5. Close doors",
    "6. Status",
    "7. Exit",
)


class CommandShell:
    """
    Menu-driven operator loop around a single Lift.

    Args:
        lift: The lift to drive
        env: SimPy environment the lift lives in
        input_func: Reads one line of input given a prompt (default: input)
        output_func: Writes one line of output (default: print)
        render_events: Subscribe a StatusRenderer to the lift's notifications
        show_timestamps: Prefix rendered notifications with simulation time
    """
    def __init__(self, lift: Lift, env, input_func: Optional[Callable[[str], str]] = None,
                 output_func: Optional[Callable[[str], None]] = None, render_events: bool = True,
                 show_timestamps: bool = False):
        self.lift = lift
        self.env = env
        self.input_func = input_func if input_func is not None else input
        self.output_func = output_func if output_func is not None else print
        self.running = False
        if render_events:
            self.renderer = StatusRenderer(self.output_func, show_timestamps=show_timestamps)
            lift.broker.subscribe(self.renderer, topic_prefix=f"lift/{lift.name}/")
        else:
            self.renderer = None

    def ask(self, prompt: str) -> str:
        return self.input_func(prompt).strip()

    def run(self):
        """Run the menu loop until the operator exits or input ends"""
        self.output_func("\n=== LIFT SIMULATOR ===")
        self.output_func(f"Floors: {self.lift.min_floor}-{self.lift.max_floor}, "
                         f"Starting at floor {self.lift.get_current_floor()}\n")

        self.running = True
        while self.running:
            for line in MENU:
                self.output_func(line)
            try:
                choice = self.ask("\nChoice: ")
                self.output_func("")
                self.handle_choice(choice)
            except EOFError:
                self.output_func("Goodbye!")
                self.running = False

    def handle_choice(self, choice: str):
        """Execute one menu choice"""
        try:
            if choice == "1":
                floor = self._read_floor("Which floor? ")
                if floor is not None:
                    self._wait_for(self.lift.move_to_floor(floor))
            elif choice == "2":
                floor = self._read_floor("Which floor? ")
                if floor is not None:
                    # Re-pressing a queued floor is absorbed silently
                    self.lift.press_button(floor)
            elif choice == "3":
                self._call_from_floor()
            elif choice == "4":
                self._wait_for(self.lift.open_doors())
            elif choice == "5":
                self._wait_for(self.lift.close_doors())
            elif choice == "6":
                self.lift.show_status()
            elif choice == "7":
                self.output_func("Goodbye!")
                self.running = False
            else:
                self.output_func("Invalid choice")
        except LiftError as e:
            self.output_func(e.message)

    def _call_from_floor(self):
        floor = self._read_floor("From which floor? ")
        if floor is None:
            return
        answer = self.ask("Direction (UP/DOWN)? ").upper()
        if answer not in (Direction.UP.value, Direction.DOWN.value):
            self.output_func("Invalid direction")
            return
        self.lift.call_lift(floor, Direction(answer))

    def _read_floor(self, prompt: str) -> Optional[int]:
        text = self.ask(prompt)
        try:
            return int(text)
        except ValueError:
            self.output_func("Invalid number")
            return None

    def _wait_for(self, process):
        self.env.run(until=process)


def build_simulation(config: SimulationConfig, speed_factor: Optional[float] = None):
    """
    Wire environment, broker, lift and recorder from a configuration.

    Returns:
        (env, broker, lift, statistics)
    """
    factor = config.realtime_factor if speed_factor is None else speed_factor
    env = RealtimeEnvironment(speed_factor=factor)
    broker = MessageBroker(env, verbose=config.verbose_broker)
    lift = Lift(env, broker=broker, **config.lift_kwargs())

    statistics = Statistics(env, broker.get_broadcast_pipe())
    statistics.set_simulation_metadata(config.to_dict())
    env.process(statistics.start_listening())
    return env, broker, lift, statistics


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="liftsim", description="Interactive single-car lift simulator")
    parser.add_argument("config", nargs="?", default=None,
                        help="Path to a simulation YAML file (default: built-in 0-10 lift)")
    parser.add_argument("--config", dest="config_option", default=None, metavar="CONFIG",
                        help="Same as the positional config path")
    parser.add_argument("--speed", type=float, default=None,
                        help="Override the realtime factor (1.0 = real time, 0 = no delay)")
    parser.add_argument("--http-port", type=int, default=None,
                        help="Serve the status API on this port")
    parser.add_argument("--event-log", default=None,
                        help="Save the JSON Lines event log here on exit")
    parser.add_argument("--summary", action="store_true",
                        help="Print a lift summary on exit")
    parser.add_argument("--timestamps", action="store_true",
                        help="Prefix notifications with simulation time")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.config and args.config_option and args.config != args.config_option:
        parser.error("give the config path once, either positionally or with --config")
    config_path = args.config_option or args.config

    try:
        config = load_simulation_config(config_path) if config_path else SimulationConfig()
    except (FileNotFoundError, ValueError) as e:
        print(f"Cannot load configuration: {e}", file=sys.stderr)
        return 1

    env, broker, lift, statistics = build_simulation(config, speed_factor=args.speed)

    if args.http_port is not None:
        start_server_thread(create_app(lift, statistics), port=args.http_port)
        print(f"Status API on http://localhost:{args.http_port}/api/status")

    shell = CommandShell(lift, env, show_timestamps=args.timestamps)
    try:
        shell.run()
    except KeyboardInterrupt:
        print("\nInterrupted.")

    # Let the recorder consume notifications published at the final time step
    env.set_speed(0)
    env.run()

    if args.event_log:
        count = statistics.save_event_log(args.event_log)
        print(f"Saved {count} events to {args.event_log}")
    if args.summary:
        statistics.print_summary()
    return 0


if __name__ == '__main__':
    sys.exit(main())
