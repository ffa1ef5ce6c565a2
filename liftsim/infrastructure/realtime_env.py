"""
realtime_env.py

A SimPy environment whose clock is paced against wall-clock time.
This is the production clock for the lift: door and travel timeouts
take real seconds (scaled by speed_factor), while tests use a plain
simpy.Environment and finish instantly.
"""

import time

import simpy


class RealtimeEnvironment(simpy.Environment):
    """
    SimPy environment with real-time synchronization.

    Args:
        speed_factor (float): Speed multiplier for simulation
            - 1.0 = real-time (1 sim second = 1 real second)
            - 0.5 = half speed (1 sim second = 2 real seconds)
            - 2.0 = double speed (1 sim second = 0.5 real seconds)
            - 0.0 = no delay (fastest possible, default SimPy behavior)
        initial_time (float): Initial simulation time
        sleep_func: Function used to wait (default: time.sleep)
        clock_func: Function returning wall-clock seconds (default: time.monotonic)

    Example:
        >>> env = RealtimeEnvironment(speed_factor=2.0)
        >>> env.run(until=lift.move_to_floor(4))  # 13 sim seconds, 6.5 real seconds
    """

    def __init__(self, speed_factor=1.0, initial_time=0, sleep_func=time.sleep, clock_func=time.monotonic):
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        super().__init__(initial_time=initial_time)
        self.speed_factor = speed_factor
        self._sleep = sleep_func
        self._clock = clock_func
        self._sync_reference()

    def _sync_reference(self):
        self.real_start_time = self._clock()
        self.sim_start_time = self.now

    def run(self, until=None):
        """
        Run the simulation, re-anchoring the real-time reference first.

        The lift is driven one operator command at a time, so wall-clock
        time spent waiting for input between runs must not be counted as
        simulation lag.
        """
        self._sync_reference()
        return super().run(until=until)

    def step(self):
        """
        Execute one simulation step and synchronize with real time.

        Sleeps before processing the next event until the wall clock has
        caught up with that event's simulation time.
        """
        if self.speed_factor > 0:
            next_time = self.peek()
            if next_time != float('inf'):
                sim_elapsed = next_time - self.sim_start_time
                target_real_time = self.real_start_time + (sim_elapsed / self.speed_factor)
                sleep_time = target_real_time - self._clock()
                if sleep_time > 0:
                    self._sleep(sleep_time)
        return super().step()

    def set_speed(self, speed_factor):
        """
        Change simulation speed during runtime.

        Args:
            speed_factor (float): New speed multiplier (0.0 = no delay)
        """
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        self.speed_factor = speed_factor
        self._sync_reference()

    def get_speed(self):
        """Get current simulation speed factor."""
        return self.speed_factor
