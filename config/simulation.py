"""
Simulation Configuration

Floor range of the lift, door and travel timings, and clock speed.
"""

from dataclasses import dataclass, field


def _require_int(name, value):
    # bool is an int subclass; 'yes' in YAML must not pass as floor 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _require_number(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass
class LiftConfig:
    """Lift specifications"""
    name: str = "Lift"
    min_floor: int = 0
    max_floor: int = 10
    start_floor: int = 0

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("name must be a non-empty string")
        for attr in ('min_floor', 'max_floor', 'start_floor'):
            _require_int(attr, getattr(self, attr))
        if self.min_floor >= self.max_floor:
            raise ValueError("min_floor must be below max_floor")
        if not (self.min_floor <= self.start_floor <= self.max_floor):
            raise ValueError(f"start_floor must be between {self.min_floor} and {self.max_floor}")


@dataclass
class TimingConfig:
    """Door and travel timings, in simulation seconds"""
    door_open_time: float = 1.0
    door_close_time: float = 1.0
    floor_travel_time: float = 3.0  # per floor

    def __post_init__(self):
        for attr in ('door_open_time', 'door_close_time', 'floor_travel_time'):
            _require_number(attr, getattr(self, attr))
        if self.door_open_time <= 0:
            raise ValueError("door_open_time must be positive")
        if self.door_close_time <= 0:
            raise ValueError("door_close_time must be positive")
        if self.floor_travel_time <= max(self.door_open_time, self.door_close_time):
            raise ValueError("floor_travel_time must be longer than door_open_time and door_close_time")


@dataclass
class SimulationConfig:
    """
    Complete simulation configuration

    Combines lift and timing settings with the real-time clock factor.
    """
    lift: LiftConfig = field(default_factory=LiftConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)

    # Simulation control
    realtime_factor: float = 1.0  # 1.0 = realtime, 0.0 = as fast as possible
    verbose_broker: bool = False

    def __post_init__(self):
        _require_number('realtime_factor', self.realtime_factor)
        if self.realtime_factor < 0:
            raise ValueError("realtime_factor cannot be negative")
        if not isinstance(self.verbose_broker, bool):
            raise ValueError(f"verbose_broker must be true or false, got {self.verbose_broker!r}")

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        data = data or {}
        sim_data = data.get('simulation', data) or {}

        lift_data = sim_data.get('lift', {}) or {}
        lift = LiftConfig(
            name=lift_data.get('name', 'Lift'),
            min_floor=lift_data.get('min_floor', 0),
            max_floor=lift_data.get('max_floor', 10),
            start_floor=lift_data.get('start_floor', lift_data.get('min_floor', 0))
        )

        timing_data = sim_data.get('timing', {}) or {}
        timing = TimingConfig(
            door_open_time=timing_data.get('door_open_time', 1.0),
            door_close_time=timing_data.get('door_close_time', 1.0),
            floor_travel_time=timing_data.get('floor_travel_time', 3.0)
        )

        return cls(
            lift=lift,
            timing=timing,
            realtime_factor=sim_data.get('realtime_factor', 1.0),
            verbose_broker=sim_data.get('verbose_broker', False)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'simulation': {
                'lift': {
                    'name': self.lift.name,
                    'min_floor': self.lift.min_floor,
                    'max_floor': self.lift.max_floor,
                    'start_floor': self.lift.start_floor
                },
                'timing': {
                    'door_open_time': self.timing.door_open_time,
                    'door_close_time': self.timing.door_close_time,
                    'floor_travel_time': self.timing.floor_travel_time
                },
                'realtime_factor': self.realtime_factor,
                'verbose_broker': self.verbose_broker
            }
        }

    def lift_kwargs(self) -> dict:
        """Keyword arguments for constructing a Lift from this configuration"""
        return {
            'name': self.lift.name,
            'min_floor': self.lift.min_floor,
            'max_floor': self.lift.max_floor,
            'start_floor': self.lift.start_floor,
            'door_open_time': self.timing.door_open_time,
            'door_close_time': self.timing.door_close_time,
            'floor_travel_time': self.timing.floor_travel_time,
        }
