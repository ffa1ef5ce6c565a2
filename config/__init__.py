"""
Configuration management package

Provides configuration classes for the lift simulation.
"""

from .simulation import (
    SimulationConfig,
    LiftConfig,
    TimingConfig
)

from .config_loader import (
    ConfigLoader,
    load_simulation_config,
    save_simulation_config
)

__all__ = [
    # Simulation
    'SimulationConfig',
    'LiftConfig',
    'TimingConfig',

    # Loader
    'ConfigLoader',
    'load_simulation_config',
    'save_simulation_config',
]
