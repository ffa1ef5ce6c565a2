"""Operator-facing control of the lift"""

from .command_shell import CommandShell, build_simulation, main

__all__ = ['CommandShell', 'build_simulation', 'main']
