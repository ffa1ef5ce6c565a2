"""
Lift Analyzer

Recording, reporting and rendering tools for lift notifications.

Components:
- Statistics: Event recorder with JSON Lines export and trajectory plot
- StatusRenderer: Console rendering of notifications and status snapshots
"""

__version__ = "0.1.0"

from .statistics import Statistics
from .status_renderer import StatusRenderer, format_event, format_status

__all__ = ['Statistics', 'StatusRenderer', 'format_event', 'format_status']
