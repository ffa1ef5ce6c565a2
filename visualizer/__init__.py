"""HTTP status API for external renderers"""

from .http_server import create_app, start_server_thread

__all__ = ['create_app', 'start_server_thread']
