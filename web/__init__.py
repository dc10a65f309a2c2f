"""
Web dashboard package.

This package provides a password-protected page with live bot statistics.
"""

from web.server import WebServer, create_app, run_web_server

__all__ = ['WebServer', 'create_app', 'run_web_server']
