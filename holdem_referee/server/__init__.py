"""
Holdem Referee Server - FastAPI HTTP layer
"""

from holdem_referee.server.app import app, create_app

__all__ = ["app", "create_app"]
