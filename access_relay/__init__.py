"""
Repo Access Relay

A FastAPI service that emails repository access requests with accept/deny
links and adds approved users as GitHub collaborators.
"""

__version__ = "0.1.0"

from .main import app, create_app

__all__ = ["app", "create_app"]
