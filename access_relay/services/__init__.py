"""
Service layer for access requests and their outbound calls.
"""

from .access_provider import AccessProvider, GitHubAccessProvider
from .access_service import AccessService
from .notifier import Notifier, SmtpNotifier

__all__ = ["AccessProvider", "AccessService", "GitHubAccessProvider", "Notifier", "SmtpNotifier"]
