"""Adapters — bindings to release hosting platforms.

Public re-exports for convenient access.
"""

from relpull.adapters.base import ReleaseGateway
from relpull.adapters.github import GitHubGateway
from relpull.adapters.mock import MockGateway

__all__ = [
    "GitHubGateway",
    "MockGateway",
    "ReleaseGateway",
]
