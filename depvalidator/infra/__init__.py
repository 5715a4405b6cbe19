"""
Infrastructure layer for depvalidator.

Contains abstractions for external systems:
- GitHubClient: GitHub REST API access (releases, metadata, downloads)
- ArchiveWorkspace: scratch directories and archive extraction

These provide clean interfaces that can be replaced by fakes for testing.
"""

from .github_client import GitHubClient, GitHubRepo, RateLimitStatus
from .archive import ArchiveWorkspace

__all__ = [
    'GitHubClient',
    'GitHubRepo',
    'RateLimitStatus',
    'ArchiveWorkspace',
]
