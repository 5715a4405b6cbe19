"""
Service layer for depvalidator.

Contains business logic that orchestrates domain objects and infrastructure:
- ValidationService: release resolution and artifact validation
- ComponentClassifier: layout classification of extracted archives

Services are the primary API for commands to use.
"""

from .classifier import ComponentClassifier, load_dependency_manifest
from .validation_service import ValidationService, match_archive_asset

__all__ = [
    'ComponentClassifier',
    'load_dependency_manifest',
    'ValidationService',
    'match_archive_asset',
]
