"""
Domain layer for depvalidator.

Contains pure domain objects with no I/O or side effects:
- RepositoryRef: owner/name identifier of a GitHub repository
- ReleaseDescriptor, AssetDescriptor: releases and their downloadable files
- ComponentKind, DependencyManifest: what a release archive contains
- ReleaseValidation, RepositoryValidation: validation outcomes

These objects are immutable and provide to_dict() for JSON output.
"""

from .reference import RepositoryRef
from .release import AssetDescriptor, ReleaseDescriptor, ARCHIVE_SUFFIX
from .component import ComponentKind, Dependency, DependencyManifest, ClassificationResult
from .validation import (
    ReleaseSelection,
    SelectionMode,
    ReleaseValidation,
    RepositoryValidation,
)

__all__ = [
    'RepositoryRef',
    'AssetDescriptor',
    'ReleaseDescriptor',
    'ARCHIVE_SUFFIX',
    'ComponentKind',
    'Dependency',
    'DependencyManifest',
    'ClassificationResult',
    'ReleaseSelection',
    'SelectionMode',
    'ReleaseValidation',
    'RepositoryValidation',
]
