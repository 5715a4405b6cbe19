"""
depvalidator - Validate GitHub repositories as 4D components.

depvalidator checks whether a GitHub repository publishes a release ZIP
that 4D's Project Dependencies Manager can install, and reports the
dependencies the component declares.

Quick Start:
    import depvalidator

    service = depvalidator.ValidationService()

    # Default: stop at the first release with a matching ZIP
    result = service.validate_repository("4d/4D-ViewPro")
    print(result.is_valid, result.valid_component_kinds)

    # Every release, or one tag
    selection = depvalidator.ReleaseSelection.from_option("*")
    result = service.validate_repository("4d/4D-ViewPro", selection)

    for release in result.release_validations:
        print(release.tag, release.component_kind, release.dependency_names)

Domain Objects:
    RepositoryRef - owner/name identifier
    ReleaseDescriptor, AssetDescriptor - releases and their files
    ComponentKind - 4Dbase folder, 4DZ archive or Project folder
    DependencyManifest - parsed dependencies.json
    ReleaseValidation, RepositoryValidation - validation outcomes

Services:
    ValidationService - release resolution and artifact validation
    ComponentClassifier - layout classification of an extracted archive
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    RepositoryRef,
    AssetDescriptor,
    ReleaseDescriptor,
    ComponentKind,
    Dependency,
    DependencyManifest,
    ReleaseSelection,
    ReleaseValidation,
    RepositoryValidation,
)

# Errors
from .errors import (
    DepValidatorError,
    MalformedReference,
    NotFound,
    RateLimited,
    TransportError,
    DownloadFailed,
    ExtractionError,
    ScratchSpaceError,
)

# Services
from .services import ValidationService, ComponentClassifier

# Configuration
from .config import load_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "RepositoryRef",
    "AssetDescriptor",
    "ReleaseDescriptor",
    "ComponentKind",
    "Dependency",
    "DependencyManifest",
    "ReleaseSelection",
    "ReleaseValidation",
    "RepositoryValidation",
    # Errors
    "DepValidatorError",
    "MalformedReference",
    "NotFound",
    "RateLimited",
    "TransportError",
    "DownloadFailed",
    "ExtractionError",
    "ScratchSpaceError",
    # Services
    "ValidationService",
    "ComponentClassifier",
    # Configuration
    "load_config",
]
