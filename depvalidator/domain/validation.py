"""
Validation result domain objects.

ReleaseValidation is built once per inspected release, RepositoryValidation
once per repository. Both are immutable and serialize to plain dicts for
JSON output.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Tuple, List

from .component import ComponentKind, DependencyManifest
from .reference import RepositoryRef


class SelectionMode(Enum):
    """Which releases of a repository get inspected."""
    FIRST_MATCH = "first_match"  # Stop at the first release with a matching archive
    ALL = "all"
    TAG = "tag"


ALL_RELEASES = '*'


@dataclass(frozen=True)
class ReleaseSelection:
    """
    Release selection policy.

    The default (FIRST_MATCH) stops after the first release whose assets
    contain a matching archive, even if that archive holds no valid
    component. Use ALL to find the best release across all of them.
    """
    mode: SelectionMode = SelectionMode.FIRST_MATCH
    tag: Optional[str] = None

    @classmethod
    def from_option(cls, value: Optional[str]) -> 'ReleaseSelection':
        """Map a --release option value to a policy ('*' means all releases)."""
        if not value:
            return cls()
        if value == ALL_RELEASES:
            return cls(mode=SelectionMode.ALL)
        return cls(mode=SelectionMode.TAG, tag=value)

    def describe(self) -> str:
        if self.mode == SelectionMode.ALL:
            return 'all releases'
        if self.mode == SelectionMode.TAG:
            return f'release "{self.tag}"'
        return 'first release with matching ZIP'


@dataclass(frozen=True)
class ReleaseValidation:
    """Validation outcome for one release."""
    tag: str
    matched_asset_name: Optional[str] = None
    has_matching_asset: bool = False
    component_kind: Optional[ComponentKind] = None
    dependencies: Optional[DependencyManifest] = None
    errors: Tuple[str, ...] = ()
    release: Optional[Dict[str, Any]] = None  # Raw release info, full mode only

    def __post_init__(self):
        if self.component_kind is not None and self.matched_asset_name is None:
            raise ValueError("A component kind requires a matched asset")

    @property
    def component_valid(self) -> bool:
        return self.component_kind is not None

    @property
    def dependency_names(self) -> List[str]:
        if self.dependencies is None:
            return []
        return self.dependencies.names

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'tag': self.tag,
            'has_matching_asset': self.has_matching_asset,
            'matched_asset_name': self.matched_asset_name,
            'component_valid': self.component_valid,
            'component_type': self.component_kind.value if self.component_kind else None,
            'dependencies': self.dependencies.to_dict() if self.dependencies is not None else None,
            'dependency_names': self.dependency_names,
            'errors': list(self.errors),
        }
        if self.release is not None:
            data['release'] = self.release
        return data


@dataclass(frozen=True)
class RepositoryValidation:
    """Terminal validation outcome for one repository."""
    repository: str
    is_valid: bool = False
    has_releases: bool = False
    release_validations: Tuple[ReleaseValidation, ...] = ()
    errors: Tuple[str, ...] = ()
    ref: Optional[RepositoryRef] = None
    github_info: Optional[Dict[str, Any]] = None

    @property
    def valid_component_kinds(self) -> List[ComponentKind]:
        """Distinct component kinds of valid releases, in release order."""
        kinds: List[ComponentKind] = []
        for release in self.release_validations:
            if release.component_kind and release.component_kind not in kinds:
                kinds.append(release.component_kind)
        return kinds

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'repository': self.repository,
            'valid': self.is_valid,
            'has_releases': self.has_releases,
            'releases': [release.to_dict() for release in self.release_validations],
            'errors': list(self.errors),
        }
        if self.github_info is not None:
            data['github_info'] = self.github_info
        return data
