"""
Component domain objects for depvalidator.

A 4D component is recognized by one of three layouts:
- a "*.4dbase" database folder
- a compiled "*.4DZ" archive file
- a "Project" folder holding a "*.4DProject" file

Components may declare dependencies on other components in a
dependencies.json manifest:

    {"dependencies": {"Bar": {"github": "owner/Bar", "version": "1.0"}}}
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Tuple, List


class ComponentKind(Enum):
    """Recognized component layouts."""
    DATABASE_FOLDER = "4Dbase"
    COMPILED_ARCHIVE = "4DZ"
    PROJECT_FOLDER = "Project"


@dataclass(frozen=True)
class Dependency:
    """A single declared dependency."""
    name: str
    github: Optional[str] = None
    version: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def from_data(cls, name: str, data: Any) -> 'Dependency':
        if not isinstance(data, dict):
            return cls(name=name)
        return cls(
            name=name,
            github=_optional_str(data.get('github')),
            version=_optional_str(data.get('version')),
            path=_optional_str(data.get('path')),
        )

    def to_dict(self) -> Dict[str, Any]:
        # Absent fields are omitted, matching the manifest file shape
        data = {}
        if self.github is not None:
            data['github'] = self.github
        if self.version is not None:
            data['version'] = self.version
        if self.path is not None:
            data['path'] = self.path
        return data


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class DependencyManifest:
    """
    Parsed dependencies.json content.

    Dependency names are unique; the file's key order is kept.
    """
    dependencies: Tuple[Dependency, ...] = ()

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> 'DependencyManifest':
        """
        Build from the decoded manifest document.

        A missing or non-object "dependencies" key yields an empty manifest.
        """
        entries = data.get('dependencies')
        if not isinstance(entries, dict):
            return cls()
        return cls(dependencies=tuple(
            Dependency.from_data(str(name), value) for name, value in entries.items()
        ))

    @property
    def names(self) -> List[str]:
        return [dep.name for dep in self.dependencies]

    def get(self, name: str) -> Optional[Dependency]:
        for dep in self.dependencies:
            if dep.name == name:
                return dep
        return None

    def __len__(self) -> int:
        return len(self.dependencies)

    def to_dict(self) -> Dict[str, Any]:
        return {'dependencies': {dep.name: dep.to_dict() for dep in self.dependencies}}


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying an extracted archive tree."""
    component_kind: Optional[ComponentKind] = None
    dependencies: Optional[DependencyManifest] = None
    errors: Tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return self.component_kind is not None
