"""
Component layout classification for depvalidator.

Decides whether an extracted release archive holds a 4D component, and
which kind. Shapes are tried in priority order, first match wins:

1. a directory ending in ".4dbase" (database folder)
2. a file ending in ".4dz" (compiled component)
3. a "Project" directory holding a file ending in ".4DProject"

If nothing matches and the root holds a single wrapper directory (as
produced by most archiving tools), the checks run once more inside it.
"""

import json
import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from ..domain import ClassificationResult, ComponentKind, DependencyManifest

logger = logging.getLogger(__name__)

DATABASE_FOLDER_SUFFIX = '.4dbase'
COMPILED_ARCHIVE_SUFFIX = '.4dz'
PROJECT_DIR_NAME = 'project'
PROJECT_FILE_SUFFIX = '.4DProject'  # Case-sensitive
MANIFEST_FILE_NAME = 'dependencies.json'

NO_COMPONENT_ERROR = (
    'No valid 4D component found '
    '(no .4Dbase folder, .4DZ file, or Project folder with .4DProject)'
)

Match = Tuple[ComponentKind, Optional[DependencyManifest]]


def _list_entries(directory: Path) -> List[Path]:
    return sorted(directory.iterdir(), key=lambda p: p.name)


# Symlinks inside an archive never count as component entries
def _is_real_dir(path: Path) -> bool:
    return not path.is_symlink() and path.is_dir()


def _is_real_file(path: Path) -> bool:
    return not path.is_symlink() and path.is_file()


def load_dependency_manifest(base: Path) -> Optional[DependencyManifest]:
    """
    Find and parse dependencies.json beneath a component base directory.

    Tries <base>/Project/Sources then <base>/Sources. A file that cannot
    be read or is not a JSON object is skipped like a missing one.
    """
    candidates = [
        base / 'Project' / 'Sources' / MANIFEST_FILE_NAME,
        base / 'Sources' / MANIFEST_FILE_NAME,
    ]
    for candidate in candidates:
        if not _is_real_file(candidate):
            continue
        try:
            data = json.loads(candidate.read_text(encoding='utf-8'))
        except (OSError, ValueError, RecursionError) as e:
            logger.debug(f"Ignoring unreadable manifest {candidate}: {e}")
            continue
        if not isinstance(data, dict):
            logger.debug(f"Ignoring manifest {candidate}: not a JSON object")
            continue
        return DependencyManifest.from_data(data)
    return None


class ComponentClassifier:
    """
    Classifies an extracted archive tree as a 4D component.

    Example:
        classifier = ComponentClassifier()
        result = classifier.classify(Path("extracted"), "4D-ViewPro")
        if result.valid:
            print(result.component_kind.value, result.dependencies)
    """

    def __init__(self):
        # Priority order of the recognized shapes
        self.checks: List[Callable[[Path, List[Path]], Optional[Match]]] = [
            self.check_database_folder,
            self.check_compiled_archive,
            self.check_project_folder,
        ]

    def check_database_folder(self, directory: Path, entries: List[Path]) -> Optional[Match]:
        for entry in entries:
            if _is_real_dir(entry) and entry.name.lower().endswith(DATABASE_FOLDER_SUFFIX):
                return ComponentKind.DATABASE_FOLDER, load_dependency_manifest(entry)
        return None

    def check_compiled_archive(self, directory: Path, entries: List[Path]) -> Optional[Match]:
        for entry in entries:
            if _is_real_file(entry) and entry.name.lower().endswith(COMPILED_ARCHIVE_SUFFIX):
                return ComponentKind.COMPILED_ARCHIVE, None
        return None

    def check_project_folder(self, directory: Path, entries: List[Path]) -> Optional[Match]:
        for entry in entries:
            if not (_is_real_dir(entry) and entry.name.lower() == PROJECT_DIR_NAME):
                continue
            for child in _list_entries(entry):
                if _is_real_file(child) and child.name.endswith(PROJECT_FILE_SUFFIX):
                    return ComponentKind.PROJECT_FOLDER, load_dependency_manifest(directory)
        return None

    def find_component(self, directory: Path) -> Optional[Match]:
        """Run the shape checks on one directory level."""
        entries = _list_entries(directory)
        for check in self.checks:
            match = check(directory, entries)
            if match is not None:
                return match
        return None

    def _wrapper_directory(self, directory: Path) -> Optional[Path]:
        entries = _list_entries(directory)
        if len(entries) != 1:
            return None
        entry = entries[0]
        if not _is_real_dir(entry) or entry.name.lower().endswith(DATABASE_FOLDER_SUFFIX):
            return None
        return entry

    def classify(self, root_dir: Union[str, Path], expected_name: str) -> ClassificationResult:
        """
        Classify an extracted archive tree.

        Args:
            root_dir: Directory the archive was extracted into
            expected_name: Repository short name the archive belongs to

        Returns:
            ClassificationResult; a failed classification carries an error
            and no component kind
        """
        root = Path(root_dir)
        try:
            match = self.find_component(root)
            if match is None:
                wrapper = self._wrapper_directory(root)
                if wrapper is not None:
                    logger.debug(f"Descending into wrapper directory {wrapper.name}")
                    match = self.find_component(wrapper)
        except OSError as e:
            return ClassificationResult(
                errors=(f"Failed to validate component: {e}",)
            )

        if match is None:
            logger.debug(f"No component layout found for {expected_name}")
            return ClassificationResult(errors=(NO_COMPONENT_ERROR,))

        kind, dependencies = match
        logger.debug(f"Classified {expected_name} as {kind.value}")
        return ClassificationResult(component_kind=kind, dependencies=dependencies)
