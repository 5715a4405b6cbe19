"""
Validation service for depvalidator.

Drives a repository through release resolution and artifact validation:
list releases, pick the releases to inspect, match the archive asset named
after the repository, download and extract it, and classify its layout.
This is the primary API for commands to use.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from ..domain import (
    AssetDescriptor,
    ReleaseDescriptor,
    ReleaseSelection,
    ReleaseValidation,
    RepositoryRef,
    RepositoryValidation,
    SelectionMode,
)
from ..errors import DepValidatorError
from ..infra import ArchiveWorkspace, GitHubClient
from .classifier import ComponentClassifier

logger = logging.getLogger(__name__)

EXTRACT_DIR_NAME = 'extracted'


def match_archive_asset(
    assets: Sequence[AssetDescriptor],
    repo_name: str
) -> Optional[AssetDescriptor]:
    """
    Find the archive asset named after the repository.

    An archive matches when its name without the ".zip" suffix equals the
    repository name, or starts with the name followed by "-" or "_"
    (e.g. "Foo-1.2.0.zip"). Comparison is case-insensitive and the first
    match wins.
    """
    expected = repo_name.lower()
    for asset in assets:
        if not asset.is_archive:
            continue
        stem = asset.stem.lower()
        if stem == expected or stem.startswith(expected + '-') or stem.startswith(expected + '_'):
            return asset
    return None


class ValidationService:
    """
    Service for validating repositories as installable 4D components.

    Example:
        service = ValidationService()
        result = service.validate_repository("4d/4D-ViewPro")
        if result.is_valid:
            print(result.valid_component_kinds)
    """

    def __init__(
        self,
        github_client: Optional[GitHubClient] = None,
        workspace: Optional[ArchiveWorkspace] = None,
        classifier: Optional[ComponentClassifier] = None
    ):
        """
        Initialize ValidationService.

        Args:
            github_client: GitHub gateway (creates default if None)
            workspace: Scratch space and extraction (creates default if None)
            classifier: Layout classifier (creates default if None)
        """
        self.github = github_client or GitHubClient()
        self.workspace = workspace or ArchiveWorkspace()
        self.classifier = classifier or ComponentClassifier()

    def validate_many(
        self,
        tokens: Iterable[str],
        selection: Optional[ReleaseSelection] = None,
        full: bool = False
    ) -> Iterator[RepositoryValidation]:
        """Validate repositories one after another, yielding each result."""
        for token in tokens:
            yield self.validate_repository(token, selection, full=full)

    def validate_repository(
        self,
        token: str,
        selection: Optional[ReleaseSelection] = None,
        full: bool = False
    ) -> RepositoryValidation:
        """
        Validate one repository.

        Args:
            token: Repository identifier ("owner/name")
            selection: Which releases to inspect (default: first match)
            full: Include GitHub repository and release info in the result

        Returns:
            RepositoryValidation; never raises for validation failures
        """
        selection = selection or ReleaseSelection()

        try:
            ref = self.github.parse_ref(token)
        except DepValidatorError as e:
            return RepositoryValidation(repository=token, errors=(str(e),))

        try:
            return self._validate_ref(token, ref, selection, full)
        except Exception as e:
            logger.error(f"Failed to validate {token}: {e}")
            return RepositoryValidation(repository=token, ref=ref, errors=(str(e),))

    def _validate_ref(
        self,
        token: str,
        ref: RepositoryRef,
        selection: ReleaseSelection,
        full: bool
    ) -> RepositoryValidation:
        github_info = None
        try:
            if full:
                logger.info(f"Fetching repository info for {ref.full_name}...")
                github_info = self.github.get_repository(ref).to_dict()

            logger.info(f"Fetching releases for {ref.full_name}...")
            releases = self.github.list_releases(ref)
        except DepValidatorError as e:
            return RepositoryValidation(
                repository=token, ref=ref, errors=(str(e),), github_info=github_info
            )

        if not releases:
            return RepositoryValidation(
                repository=token, ref=ref, errors=('No releases found',),
                github_info=github_info
            )

        logger.info(f"Found {len(releases)} release(s)")

        if selection.mode == SelectionMode.TAG:
            selected = [r for r in releases if r.tag == selection.tag]
            if not selected:
                available = ', '.join(r.tag for r in releases)
                return RepositoryValidation(
                    repository=token,
                    ref=ref,
                    has_releases=True,
                    errors=(f'Release "{selection.tag}" not found. Available: {available}',),
                    github_info=github_info,
                )
        else:
            selected = releases

        validations: List[ReleaseValidation] = []
        for release in selected:
            if not release.has_archive_assets:
                logger.info(f"Skipping {release.tag}: no ZIP assets")
                continue

            validation = self.validate_release(release, ref.name, full=full)
            validations.append(validation)

            if selection.mode == SelectionMode.FIRST_MATCH and validation.has_matching_asset:
                logger.info("Found release with matching ZIP, stopping")
                break

        is_valid = any(v.component_valid for v in validations)
        errors: List[str] = []
        if not is_valid:
            errors.append(self._summary_error(validations, ref.name))

        return RepositoryValidation(
            repository=token,
            ref=ref,
            is_valid=is_valid,
            has_releases=True,
            release_validations=tuple(validations),
            errors=tuple(errors),
            github_info=github_info,
        )

    def _summary_error(self, validations: List[ReleaseValidation], repo_name: str) -> str:
        if not validations:
            return 'No releases found with ZIP assets'
        if not any(v.has_matching_asset for v in validations):
            return f'No release has a ZIP asset matching repository name "{repo_name}"'
        return 'No release contains a valid 4D component with matching ZIP name'

    def validate_release(
        self,
        release: ReleaseDescriptor,
        repo_name: str,
        full: bool = False
    ) -> ReleaseValidation:
        """
        Validate a single release: match, download, extract and classify.

        Failures are recorded in the returned ReleaseValidation's errors.
        The scratch directory is always removed.
        """
        release_info = release.to_dict() if full else None
        archives = release.archive_assets()

        if not archives:
            return ReleaseValidation(
                tag=release.tag,
                errors=('No ZIP assets found in release',),
                release=release_info,
            )

        asset = match_archive_asset(archives, repo_name)
        if asset is None:
            available = ', '.join(a.name for a in archives)
            return ReleaseValidation(
                tag=release.tag,
                errors=(
                    f'No ZIP file matching project name "{repo_name}" found. '
                    f'Available: {available}',
                ),
                release=release_info,
            )

        logger.info(f"Found matching ZIP: {asset.name}")
        errors: List[str] = []
        component_kind = None
        dependencies = None

        try:
            with self.workspace.scratch_space() as scratch:
                archive_path = scratch / asset.name
                logger.info(f"Downloading {asset.name}...")
                self.github.download_asset(asset, archive_path)

                extract_dir = scratch / EXTRACT_DIR_NAME
                logger.info("Extracting...")
                self.workspace.extract(archive_path, extract_dir)

                logger.info("Validating component...")
                result = self.classifier.classify(extract_dir, repo_name)
                component_kind = result.component_kind
                dependencies = result.dependencies
                errors.extend(result.errors)
        except (DepValidatorError, OSError) as e:
            errors.append(f"Failed to validate ZIP: {e}")
        except Exception as e:
            logger.error(f"Unexpected failure validating {asset.name}: {e}")
            errors.append(f"Failed to validate ZIP: {e}")

        if component_kind is not None:
            logger.info(f"Valid {component_kind.value} component found")

        return ReleaseValidation(
            tag=release.tag,
            matched_asset_name=asset.name,
            has_matching_asset=True,
            component_kind=component_kind,
            dependencies=dependencies,
            errors=tuple(errors),
            release=release_info,
        )
