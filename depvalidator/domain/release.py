"""
Release and asset domain objects.

These mirror the parts of the GitHub releases API that validation needs.
They are built from API responses by the gateway and never mutated.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any, List, Tuple

ARCHIVE_SUFFIX = '.zip'


@dataclass(frozen=True)
class AssetDescriptor:
    """A downloadable file attached to a release."""
    name: str
    download_url: str
    size: int = 0
    content_type: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'AssetDescriptor':
        """Create from a release asset object of the GitHub API."""
        return cls(
            name=data.get('name') or '',
            download_url=data.get('browser_download_url') or '',
            size=data.get('size', 0) or 0,
            content_type=data.get('content_type'),
        )

    @property
    def is_archive(self) -> bool:
        return self.name.lower().endswith(ARCHIVE_SUFFIX)

    @property
    def stem(self) -> str:
        """Asset name with the archive suffix stripped (any case)."""
        if self.is_archive:
            return self.name[:-len(ARCHIVE_SUFFIX)]
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'download_url': self.download_url,
            'size': self.size,
            'content_type': self.content_type,
        }


@dataclass(frozen=True)
class ReleaseDescriptor:
    """
    A published release and its assets.

    Assets keep the order returned by the API.
    """
    tag: str
    assets: Tuple[AssetDescriptor, ...] = ()
    name: Optional[str] = None
    draft: bool = False
    prerelease: bool = False
    published_at: Optional[str] = None
    html_url: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'ReleaseDescriptor':
        """Create from a release object of the GitHub API."""
        return cls(
            tag=data.get('tag_name') or '',
            assets=tuple(
                AssetDescriptor.from_api_response(asset)
                for asset in data.get('assets') or []
            ),
            name=data.get('name'),
            draft=data.get('draft', False),
            prerelease=data.get('prerelease', False),
            published_at=data.get('published_at'),
            html_url=data.get('html_url'),
        )

    def archive_assets(self) -> List[AssetDescriptor]:
        """Assets whose name ends with the archive suffix."""
        return [asset for asset in self.assets if asset.is_archive]

    @property
    def has_archive_assets(self) -> bool:
        return any(asset.is_archive for asset in self.assets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tag': self.tag,
            'name': self.name,
            'draft': self.draft,
            'prerelease': self.prerelease,
            'published_at': self.published_at,
            'html_url': self.html_url,
            'assets': [asset.to_dict() for asset in self.assets],
        }
