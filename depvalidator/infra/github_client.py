"""
GitHub API client infrastructure for depvalidator.

Provides a clean abstraction over GitHub API access:
- Lists releases (with their assets) and fetches repository metadata
- Streams release assets to disk
- Translates HTTP and transport failures into typed errors
- Tracks rate limit status from response headers
"""

import time
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List, Dict, Any, Union

import requests

from ..domain import RepositoryRef, ReleaseDescriptor, AssetDescriptor
from ..errors import NotFound, RateLimited, TransportError, DownloadFailed

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
USER_AGENT = "depvalidator"
DOWNLOAD_CHUNK_SIZE = 64 * 1024


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 10 remaining)."""
        return self.remaining < 10


@dataclass
class GitHubRepo:
    """GitHub repository metadata, included in results in full mode."""
    owner: str
    name: str
    full_name: str
    description: Optional[str]
    html_url: Optional[str]
    homepage: Optional[str]
    language: Optional[str]
    stars: int
    forks: int
    watchers: int
    open_issues: int
    default_branch: str
    topics: List[str]
    license_key: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
    pushed_at: Optional[str]

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubRepo':
        """Create from GitHub API response."""
        owner = data.get('owner', {})
        license_info = data.get('license', {})

        return cls(
            owner=owner.get('login', '') if isinstance(owner, dict) else str(owner),
            name=data.get('name', ''),
            full_name=data.get('full_name', ''),
            description=data.get('description'),
            html_url=data.get('html_url'),
            homepage=data.get('homepage'),
            language=data.get('language'),
            stars=data.get('stargazers_count', 0),
            forks=data.get('forks_count', 0),
            watchers=data.get('watchers_count', 0),
            open_issues=data.get('open_issues_count', 0),
            default_branch=data.get('default_branch', 'main'),
            topics=data.get('topics', []),
            license_key=license_info.get('key') if isinstance(license_info, dict) else None,
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
            pushed_at=data.get('pushed_at'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'owner': self.owner,
            'name': self.name,
            'full_name': self.full_name,
            'description': self.description,
            'html_url': self.html_url,
            'homepage': self.homepage,
            'language': self.language,
            'stars': self.stars,
            'forks': self.forks,
            'watchers': self.watchers,
            'open_issues': self.open_issues,
            'default_branch': self.default_branch,
            'topics': self.topics,
            'license_key': self.license_key,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'pushed_at': self.pushed_at,
        }


class GitHubClient:
    """
    GitHub API client for release validation.

    A token is optional. Without one GitHub applies much lower rate limits,
    which only changes the wording of rate limit errors.

    Example:
        client = GitHubClient(token="ghp_...")
        ref = client.parse_ref("4d/4D-ViewPro")
        for release in client.list_releases(ref):
            print(release.tag, [a.name for a in release.assets])
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = GITHUB_API_BASE,
        timeout: int = 30,
        per_page: int = 100,
        max_pages: int = 10,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token; None or empty means unauthenticated
            api_url: Base URL of the REST API
            timeout: Request timeout in seconds
            per_page: Page size for release listings
            max_pages: Maximum number of release pages to follow
            session: requests session to use (created if None)
        """
        self.token = token or None
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.per_page = per_page
        self.max_pages = max_pages
        self.session = session or requests.Session()
        self.session.headers.update(self._headers())
        self._rate_limit_status: Optional[RateLimitStatus] = None

    def _headers(self) -> Dict[str, str]:
        headers = {
            'Accept': 'application/vnd.github+json',
            'User-Agent': USER_AGENT,
        }
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status seen on the last API response, if any."""
        return self._rate_limit_status

    def _update_rate_limit_from_headers(self, headers) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))

            if remaining >= 0 and limit >= 0:
                self._rate_limit_status = RateLimitStatus(
                    remaining=remaining,
                    limit=limit,
                    reset_time=reset_time,
                    used=used
                )

                if self._rate_limit_status.is_low:
                    logger.warning(
                        f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                        f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
                    )
        except (ValueError, TypeError):
            pass  # Ignore parsing errors

    def _is_rate_limited(self, response: requests.Response) -> bool:
        if response.status_code == 429:
            return True
        if response.status_code == 403:
            remaining = response.headers.get('X-RateLimit-Remaining')
            return remaining is None or remaining == '0'
        return False

    def _rate_limit_message(self) -> str:
        if self.token:
            return "API rate limit exceeded"
        return "API rate limit exceeded. Consider using a GITHUB_TOKEN"

    def _get(self, url: str, what: str, ref: RepositoryRef) -> requests.Response:
        """GET an API URL, raising typed errors for anything but 2xx."""
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Failed to fetch {what}: {e}") from e

        self._update_rate_limit_from_headers(response.headers)

        if response.status_code == 404:
            raise NotFound(f"Repository {ref.full_name} not found", 404)
        if self._is_rate_limited(response):
            raise RateLimited(self._rate_limit_message(), response.status_code)
        if not response.ok:
            raise TransportError(
                f"Failed to fetch {what}: {response.status_code} {response.reason}",
                response.status_code
            )
        return response

    def _json(self, response: requests.Response, what: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Failed to fetch {what}: invalid JSON response ({e})") from e

    def parse_ref(self, token: str) -> RepositoryRef:
        """Parse an "owner/name" token into a RepositoryRef."""
        return RepositoryRef.parse(token)

    def get_repository(self, ref: RepositoryRef) -> GitHubRepo:
        """
        Get repository metadata.

        Raises:
            NotFound, RateLimited, TransportError
        """
        response = self._get(
            f"{self.api_url}/repos/{ref.owner}/{ref.name}", "repository", ref
        )
        return GitHubRepo.from_api_response(self._json(response, "repository"))

    def list_releases(self, ref: RepositoryRef) -> List[ReleaseDescriptor]:
        """
        List published releases, in API order (newest first).

        Follows pagination links up to max_pages. A repository without
        releases yields an empty list.

        Raises:
            NotFound, RateLimited, TransportError
        """
        url: Optional[str] = (
            f"{self.api_url}/repos/{ref.owner}/{ref.name}/releases?per_page={self.per_page}"
        )
        releases: List[ReleaseDescriptor] = []
        pages = 0

        while url and pages < self.max_pages:
            response = self._get(url, "releases", ref)
            data = self._json(response, "releases")
            if not isinstance(data, list):
                raise TransportError("Failed to fetch releases: unexpected response format")

            releases.extend(ReleaseDescriptor.from_api_response(item) for item in data)
            pages += 1
            url = (response.links or {}).get('next', {}).get('url')

        logger.debug(f"Found {len(releases)} release(s) for {ref.full_name}")
        return releases

    def download_asset(self, asset: AssetDescriptor, destination: Union[str, Path]) -> None:
        """
        Stream a release asset to a local file, following redirects.

        Raises:
            DownloadFailed: on a non-success response or transport failure
        """
        logger.debug(f"Downloading {asset.download_url} -> {destination}")
        try:
            with self.session.get(
                asset.download_url,
                stream=True,
                allow_redirects=True,
                timeout=self.timeout,
            ) as response:
                if not response.ok:
                    raise DownloadFailed(
                        f"Failed to download asset: {response.status_code} {response.reason}",
                        response.status_code
                    )
                with open(destination, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise DownloadFailed(f"Failed to download asset: {e}") from e
