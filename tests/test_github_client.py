"""
Tests for the GitHub API client.

The requests session is replaced by a MagicMock; no network access.
"""

from unittest.mock import MagicMock

import pytest
import requests

from depvalidator.domain import RepositoryRef, AssetDescriptor
from depvalidator.errors import (
    MalformedReference,
    NotFound,
    RateLimited,
    TransportError,
    DownloadFailed,
)
from depvalidator.infra.github_client import GitHubClient, GitHubRepo, RateLimitStatus


REF = RepositoryRef(owner="4d", name="4D-ViewPro")

SAMPLE_RELEASES = [
    {
        "tag_name": "21.4",
        "name": "21.4",
        "assets": [
            {
                "name": "4D-ViewPro.zip",
                "browser_download_url": "https://github.com/4d/4D-ViewPro/releases/download/21.4/4D-ViewPro.zip",
                "size": 2048,
            }
        ],
    },
    {"tag_name": "21.3", "assets": []},
]

SAMPLE_REPO = {
    "name": "4D-ViewPro",
    "full_name": "4d/4D-ViewPro",
    "owner": {"login": "4d"},
    "description": "Spreadsheet component",
    "html_url": "https://github.com/4d/4D-ViewPro",
    "stargazers_count": 42,
    "forks_count": 3,
    "default_branch": "main",
    "topics": ["4d", "component"],
    "license": {"key": "mit"},
}


def make_response(status_code=200, json_data=None, headers=None, links=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.headers = headers or {}
    response.links = links or {}
    response.json.return_value = json_data
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


class TestClientSetup:
    """Tests for client headers and reference parsing."""

    def test_headers_without_token(self, session):
        """Test default headers without a token"""
        GitHubClient(session=session)
        assert session.headers['User-Agent'] == 'depvalidator'
        assert 'Authorization' not in session.headers

    def test_headers_with_token(self, session):
        """Test the Authorization header with a token"""
        GitHubClient(token="secret", session=session)
        assert session.headers['Authorization'] == 'Bearer secret'

    def test_empty_token_is_unauthenticated(self, session):
        """Test an empty token means unauthenticated"""
        client = GitHubClient(token="", session=session)
        assert client.token is None
        assert 'Authorization' not in session.headers

    def test_parse_ref(self, session):
        """Test parse_ref delegates to RepositoryRef"""
        client = GitHubClient(session=session)
        assert client.parse_ref("4d/4D-ViewPro") == REF
        with pytest.raises(MalformedReference):
            client.parse_ref("4D-ViewPro")


class TestListReleases:
    """Tests for GitHubClient.list_releases()."""

    def test_list_releases(self, session):
        """Test listing releases with their assets"""
        session.get.return_value = make_response(json_data=SAMPLE_RELEASES)
        client = GitHubClient(session=session, per_page=50)

        releases = client.list_releases(REF)

        assert [r.tag for r in releases] == ["21.4", "21.3"]
        assert releases[0].assets[0].name == "4D-ViewPro.zip"
        url = session.get.call_args[0][0]
        assert url == "https://api.github.com/repos/4d/4D-ViewPro/releases?per_page=50"

    def test_empty_release_list(self, session):
        """Test a repository without releases"""
        session.get.return_value = make_response(json_data=[])
        assert GitHubClient(session=session).list_releases(REF) == []

    def test_follows_pagination(self, session):
        """Test the next link is followed"""
        page1 = make_response(
            json_data=[SAMPLE_RELEASES[0]],
            links={'next': {'url': 'https://api.github.com/page2'}}
        )
        page2 = make_response(json_data=[SAMPLE_RELEASES[1]])
        session.get.side_effect = [page1, page2]

        releases = GitHubClient(session=session).list_releases(REF)

        assert [r.tag for r in releases] == ["21.4", "21.3"]
        assert session.get.call_args_list[1][0][0] == 'https://api.github.com/page2'

    def test_pagination_stops_at_max_pages(self, session):
        """Test pagination stops at max_pages"""
        session.get.return_value = make_response(
            json_data=[SAMPLE_RELEASES[0]],
            links={'next': {'url': 'https://api.github.com/again'}}
        )
        releases = GitHubClient(session=session, max_pages=3).list_releases(REF)
        assert len(releases) == 3
        assert session.get.call_count == 3

    def test_not_found(self, session):
        """Test 404 raises NotFound"""
        session.get.return_value = make_response(status_code=404, reason="Not Found")
        with pytest.raises(NotFound) as exc_info:
            GitHubClient(session=session).list_releases(REF)
        assert str(exc_info.value) == "Repository 4d/4D-ViewPro not found"

    def test_rate_limited_without_token_suggests_token(self, session):
        """Test rate limit message suggests a token"""
        session.get.return_value = make_response(
            status_code=403, headers={'X-RateLimit-Remaining': '0', 'X-RateLimit-Limit': '60'}
        )
        with pytest.raises(RateLimited) as exc_info:
            GitHubClient(session=session).list_releases(REF)
        assert "GITHUB_TOKEN" in str(exc_info.value)

    def test_rate_limited_with_token(self, session):
        """Test rate limit message with a token"""
        session.get.return_value = make_response(status_code=429)
        with pytest.raises(RateLimited) as exc_info:
            GitHubClient(token="secret", session=session).list_releases(REF)
        assert "GITHUB_TOKEN" not in str(exc_info.value)

    def test_forbidden_with_quota_left_is_transport_error(self, session):
        """Test 403 with quota left is not a rate limit"""
        session.get.return_value = make_response(
            status_code=403, headers={'X-RateLimit-Remaining': '4000'}, reason="Forbidden"
        )
        with pytest.raises(TransportError) as exc_info:
            GitHubClient(session=session).list_releases(REF)
        assert "403 Forbidden" in str(exc_info.value)

    def test_server_error(self, session):
        """Test 5xx raises TransportError with the status"""
        session.get.return_value = make_response(status_code=502, reason="Bad Gateway")
        with pytest.raises(TransportError) as exc_info:
            GitHubClient(session=session).list_releases(REF)
        assert str(exc_info.value) == "Failed to fetch releases: 502 Bad Gateway"
        assert exc_info.value.status_code == 502

    def test_network_failure(self, session):
        """Test connection errors raise TransportError"""
        session.get.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(TransportError):
            GitHubClient(session=session).list_releases(REF)

    def test_invalid_json(self, session):
        """Test an unparsable body raises TransportError"""
        response = make_response()
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response
        with pytest.raises(TransportError):
            GitHubClient(session=session).list_releases(REF)

    def test_unexpected_payload(self, session):
        """Test a non-list releases payload"""
        session.get.return_value = make_response(json_data={"message": "odd"})
        with pytest.raises(TransportError):
            GitHubClient(session=session).list_releases(REF)

    def test_tracks_rate_limit(self, session):
        """Test rate limit headers are recorded"""
        session.get.return_value = make_response(
            json_data=[],
            headers={
                'X-RateLimit-Remaining': '4999',
                'X-RateLimit-Limit': '5000',
                'X-RateLimit-Reset': '1700000000',
                'X-RateLimit-Used': '1',
            }
        )
        client = GitHubClient(session=session)
        client.list_releases(REF)
        status = client.rate_limit_status
        assert isinstance(status, RateLimitStatus)
        assert status.remaining == 4999
        assert not status.is_low
        assert status.minutes_until_reset == 0  # reset time already passed


class TestGetRepository:
    """Tests for GitHubClient.get_repository()."""

    def test_get_repository(self, session):
        """Test fetching repository metadata"""
        session.get.return_value = make_response(json_data=SAMPLE_REPO)
        repo = GitHubClient(session=session).get_repository(REF)
        assert isinstance(repo, GitHubRepo)
        assert repo.full_name == "4d/4D-ViewPro"
        assert repo.owner == "4d"
        assert repo.stars == 42
        assert repo.license_key == "mit"
        assert repo.to_dict()['topics'] == ["4d", "component"]
        assert session.get.call_args[0][0] == "https://api.github.com/repos/4d/4D-ViewPro"

    def test_get_repository_not_found(self, session):
        """Test 404 for repository metadata"""
        session.get.return_value = make_response(status_code=404)
        with pytest.raises(NotFound):
            GitHubClient(session=session).get_repository(REF)


class TestDownloadAsset:
    """Tests for GitHubClient.download_asset()."""

    ASSET = AssetDescriptor(
        name="4D-ViewPro.zip",
        download_url="https://github.com/4d/4D-ViewPro/releases/download/21.4/4D-ViewPro.zip",
        size=6,
    )

    def test_download_writes_chunks(self, session, tmp_path):
        """Test streaming an asset to disk"""
        response = make_response()
        response.iter_content.return_value = [b"abc", b"", b"def"]
        session.get.return_value = response
        destination = tmp_path / "asset.zip"

        GitHubClient(session=session).download_asset(self.ASSET, destination)

        assert destination.read_bytes() == b"abcdef"
        _, kwargs = session.get.call_args
        assert kwargs['stream'] is True
        assert kwargs['allow_redirects'] is True

    def test_download_failure_status(self, session, tmp_path):
        """Test a failed download leaves no file"""
        session.get.return_value = make_response(status_code=404, reason="Not Found")
        with pytest.raises(DownloadFailed) as exc_info:
            GitHubClient(session=session).download_asset(self.ASSET, tmp_path / "asset.zip")
        assert str(exc_info.value) == "Failed to download asset: 404 Not Found"
        assert not (tmp_path / "asset.zip").exists()

    def test_download_network_failure(self, session, tmp_path):
        """Test transport errors raise DownloadFailed"""
        session.get.side_effect = requests.Timeout("read timed out")
        with pytest.raises(DownloadFailed):
            GitHubClient(session=session).download_asset(self.ASSET, tmp_path / "asset.zip")
