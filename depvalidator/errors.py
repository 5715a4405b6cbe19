"""
Error taxonomy for depvalidator.

Every failure the validation core can raise derives from DepValidatorError:
- MalformedReference: repository identifier is not "owner/name"
- GatewayError: remote API failures (NotFound, RateLimited, TransportError,
  DownloadFailed)
- ExtractionError: archive could not be unpacked
- ScratchSpaceError: temporary directory could not be allocated

The validation service turns these into human-readable error entries on the
repository or release result. They never escape a validation run.
"""

from typing import Optional


class DepValidatorError(Exception):
    """Base class for all depvalidator errors."""


class MalformedReference(DepValidatorError):
    """Raised when a repository identifier is not of the form owner/name."""

    def __init__(self, token: str):
        super().__init__(f"Invalid repository path: {token}. Expected format: owner/repo")
        self.token = token


class GatewayError(DepValidatorError):
    """Raised when the GitHub API cannot satisfy a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFound(GatewayError):
    """The repository (or resource) does not exist or is not visible."""


class RateLimited(GatewayError):
    """The API quota for the current credential is exhausted."""


class TransportError(GatewayError):
    """Any other non-success response or network failure."""


class DownloadFailed(GatewayError):
    """A release asset could not be downloaded."""


class ExtractionError(DepValidatorError):
    """Raised when an archive cannot be extracted."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class ScratchSpaceError(DepValidatorError):
    """Raised when a scratch directory cannot be created."""
