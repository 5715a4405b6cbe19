"""
Archive workspace infrastructure for depvalidator.

Provides isolated scratch directories for downloaded release archives:
- Allocates collision-free directories under a configurable root
- Extracts archives with the host's unzip tool
- Removes scratch directories on a best-effort basis

Extraction is delegated to `unzip` rather than reimplemented, so every
compression method and filename encoding the host tool supports works here.
"""

import logging
import os
import secrets
import shutil
import subprocess
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union, Iterator

from ..errors import ExtractionError, ScratchSpaceError

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NAME = 'depvalidator'


def default_root() -> Path:
    """Default scratch root: <system temp dir>/depvalidator."""
    return Path(tempfile.gettempdir()) / DEFAULT_ROOT_NAME


class ArchiveWorkspace:
    """
    Scratch space and extraction for release archives.

    The root directory is fixed at construction so tests (and concurrent
    runs) can use isolated roots.

    Example:
        workspace = ArchiveWorkspace(root="/tmp/depvalidator")
        with workspace.scratch_space() as scratch:
            workspace.extract(scratch / "Foo.zip", scratch / "extracted")
    """

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        unzip_command: str = 'unzip',
        timeout: int = 120
    ):
        """
        Initialize ArchiveWorkspace.

        Args:
            root: Directory under which scratch spaces are created
            unzip_command: Executable used to extract archives
            timeout: Extraction timeout in seconds
        """
        self.root = Path(root).expanduser() if root else default_root()
        self.unzip_command = unzip_command
        self.timeout = timeout

    def create_scratch_space(self) -> Path:
        """
        Allocate a new, unique scratch directory.

        The name combines a nanosecond timestamp with 64 random bits, so
        allocations never collide across runs or processes.

        Raises:
            ScratchSpaceError: if the directory cannot be created
        """
        name = f"validate-{time.time_ns()}-{secrets.token_hex(8)}"
        path = self.root / name
        try:
            path.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise ScratchSpaceError(f"Cannot create scratch directory {path}: {e}") from e
        logger.debug(f"Created scratch space {path}")
        return path

    def extract(self, archive: Union[str, Path], destination: Union[str, Path]) -> None:
        """
        Extract the full tree of an archive into destination.

        Raises:
            ExtractionError: on malformed archives, unsupported compression,
                timeouts or a missing unzip executable
        """
        archive = str(archive)
        destination = str(destination)
        os.makedirs(destination, exist_ok=True)

        cmd = [self.unzip_command, '-o', '-q', archive, '-d', destination]
        logger.debug(f"Extracting: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise ExtractionError(
                f"Failed to spawn {self.unzip_command}: executable not available"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ExtractionError(
                f"{self.unzip_command} timed out after {self.timeout}s"
            ) from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout or '').strip()
            raise ExtractionError(
                f"{self.unzip_command} failed with code {result.returncode}: {output}",
                output=output
            )

    def cleanup(self, path: Union[str, Path]) -> None:
        """Remove a scratch directory and its contents. Never raises."""
        shutil.rmtree(path, ignore_errors=True)
        logger.debug(f"Removed scratch space {path}")

    @contextmanager
    def scratch_space(self) -> Iterator[Path]:
        """Allocate a scratch directory that is removed on exit."""
        path = self.create_scratch_space()
        try:
            yield path
        finally:
            self.cleanup(path)
