"""
Utility functions for depvalidator.
"""

from pathlib import Path
from typing import List, Union


def parse_repository_list(content: str) -> List[str]:
    """
    Parse a repository list, one "owner/name" per line.

    Blank lines and lines starting with '#' are ignored; surrounding
    whitespace is stripped.
    """
    repositories = []
    for line in content.splitlines():
        line = line.strip()
        if line and not line.startswith('#'):
            repositories.append(line)
    return repositories


def load_repository_list(path: Union[str, Path]) -> List[str]:
    """Read a repository list file (see parse_repository_list)."""
    path = Path(path).expanduser().resolve()
    return parse_repository_list(path.read_text(encoding='utf-8'))
