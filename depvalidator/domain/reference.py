"""
Repository reference domain object.
"""

from dataclasses import dataclass
from typing import Dict, Any

from ..errors import MalformedReference


@dataclass(frozen=True)
class RepositoryRef:
    """
    A GitHub repository identified by owner and short name.

    Example:
        ref = RepositoryRef.parse("4d/4D-ViewPro")
        ref.owner  # "4d"
        ref.name   # "4D-ViewPro"
    """

    owner: str
    name: str

    @classmethod
    def parse(cls, token: str) -> 'RepositoryRef':
        """
        Parse an "owner/name" token.

        Surrounding whitespace is ignored; case and content are kept as given.

        Raises:
            MalformedReference: unless exactly two non-empty segments result
        """
        parts = token.strip().split('/')
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise MalformedReference(token)
        return cls(owner=parts[0], name=parts[1])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def to_dict(self) -> Dict[str, Any]:
        return {'owner': self.owner, 'name': self.name}

    def __str__(self) -> str:
        return self.full_name
