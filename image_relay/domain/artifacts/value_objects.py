"""
Artifact Value Objects

Immutable value objects for type safety and validation.
"""

import secrets
import string
from dataclasses import dataclass
from enum import Enum

from ..errors import ArtifactNotFoundError

# 32 bytes of randomness, ~43 characters once base64 encoded
TOKEN_BYTES = 32
MIN_IDENTIFIER_LENGTH = 32
URL_SAFE_ALPHABET = frozenset(string.ascii_letters + string.digits + "-_")


class ArtifactState(Enum):
    """Lifecycle state of a registered artifact."""

    UNSERVED = "unserved"
    SERVED = "served"


@dataclass(frozen=True)
class ArtifactId:
    """
    Value object representing an artifact identifier.

    Identifiers are the only credential guarding an artifact, so they must be
    unguessable: they are minted with secrets.token_urlsafe and anything that
    does not look like one is rejected as not found.
    """

    value: str

    def __post_init__(self):
        if not self._is_valid():
            raise ArtifactNotFoundError("Malformed artifact identifier")

    def _is_valid(self) -> bool:
        if not self.value or not isinstance(self.value, str):
            return False

        if len(self.value) < MIN_IDENTIFIER_LENGTH:
            return False

        return all(c in URL_SAFE_ALPHABET for c in self.value)

    @classmethod
    def generate(cls) -> "ArtifactId":
        """
        Generate a new cryptographically secure identifier.

        Returns:
            New ArtifactId instance
        """
        return cls(secrets.token_urlsafe(TOKEN_BYTES))

    def __str__(self) -> str:
        return self.value
