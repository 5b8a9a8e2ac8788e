"""Remote parameter source abstraction.

A source is the only thing the cache talks to for data. It knows how to
fetch one parameter by name and how to enumerate a path prefix page by
page. Sources never cache; they raise on failure and leave wrapping to
the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Protocol


class ParameterType(str, Enum):
    """Declared SSM parameter types, valued by their wire names."""
    STRING = "String"
    STRING_LIST = "StringList"
    SECURE_STRING = "SecureString"


@dataclass(frozen=True)
class RemoteParameter:
    """A parameter as returned by the remote store."""
    name: str
    type: str
    value: Optional[str] = None

    @property
    def value_or_empty(self) -> str:
        """The value, with an absent value read as an empty string."""
        return self.value if self.value is not None else ""


class ParameterSource(Protocol):
    """
    Interface for remote parameter stores.

    Implementations:
    - Boto3ParameterSource: AWS SSM Parameter Store via boto3
    - InMemoryParameterSource: dict-backed, for local use and tests
    """

    def fetch_parameter(self, name: str, with_decryption: bool = False) -> RemoteParameter:
        """
        Fetch a single parameter.

        Args:
            name: Fully-qualified parameter name
            with_decryption: Decrypt SecureString values

        Returns:
            RemoteParameter with its declared type and value

        Raises:
            Exception: Any transport, permission, or not-found failure
        """
        ...

    def iter_parameters_by_path(
        self, path: str, recursive: bool = True, with_decryption: bool = False
    ) -> Iterator[List[RemoteParameter]]:
        """
        Enumerate every parameter under a path prefix.

        Yields one list per page. Raises on the first failing page.
        SecureString values stay encrypted unless with_decryption is set.
        """
        ...
