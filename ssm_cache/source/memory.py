"""Dict-backed parameter source for local development and tests."""

import threading
from typing import Dict, Iterator, List, Optional, Set

from .base import ParameterType, RemoteParameter


class ParameterNotFound(KeyError):
    """Raised when a parameter name is not in the store."""
    pass


class InMemoryParameterSource:
    """
    ParameterSource holding parameters in a dict.

    Path listings are returned in name order, split into pages of
    `page_size`. Names in `failing_names` raise on fetch, and the page
    numbers in `failing_pages` (1-based) raise during path enumeration.
    Call counters let callers check how often the remote was hit.
    """

    def __init__(self, page_size: int = 10):
        self._parameters: Dict[str, RemoteParameter] = {}
        self._lock = threading.Lock()
        self.page_size = max(1, page_size)
        self.failing_names: Set[str] = set()
        self.failing_pages: Set[int] = set()
        self.fetch_calls = 0
        self.page_calls = 0

    def put(
        self,
        name: str,
        value: Optional[str],
        param_type: ParameterType = ParameterType.STRING,
    ) -> "InMemoryParameterSource":
        """Add or replace a parameter. Returns self for chaining."""
        with self._lock:
            self._parameters[name] = RemoteParameter(
                name=name, type=param_type.value, value=value
            )
        return self

    def delete(self, name: str) -> None:
        with self._lock:
            self._parameters.pop(name, None)

    def fetch_parameter(self, name: str, with_decryption: bool = False) -> RemoteParameter:
        with self._lock:
            self.fetch_calls += 1
            if name in self.failing_names:
                raise ConnectionError(f"Simulated failure fetching {name}")
            parameter = self._parameters.get(name)
        if parameter is None:
            raise ParameterNotFound(name)
        return _as_returned(parameter, with_decryption)

    def iter_parameters_by_path(
        self, path: str, recursive: bool = True, with_decryption: bool = False
    ) -> Iterator[List[RemoteParameter]]:
        prefix = path if path.endswith("/") else path + "/"
        with self._lock:
            matches = [
                p for name, p in sorted(self._parameters.items())
                if name.startswith(prefix)
                and (recursive or "/" not in name[len(prefix):])
            ]

        pages = [
            matches[i:i + self.page_size]
            for i in range(0, len(matches), self.page_size)
        ] or [[]]

        for page_number, page in enumerate(pages, start=1):
            with self._lock:
                self.page_calls += 1
            if page_number in self.failing_pages:
                raise ConnectionError(f"Simulated failure on page {page_number} of {path}")
            yield [_as_returned(p, with_decryption) for p in page]


def _as_returned(parameter: RemoteParameter, with_decryption: bool) -> RemoteParameter:
    # Mirror SSM: ciphertext comes back when decryption isn't requested
    if parameter.type == ParameterType.SECURE_STRING.value and not with_decryption:
        return RemoteParameter(
            name=parameter.name,
            type=parameter.type,
            value=f"encrypted:{parameter.value_or_empty}",
        )
    return parameter
