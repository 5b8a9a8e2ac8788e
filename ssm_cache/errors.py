"""
Exceptions raised by the parameter cache.
"""
from typing import Any, Dict, Optional


class ParameterCacheError(Exception):
    """Base exception for parameter cache failures."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RemoteFetchError(ParameterCacheError):
    """
    The remote parameter store call failed.

    The underlying exception is available as __cause__.
    """

    def __init__(self, key: str, message: str, cause: Optional[BaseException] = None):
        self.key = key
        details = {"key": key}
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
            message = f"{message}: {cause}"
        super().__init__("REMOTE_FETCH_ERROR", message, details)

    @classmethod
    def for_parameter(cls, name: str, cause: Optional[BaseException] = None) -> "RemoteFetchError":
        return cls(name, f"Attempting to get parameter: {name}", cause)

    @classmethod
    def for_path(cls, path: str, cause: Optional[BaseException] = None) -> "RemoteFetchError":
        return cls(path, f"Failed to page through all parameters in SSM tree: {path}", cause)


class TypeMismatchError(ParameterCacheError):
    """The remote parameter's declared type is not the one the accessor expects."""

    def __init__(self, name: str, actual_type: str, expected_type: str):
        self.name = name
        self.actual_type = actual_type
        self.expected_type = expected_type
        super().__init__(
            "TYPE_MISMATCH",
            f"Parameter {name} is type {actual_type}, not type {expected_type}",
            {"name": name, "actual_type": actual_type, "expected_type": expected_type},
        )


class CacheTypeAssertionError(ParameterCacheError):
    """A cached value does not have the shape the accessor expects."""

    def __init__(self, key: str, expected_kind: str, actual_kind: str):
        self.key = key
        super().__init__(
            "CACHE_TYPE_ASSERTION",
            f"Failed to type assert cached {expected_kind} value: {key}",
            {"key": key, "expected_kind": expected_kind, "actual_kind": actual_kind},
        )
