"""AWS SSM Parameter Store source backed by boto3."""

import logging
from typing import Any, Dict, Iterator, List, Optional

import boto3
from botocore.exceptions import ClientError
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from .base import RemoteParameter

logger = logging.getLogger("ssm_cache.source.aws")

# SSM error codes worth backing off on; everything else propagates at once
THROTTLING_ERROR_CODES = frozenset({
    "ThrottlingException",
    "TooManyUpdates",
    "RequestLimitExceeded",
})


def is_throttling_error(exc: BaseException) -> bool:
    """Check if a boto3 error is SSM rate limiting."""
    if not isinstance(exc, ClientError):
        return False
    code = exc.response.get("Error", {}).get("Code", "")
    return code in THROTTLING_ERROR_CODES


def _log_retry(retry_state) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        f"SSM throttled (attempt {retry_state.attempt_number}), backing off: {exc}"
    )


class Boto3ParameterSource:
    """
    ParameterSource over a boto3 SSM client.

    Only throttling errors are retried, with exponential back-off.
    Not-found, permission and transport errors propagate on first failure.
    """

    def __init__(
        self,
        client: Any = None,
        session: Optional[boto3.session.Session] = None,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        max_attempts: int = 3,
        wait: Optional[wait_base] = None,
    ):
        """
        Initialize the source.

        Args:
            client: Pre-built SSM client. Takes precedence over session.
            session: boto3 session used to build the client
            region_name: AWS region for the client
            endpoint_url: Override endpoint (e.g. LocalStack)
            max_attempts: Total attempts per call when throttled
            wait: tenacity wait strategy between attempts
        """
        if client is None:
            session = session or boto3.session.Session()
            client = session.client(
                "ssm",
                region_name=region_name,
                endpoint_url=endpoint_url,
            )
        self._client = client
        self._retrying = Retrying(
            stop=stop_after_attempt(max(1, max_attempts)),
            wait=wait or wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception(is_throttling_error),
            before_sleep=_log_retry,
            reraise=True,
        )

    @property
    def client(self) -> Any:
        return self._client

    def fetch_parameter(self, name: str, with_decryption: bool = False) -> RemoteParameter:
        """Fetch one parameter with GetParameter."""
        response = self._call(
            self._client.get_parameter,
            Name=name,
            WithDecryption=with_decryption,
        )
        return self._to_remote_parameter(response["Parameter"])

    def iter_parameters_by_path(
        self, path: str, recursive: bool = True, with_decryption: bool = False
    ) -> Iterator[List[RemoteParameter]]:
        """
        Walk GetParametersByPath, one page per NextToken.

        SecureString values come back as ciphertext unless with_decryption is set.
        """
        request: Dict[str, Any] = {
            "Path": path,
            "Recursive": recursive,
            "WithDecryption": with_decryption,
        }
        page_number = 0
        while True:
            response = self._call(self._client.get_parameters_by_path, **request)
            page_number += 1
            parameters = response.get("Parameters", [])
            logger.debug(f"Fetched page {page_number} of {path} ({len(parameters)} parameters)")
            yield [self._to_remote_parameter(p) for p in parameters]

            next_token = response.get("NextToken")
            if not next_token:
                return
            request["NextToken"] = next_token

    def _call(self, fn, **kwargs) -> Dict[str, Any]:
        # Fresh copy per call so concurrent callers don't share retry state
        return self._retrying.copy()(fn, **kwargs)

    @staticmethod
    def _to_remote_parameter(raw: Dict[str, Any]) -> RemoteParameter:
        return RemoteParameter(
            name=raw["Name"],
            type=raw.get("Type", ""),
            value=raw.get("Value"),
        )
