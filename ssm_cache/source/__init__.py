"""
Remote parameter sources.

The cache only talks to the remote store through a ParameterSource.
"""

import logging
from typing import TYPE_CHECKING, Optional

import boto3

from .base import ParameterSource, ParameterType, RemoteParameter
from .aws import Boto3ParameterSource
from .memory import InMemoryParameterSource, ParameterNotFound

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger("ssm_cache.source")

__all__ = [
    "ParameterSource",
    "ParameterType",
    "RemoteParameter",
    "Boto3ParameterSource",
    "InMemoryParameterSource",
    "ParameterNotFound",
    "get_parameter_source",
]


def get_parameter_source(
    settings: "Settings",
    session: Optional[boto3.session.Session] = None,
) -> ParameterSource:
    """
    Build the SSM-backed source described by settings.

    An explicit session wins over aws_profile / aws_region in settings,
    so callers can share credentials they already established.
    """
    if session is None:
        session = boto3.session.Session(
            profile_name=settings.aws_profile,
            region_name=settings.aws_region,
        )
    logger.info(
        f"Using SSM parameter source (region={session.region_name or 'default'}, "
        f"endpoint={settings.endpoint_url or 'default'})"
    )
    return Boto3ParameterSource(
        session=session,
        region_name=settings.aws_region,
        endpoint_url=settings.endpoint_url,
        max_attempts=settings.max_retry_attempts,
    )
