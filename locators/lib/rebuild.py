"""Rebuild storage locators into canonical path-style form.

Whatever form a locator arrives in, the rebuilt locator is::

    https://<canonical-host>/<bucket>/<key...>

with an explicit bucket and a resolved region. Region and bucket are
resolved in a fixed order:

- region: host of the URL, then the prior info record, then the configured
  default for the URL
- bucket: host of the URL, then the first path segment, then the prior
  info record
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from locators.lib.errors import BucketUnresolvedError, RegionUnresolvedError
from locators.lib.info import StorageInfo, StorageService
from locators.lib.segments import split_segments
from locators.lib.settings import LocatorSettings
from locators.lib.shapes import (
    AWS_HOST_SUFFIX,
    GOOGLE_HOST,
    HostClassification,
    classify_host,
)
from locators.lib.uri import HTTPS_SCHEME, Locator, coerce_locator

logger = logging.getLogger(__name__)

__all__ = [
    "canonical_host",
    "canonical_path",
    "rebuild_locator",
    "resolve_bucket",
    "resolve_region",
]


def resolve_region(
    locator: Locator,
    classification: HostClassification,
    prior: Optional[StorageInfo],
    settings: LocatorSettings,
) -> str:
    """Settle the region: URL host, then prior record, then configuration.

    Raises:
        RegionUnresolvedError: If no source supplies a non-empty region.
    """
    region = classification.region
    if not region and prior is not None:
        region = prior.region
    if not region:
        region = settings.default_region(locator)
    if not region:
        raise RegionUnresolvedError(
            "Could not determine the storage region", locator=locator.url
        )
    return region


def resolve_bucket(
    locator: Locator,
    classification: HostClassification,
    path_segments: List[str],
    prior: Optional[StorageInfo],
) -> str:
    """Settle the bucket: URL host, then first path segment, then prior record.

    When the bucket comes from the path, its segment is removed from
    ``path_segments``.

    Raises:
        BucketUnresolvedError: If no source supplies a non-empty bucket.
    """
    bucket = classification.bucket
    if not bucket and path_segments:
        bucket = path_segments.pop(0)
    if not bucket and prior is not None:
        bucket = prior.bucket
    if not bucket:
        raise BucketUnresolvedError(
            "Could not determine the storage bucket", locator=locator.url
        )
    return bucket


def canonical_host(classification: HostClassification, region: str) -> str:
    """Endpoint host for the classified service."""
    if classification.service is StorageService.S3:
        return f"s3.{region}{AWS_HOST_SUFFIX}"
    if classification.service is StorageService.GCS:
        return GOOGLE_HOST
    # Unknown services keep the host they were given.
    assert classification.host is not None
    return classification.host


def canonical_path(bucket: str, key_segments: List[str]) -> str:
    """``/<bucket>`` followed by ``/<segment>`` for each remaining key segment."""
    return "".join(f"/{segment}" for segment in [bucket, *key_segments])


def rebuild_locator(
    locator: Union[str, Locator],
    info: Optional[StorageInfo] = None,
    *,
    settings: Optional[LocatorSettings] = None,
) -> Locator:
    """Rebuild a locator into canonical path-style form.

    Args:
        locator: URL string or parsed Locator
        info: Optional record; its region/bucket are used as fallbacks and it
            receives the resolved bucket, region and service
        settings: Configuration defaults (default: ``LocatorSettings()``)

    Returns:
        A new https Locator with canonical host and ``/<bucket>/<key>`` path.
        The input locator is not modified.

    Raises:
        MalformedLocatorError: Missing locator/host or unrecognized AWS host
        RegionUnresolvedError: No region from host, record or configuration
        BucketUnresolvedError: No bucket from host, path or record

    Example:
        >>> rebuild_locator("https://data.s3.us-west-2.amazonaws.com/a/b.nc").url
        'https://s3.us-west-2.amazonaws.com/data/a/b.nc'
    """
    locator = coerce_locator(locator)
    settings = settings if settings is not None else LocatorSettings()

    classification = classify_host(locator)
    path_segments = split_segments(locator.path, "/")

    region = resolve_region(locator, classification, info, settings)
    bucket = resolve_bucket(locator, classification, path_segments, info)

    rebuilt = locator.replace(
        scheme=HTTPS_SCHEME,
        host=canonical_host(classification, region),
        path=canonical_path(bucket, path_segments),
    )

    logger.debug(
        "Rebuilt %s -> %s (shape=%s bucket=%s region=%s)",
        locator.url,
        rebuilt.url,
        classification.shape.value,
        bucket,
        region,
    )

    if info is not None:
        info.bucket = bucket
        info.region = region
        info.service = classification.service

    return rebuilt
