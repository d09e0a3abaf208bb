"""Entry points used by storage clients.

:func:`is_storage_locator` is a cheap check for whether a URL addresses an
S3-style service at all. :func:`process_locator` runs the full pipeline and
fills a :class:`~locators.lib.info.StorageInfo` record.

Usage:
    from locators.lib.process import is_storage_locator, process_locator

    if is_storage_locator(url):
        info = StorageInfo()
        canonical = process_locator(url, info)
        client.open(info.host, info.bucket, info.rootkey)
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from locators.lib.errors import LocatorError, MalformedLocatorError
from locators.lib.info import StorageInfo
from locators.lib.rebuild import rebuild_locator
from locators.lib.segments import join_segments, split_segments
from locators.lib.settings import LocatorSettings
from locators.lib.shapes import AWS_HOST_SUFFIX, GOOGLE_HOST, ends_with_token, same_token
from locators.lib.uri import GCS_SCHEME, S3_SCHEME, Locator, coerce_locator

logger = logging.getLogger(__name__)

__all__ = ["NO_PROFILE", "derive_rootkey", "is_storage_locator", "process_locator"]

# Recorded when no credential profile is configured.
NO_PROFILE = "no"


def derive_rootkey(path: Optional[str]) -> str:
    """Object key prefix of a canonical path, with the bucket segment removed.

    Example:
        >>> derive_rootkey("/bucket/a/b/c")
        'a/b/c'
        >>> derive_rootkey("/bucket")
        ''
    """
    return join_segments(split_segments(path, "/")[1:])


def process_locator(
    locator: Union[str, Locator],
    info: StorageInfo,
    *,
    settings: Optional[LocatorSettings] = None,
) -> Locator:
    """Normalize a storage locator and populate ``info``.

    ``info`` may carry region/bucket/profile from an earlier call; they are
    used only where the URL does not supply its own. On failure ``info`` may
    be partially populated and should be discarded.

    Args:
        locator: URL string or parsed Locator
        info: Record to populate
        settings: Configuration defaults (default: ``LocatorSettings()``)

    Returns:
        The canonical path-style Locator

    Raises:
        LocatorError: Any locator failure (malformed URL, unresolved region
            or bucket, unreadable settings)
    """
    if info is None:
        raise MalformedLocatorError("A StorageInfo record is required")
    locator = coerce_locator(locator)
    settings = settings if settings is not None else LocatorSettings()

    try:
        info.profile = settings.active_profile(locator) or NO_PROFILE

        canonical = rebuild_locator(locator, info, settings=settings)
        info.host = canonical.host
        info.rootkey = derive_rootkey(canonical.path)
    except LocatorError as exc:
        logger.debug("Rejected storage locator %s: %s", locator.url, exc.message)
        raise

    logger.debug("Processed %s -> %s [%s]", locator.url, canonical.url, info.dump())
    return canonical


def is_storage_locator(locator: Union[str, Locator, None]) -> bool:
    """Return True if ``locator`` looks like it addresses S3 or Google storage.

    Never raises; unparsable input is simply not a storage locator.

    Example:
        >>> is_storage_locator("s3://bucket/x")
        True
        >>> is_storage_locator("https://example.com/bucket/x")
        False
    """
    if locator is None:
        return False
    if isinstance(locator, str):
        try:
            locator = Locator.parse(locator)
        except MalformedLocatorError:
            return False
    if not isinstance(locator, Locator):
        return False

    if same_token(locator.scheme, S3_SCHEME) or same_token(locator.scheme, GCS_SCHEME):
        return True
    if locator.has_mode(S3_SCHEME) or locator.has_mode(GCS_SCHEME):
        return True
    if not locator.host:
        return False
    return ends_with_token(locator.host, AWS_HOST_SUFFIX) or same_token(
        locator.host, GOOGLE_HOST
    )
