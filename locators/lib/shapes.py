"""Classification of storage locator address shapes.

The supported forms are::

    (1) https://<bucket>.s3.<region>.amazonaws.com/<key>   virtual-hosted, explicit region
    (2) https://<bucket>.s3.amazonaws.com/<key>            virtual-hosted, default region
    (3) https://s3.<region>.amazonaws.com/<bucket>/<key>   path-style, explicit region
    (4) https://s3.amazonaws.com/<bucket>/<key>            path-style, default region
    (5) s3://<bucket>/<key>                                scheme-prefixed S3
    (6) https://storage.googleapis.com/<bucket>/<key>      Google, path-style
    (7) gs3://<bucket>/<key>                               scheme-prefixed Google
    (8) https://<host>/<bucket>/<key>                      any other S3-compatible host

:func:`classify_host` is the only place these forms are told apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from locators.lib.errors import MalformedLocatorError
from locators.lib.info import StorageService
from locators.lib.segments import split_segments
from locators.lib.uri import GCS_SCHEME, S3_SCHEME, Locator

__all__ = [
    "AWS_HOST_SUFFIX",
    "GOOGLE_HOST",
    "AddressShape",
    "HostClassification",
    "classify_host",
    "ends_with_token",
    "same_token",
]

AWS_HOST_SUFFIX = ".amazonaws.com"
GOOGLE_HOST = "storage.googleapis.com"
S3_HOST_SEGMENT = "s3"


class AddressShape(Enum):
    """How the bucket and region are laid out in a locator."""

    NONE = "none"  # not yet classified
    VIRTUAL = "virtual"  # bucket in the host
    PATH = "path"  # bucket is the first path segment
    SCHEME = "scheme"  # s3:// or gs3:// short form
    OTHER = "other"  # unrecognized host, kept verbatim


@dataclass(frozen=True)
class HostClassification:
    """What the host of a locator reveals.

    ``bucket``/``region`` are None when the host does not embed them.
    ``host`` is the original host for services whose host is kept verbatim.
    """

    shape: AddressShape = AddressShape.NONE
    service: StorageService = StorageService.UNKNOWN
    bucket: Optional[str] = None
    region: Optional[str] = None
    host: Optional[str] = None


def same_token(value: Optional[str], literal: str) -> bool:
    """Case-insensitive equality against a fixed literal."""
    return value is not None and value.casefold() == literal.casefold()


def ends_with_token(value: Optional[str], suffix: str) -> bool:
    """Case-insensitive suffix test against a fixed literal."""
    return value is not None and value.casefold().endswith(suffix.casefold())


def classify_host(locator: Locator) -> HostClassification:
    """Decide which address form ``locator`` uses.

    Raises:
        MalformedLocatorError: If the host is missing, or is an AWS host
            whose segments match none of the known forms.
    """
    host = locator.host
    if not host:
        raise MalformedLocatorError("URL has no host", locator=locator.url)

    segments = split_segments(host, ".")

    if same_token(locator.scheme, S3_SCHEME) and len(segments) == 1:
        return HostClassification(
            shape=AddressShape.SCHEME,
            service=StorageService.S3,
            bucket=segments[0],
        )

    if same_token(locator.scheme, GCS_SCHEME) and len(segments) == 1:
        return HostClassification(
            shape=AddressShape.SCHEME,
            service=StorageService.GCS,
            bucket=segments[0],
        )

    if ends_with_token(host, AWS_HOST_SUFFIX):
        return _classify_aws_host(locator, segments)

    if same_token(host, GOOGLE_HOST):
        return HostClassification(
            shape=AddressShape.PATH,
            service=StorageService.GCS,
            host=host,
        )

    return HostClassification(shape=AddressShape.OTHER, host=host)


def _classify_aws_host(locator: Locator, segments: List[str]) -> HostClassification:
    count = len(segments)

    if count == 3:
        # s3.amazonaws.com
        return HostClassification(shape=AddressShape.PATH, service=StorageService.S3)

    if count == 4:
        if same_token(segments[0], S3_HOST_SEGMENT):
            # s3.<region>.amazonaws.com
            return HostClassification(
                shape=AddressShape.PATH,
                service=StorageService.S3,
                region=segments[1],
            )
        if same_token(segments[1], S3_HOST_SEGMENT):
            # <bucket>.s3.amazonaws.com
            return HostClassification(
                shape=AddressShape.VIRTUAL,
                service=StorageService.S3,
                bucket=segments[0],
            )
        raise MalformedLocatorError(
            "AWS host must look like '<bucket>.s3.amazonaws.com' "
            "or 's3.<region>.amazonaws.com'",
            host=locator.host,
            locator=locator.url,
        )

    if count == 5:
        if not same_token(segments[1], S3_HOST_SEGMENT):
            raise MalformedLocatorError(
                "AWS host must look like '<bucket>.s3.<region>.amazonaws.com'",
                host=locator.host,
                locator=locator.url,
            )
        return HostClassification(
            shape=AddressShape.VIRTUAL,
            service=StorageService.S3,
            bucket=segments[0],
            region=segments[2],
        )

    raise MalformedLocatorError(
        f"AWS host has {count} dot-separated segments; expected 3, 4 or 5",
        host=locator.host,
        locator=locator.url,
    )
