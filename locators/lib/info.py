"""Storage info record produced by locator processing."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

__all__ = ["StorageService", "StorageInfo"]


class StorageService(Enum):
    """Class of storage service a locator addresses."""

    UNKNOWN = "unknown"
    S3 = "s3"  # S3-compatible (AWS)
    GCS = "gcs"  # Google Cloud Storage S3-compatible endpoint


@dataclass
class StorageInfo:
    """Structured fields a storage client needs, recovered from a locator.

    A record is filled progressively by :func:`locators.lib.process.process_locator`;
    it may also be passed in pre-populated so its ``region``, ``bucket`` and
    ``profile`` act as fallbacks for URLs that omit them.

    Attributes:
        host: Canonical endpoint host
        region: Region the bucket lives in
        bucket: Bucket name
        rootkey: Object key prefix, bucket segment removed ("" at bucket root)
        profile: Credential profile name ("no" when none is configured)
        service: Storage service class
    """

    host: Optional[str] = None
    region: Optional[str] = None
    bucket: Optional[str] = None
    rootkey: Optional[str] = None
    profile: Optional[str] = None
    service: StorageService = StorageService.UNKNOWN

    def clone(self) -> "StorageInfo":
        """Return an independent copy of this record."""
        return replace(self)

    def clear(self) -> None:
        """Reset every field. Safe to call repeatedly."""
        self.host = None
        self.region = None
        self.bucket = None
        self.rootkey = None
        self.profile = None
        self.service = StorageService.UNKNOWN

    def dump(self) -> str:
        """Render the record as one diagnostic line.

        Example:
            >>> StorageInfo(host="s3.us-east-1.amazonaws.com", bucket="data").dump()
            'host=s3.us-east-1.amazonaws.com region=null bucket=data rootkey=null profile=null'
        """
        return " ".join(
            f"{name}={_or_null(value)}"
            for name, value in (
                ("host", self.host),
                ("region", self.region),
                ("bucket", self.bucket),
                ("rootkey", self.rootkey),
                ("profile", self.profile),
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "host": self.host,
            "region": self.region,
            "bucket": self.bucket,
            "rootkey": self.rootkey,
            "profile": self.profile,
            "service": self.service.value,
        }

    def __str__(self) -> str:
        return self.dump()


def _or_null(value: Optional[str]) -> str:
    return "null" if value is None else value
