"""Storage locator normalization.

Turns S3 and Google Cloud Storage URLs in any of their historical shapes
into one canonical path-style URL plus the host, region, bucket, key prefix
and credential profile a storage client needs.

Usage:
    python -m locators s3://my-bucket/data/file.nc
    python -m locators https://my-bucket.s3.us-west-2.amazonaws.com/data --json
    python -m locators --check https://example.com/bucket/x
"""

from locators.lib.info import StorageInfo, StorageService
from locators.lib.process import is_storage_locator, process_locator
from locators.lib.uri import Locator

__all__ = [
    "Locator",
    "StorageInfo",
    "StorageService",
    "is_storage_locator",
    "process_locator",
]
